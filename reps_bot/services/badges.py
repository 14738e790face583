from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    emoji: str
    threshold: int  # total reps required


BADGES: tuple[Badge, ...] = (
    Badge("mosquito", "Mosquito", "1000 reps done", "🦟", 1000),
    Badge("tiger", "Tiger", "2000 reps done", "🐯", 2000),
    Badge("triple-monster", "Triple monster", "3000 reps done", "💥", 3000),
    Badge("jaguar", "Not so easy, huh", "4000 reps done", "🐆", 4000),
    Badge("brain", "Big brain", "5000 reps done", "🧠", 5000),
    Badge("zen", "Zen master", "6000 reps done", "😌", 6000),
    Badge("grandingo", "Unstoppable", "7000 reps done", "😤", 7000),
)


def unlocked_badges(total_reps: int) -> List[Badge]:
    return [badge for badge in BADGES if total_reps >= badge.threshold]


def next_badge(total_reps: int) -> Optional[Badge]:
    return next((badge for badge in BADGES if total_reps < badge.threshold), None)

"""
Challenge progression arithmetic.

Pure functions only: day numbering from a start date, daily targets,
lifetime totals and the parameters of user-built challenges.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, TypeVar, Union

from reps_bot.db.models.challenge import ChallengeDifficulty, ChallengeLogic
from reps_bot.schemas import ChallengeDefinition
from reps_bot.services.catalog import HARD_EXERCISES

DateLike = Union[date, datetime]
T = TypeVar("T")

# difficulty -> (base reps on day 0, daily increment)
CUSTOM_DIFFICULTY_PARAMS: dict[ChallengeDifficulty, tuple[int, int]] = {
    ChallengeDifficulty.easy: (5, 1),
    ChallengeDifficulty.medium: (10, 2),
    ChallengeDifficulty.hard: (20, 3),
    ChallengeDifficulty.extreme: (30, 5),
}
HARD_EXERCISE_BASE_DIVISOR = 3
HARD_EXERCISE_INCREMENT_DIVISOR = 2


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike built-in round()."""
    return int(math.floor(value + 0.5))


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_index(start: DateLike, target: DateLike) -> int:
    """Whole calendar days from start to target; never negative."""
    return max(0, (_as_date(target) - _as_date(start)).days)


def target_for_day(definition: ChallengeDefinition, index: int) -> int:
    """Reps due on a given day. Not clamped to the challenge duration."""
    if definition.logic == ChallengeLogic.fixed:
        return definition.base_amount
    return definition.base_amount + index * definition.increment


def total_expected_reps(definition: ChallengeDefinition) -> int:
    n = definition.duration_days
    if definition.logic == ChallengeLogic.fixed:
        return definition.base_amount * n
    # Arithmetic series: n/2 * (2a + (n-1)d)
    return round_half_up(n / 2 * (2 * definition.base_amount + (n - 1) * definition.increment))


@dataclass(frozen=True)
class CustomParams:
    base: int
    increment: int


def derive_custom_params(difficulty: ChallengeDifficulty, exercise_id: str) -> CustomParams:
    base, increment = CUSTOM_DIFFICULTY_PARAMS[ChallengeDifficulty(difficulty)]
    if exercise_id in HARD_EXERCISES:
        base = max(1, round_half_up(base / HARD_EXERCISE_BASE_DIVISOR))
        increment = max(1, round_half_up(increment / HARD_EXERCISE_INCREMENT_DIVISOR))
    return CustomParams(base=base, increment=increment)


@dataclass(frozen=True)
class ChallengeProgress:
    """Where an instance stands today. Steps are validated days, in order."""

    calendar_day_index: int
    steps_completed: int
    next_step_index: int
    next_target: int
    total_target: int
    percent: int
    done_today: bool
    late_days: int


def summarize_progress(
    definition: ChallengeDefinition,
    start: DateLike,
    steps_completed: int,
    total_progress: int,
    today: DateLike,
) -> ChallengeProgress:
    last_day = definition.duration_days - 1
    calendar_day = min(day_index(start, today), last_day)
    next_step = min(steps_completed, last_day)
    total_target = total_expected_reps(definition)
    percent = min(100, round_half_up(total_progress / total_target * 100)) if total_target else 0
    return ChallengeProgress(
        calendar_day_index=calendar_day,
        steps_completed=steps_completed,
        next_step_index=next_step,
        next_target=target_for_day(definition, next_step),
        total_target=total_target,
        percent=percent,
        done_today=steps_completed > calendar_day,
        late_days=max(0, calendar_day - steps_completed),
    )


def first_missed_date(
    definition: ChallengeDefinition,
    start: DateLike,
    validated: Iterable[date],
    today: DateLike,
) -> Optional[date]:
    """Earliest past day of the challenge with no validation, i.e. the next catch-up."""
    start_day, today_day = _as_date(start), _as_date(today)
    done = set(validated)
    last = min(today_day, start_day + timedelta(days=definition.duration_days))
    day = start_day
    while day < last:
        if day not in done:
            return day
        day += timedelta(days=1)
    return None


def sort_for_today(
    items: Iterable[T],
    done_today: Callable[[T], bool] = lambda item: item.done_today,  # type: ignore[attr-defined]
) -> list[T]:
    """Items still due today first; original order kept within each group."""
    return sorted(items, key=lambda item: bool(done_today(item)))

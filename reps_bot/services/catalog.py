from __future__ import annotations

from typing import Optional

from reps_bot.db.models.challenge import ChallengeDifficulty, ChallengeLogic
from reps_bot.schemas import ChallengeDefinition, Exercise


EXERCISES: dict[str, Exercise] = {
    ex.id: ex
    for ex in (
        Exercise(id="pushups", name="Push-ups", emoji="💪", met=8.0, time_per_rep=2.0),
        Exercise(id="dips", name="Dips", emoji="🏋️", met=6.0, time_per_rep=2.5),
        Exercise(id="squats", name="Squats", emoji="🦵", met=5.0, time_per_rep=2.5),
        Exercise(id="pullups", name="Pull-ups", emoji="🤸", met=8.0, time_per_rep=3.0),
        Exercise(id="abs", name="Abs", emoji="🔥", met=3.8, time_per_rep=2.0),
        Exercise(id="lateral_raises", name="Lateral raises", emoji="🏋️", met=3.5, time_per_rep=2.5),
    )
}

# Pull-type movements get smaller rep targets in custom challenges
HARD_EXERCISES = frozenset({"pullups"})


CHALLENGE_TEMPLATES: tuple[ChallengeDefinition, ...] = (
    ChallengeDefinition(
        id="pushups_easy",
        exercise_id="pushups",
        title="Push-ups (Starter)",
        description="1 push-up on day one, +1 every day. Ideal to get started.",
        difficulty=ChallengeDifficulty.easy,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=1,
        increment=1,
    ),
    ChallengeDefinition(
        id="pushups_medium",
        exercise_id="pushups",
        title="Push-ups (Initiate)",
        description="5 push-ups on day one, +2 every day. It starts to burn.",
        difficulty=ChallengeDifficulty.medium,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=5,
        increment=2,
    ),
    ChallengeDefinition(
        id="pushups_hard",
        exercise_id="pushups",
        title="Push-ups (Warrior)",
        description="10 push-ups on day one, +3 every day. For the real ones.",
        difficulty=ChallengeDifficulty.hard,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=10,
        increment=3,
    ),
    ChallengeDefinition(
        id="pullups_easy",
        exercise_id="pullups",
        title="Pull-ups (Starter)",
        description="1 pull-up on day one, +1 every day.",
        difficulty=ChallengeDifficulty.easy,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=1,
        increment=1,
    ),
    ChallengeDefinition(
        id="squats_easy",
        exercise_id="squats",
        title="Squats (Starter)",
        description="5 squats on day one, +2 every day.",
        difficulty=ChallengeDifficulty.easy,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=5,
        increment=2,
    ),
    ChallengeDefinition(
        id="lateral_easy",
        exercise_id="lateral_raises",
        title="3D Shoulders (Starter)",
        description="5 reps on day one, +1 every day.",
        difficulty=ChallengeDifficulty.easy,
        logic=ChallengeLogic.progressive,
        duration_days=30,
        base_amount=5,
        increment=1,
    ),
)

_TEMPLATES_BY_ID = {definition.id: definition for definition in CHALLENGE_TEMPLATES}


def get_definition(challenge_id: str) -> Optional[ChallengeDefinition]:
    """Catalog lookup; custom challenges are never in the catalog."""
    return _TEMPLATES_BY_ID.get(challenge_id)


def get_exercise(exercise_id: str) -> Optional[Exercise]:
    return EXERCISES.get(exercise_id)

from .user import User, Gender
from .challenge import (
    ChallengeDifficulty,
    ChallengeLog,
    ChallengeLogic,
    ChallengeStatus,
    UserChallenge,
)
from .workout import WorkoutSession

__all__ = [
    "User",
    "Gender",
    "ChallengeDifficulty",
    "ChallengeLog",
    "ChallengeLogic",
    "ChallengeStatus",
    "UserChallenge",
    "WorkoutSession",
]

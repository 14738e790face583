from .challenge import ChallengeDefinition, ChallengeHistoryEntry, UserChallengeRead, ValidationResult
from .exercise import Exercise
from .session import SessionExercise, WorkoutSessionRead
from .user import UserProfile, UserStats

__all__ = [
    "ChallengeDefinition",
    "ChallengeHistoryEntry",
    "UserChallengeRead",
    "ValidationResult",
    "Exercise",
    "SessionExercise",
    "WorkoutSessionRead",
    "UserProfile",
    "UserStats",
]

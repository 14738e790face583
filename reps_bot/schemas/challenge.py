from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from reps_bot.db.models.challenge import ChallengeDifficulty, ChallengeLogic, ChallengeStatus


class ChallengeDefinition(BaseModel):
    """Immutable challenge template; instances keep a frozen copy of it."""

    model_config = ConfigDict(frozen=True)

    id: str
    exercise_id: str
    title: str = ""
    description: str = ""
    difficulty: ChallengeDifficulty = ChallengeDifficulty.easy
    logic: ChallengeLogic = ChallengeLogic.progressive
    duration_days: int = Field(gt=0)
    base_amount: int = Field(gt=0)
    increment: int = Field(default=0, ge=0)

    def snapshot(self) -> dict:
        """JSON-safe deep copy stored on the instance."""
        return self.model_dump(mode="json")


class ChallengeHistoryEntry(BaseModel):
    date: dt.date
    amount: int
    completed: bool = True
    catch_up: bool = False

    model_config = ConfigDict(from_attributes=True)


class UserChallengeRead(BaseModel):
    id: int
    user_id: int
    challenge_id: str
    definition_snapshot: Optional[dict] = None
    start_date: dt.datetime
    last_log_date: Optional[dt.datetime] = None
    total_progress: int
    status: ChallengeStatus
    history: list[ChallengeHistoryEntry] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ValidationResult(BaseModel):
    user_challenge_id: int
    date_key: str
    day_index: int
    reps: int
    calories: float
    catch_up: bool
    completed: bool
    session_id: int

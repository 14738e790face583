from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionExercise(BaseModel):
    """One exercise line of a logged session, as typed by the user."""

    exercise_id: str
    reps: int = Field(gt=0)  # per set
    sets: int = Field(default=1, gt=0)
    weight: float = Field(default=0, ge=0)  # added load, kg


class WorkoutSessionRead(BaseModel):
    id: int
    date: datetime
    duration: int
    exercises: list[dict]
    total_reps: int
    total_calories: float
    category: Optional[str] = None
    challenge_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

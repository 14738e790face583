from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from reps_bot.db.models.user import Gender


class UserProfile(BaseModel):
    """Physiological profile consumed by the calorie estimator."""

    gender: Optional[Gender] = None
    weight: Optional[float] = Field(default=None, gt=0)  # kg
    height: Optional[float] = Field(default=None, gt=0)  # cm

    model_config = ConfigDict(from_attributes=True)


class UserStats(BaseModel):
    total_reps: int
    total_sessions: int
    total_calories: float
    current_streak: int
    longest_streak: int
    last_activity: Optional[datetime] = None
    last_connection: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

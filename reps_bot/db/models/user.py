from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, Enum as SAEnum, Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base
from ...utils.timezone_utils import utcnow


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class User(Base):
    """Telegram user with cumulative workout stats and streak state."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, index=True)
    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Physiological profile for calorie estimates
    gender: Mapped[Optional[Gender]] = mapped_column(SAEnum(Gender), nullable=True)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # kg
    height: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # cm

    # Cumulative stats
    total_reps: Mapped[int] = mapped_column(default=0)
    total_sessions: Mapped[int] = mapped_column(default=0)
    total_calories: Mapped[float] = mapped_column(Float, default=0.0)
    last_activity: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # Streak
    current_streak: Mapped[int] = mapped_column(default=0)
    longest_streak: Mapped[int] = mapped_column(default=0)
    last_connection: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    challenges = relationship("UserChallenge", back_populates="user")
    sessions = relationship("WorkoutSession", back_populates="user")

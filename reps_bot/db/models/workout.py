from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base
from ...utils.timezone_utils import utcnow


class WorkoutSession(Base):
    """A logged workout; challenge validations create one with category 'challenge'."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)
    date: Mapped[datetime] = mapped_column(default=utcnow)
    duration: Mapped[int] = mapped_column(default=0)  # seconds
    # [{"id", "name", "emoji", "sets", "reps", "weight"}]
    exercises: Mapped[list] = mapped_column(JSON, default=list)
    total_reps: Mapped[int] = mapped_column(default=0)
    total_calories: Mapped[float] = mapped_column(Float, default=0.0)
    category: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, index=True)
    challenge_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    user = relationship("User", back_populates="sessions")

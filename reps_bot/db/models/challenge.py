from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, Date, Enum as SAEnum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base
from ...utils.timezone_utils import utcnow


class ChallengeLogic(str, Enum):
    fixed = "fixed"
    progressive = "progressive"


class ChallengeDifficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"
    extreme = "extreme"


class ChallengeStatus(str, Enum):
    active = "active"
    completed = "completed"
    abandoned = "abandoned"


class UserChallenge(Base):
    """One user's attempt at a challenge definition."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)
    # Catalog template id or a synthesized custom id
    challenge_id: Mapped[str] = mapped_column(String(64), index=True)
    # Frozen copy of the definition taken at join time; null only for legacy rows
    definition_snapshot: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    start_date: Mapped[dt.datetime] = mapped_column(default=utcnow)
    last_log_date: Mapped[Optional[dt.datetime]] = mapped_column(nullable=True)
    total_progress: Mapped[int] = mapped_column(default=0)
    status: Mapped[ChallengeStatus] = mapped_column(
        SAEnum(ChallengeStatus), default=ChallengeStatus.active, index=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(default=utcnow)

    # Relationships
    user = relationship("User", back_populates="challenges")
    history: Mapped[list[ChallengeLog]] = relationship(
        "ChallengeLog",
        back_populates="user_challenge",
        order_by="ChallengeLog.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ChallengeLog(Base):
    """History entry of a user challenge: one validated calendar day."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_challenge_id: Mapped[int] = mapped_column(
        ForeignKey("user_challenge.id", ondelete="CASCADE"), index=True
    )
    date: Mapped[dt.date] = mapped_column(Date)
    amount: Mapped[int] = mapped_column(default=0)
    completed: Mapped[bool] = mapped_column(default=True)
    catch_up: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[dt.datetime] = mapped_column(default=utcnow)

    user_challenge: Mapped[UserChallenge] = relationship("UserChallenge", back_populates="history")

    __table_args__ = (
        # At most one completed entry per calendar day
        Index(
            "uq_challenge_log_completed_day",
            "user_challenge_id",
            "date",
            unique=True,
            sqlite_where=text("completed = 1"),
            postgresql_where=text("completed"),
        ),
    )

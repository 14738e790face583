from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reps_bot.config import settings
from reps_bot.db.models import User
from reps_bot.errors import NotFoundError
from reps_bot.services.progression import day_index
from reps_bot.utils.timezone_utils import local_date, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakState:
    current_streak: int
    longest_streak: int
    last_connection: date


def next_streak(
    current_streak: int,
    longest_streak: int,
    last_connection: Optional[date],
    today: date,
    epoch: Optional[date] = None,
) -> Optional[StreakState]:
    """
    Streak after a visit on `today`, or None when nothing must be written.

    first visit -> 1; same day -> None; next day -> +1; any gap -> 1.
    A last connection in the future (clock skew) is also None.
    """
    if last_connection is None:
        streak = 1
    else:
        epoch = epoch or settings.STREAK_EPOCH
        diff = day_index(epoch, today) - day_index(epoch, last_connection)
        if diff <= 0:
            return None
        streak = (current_streak or 0) + 1 if diff == 1 else 1
    return StreakState(
        current_streak=streak,
        longest_streak=max(longest_streak or 0, streak),
        last_connection=today,
    )


async def register_visit(
    session: AsyncSession,
    user_id: int,
    now: Optional[datetime] = None,
) -> Optional[StreakState]:
    """Apply the streak rule for a user visit; returns the new state or None if unchanged."""
    now = now or utcnow()
    user = (
        await session.execute(select(User).where(User.id == user_id).with_for_update())
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found.")

    today = local_date(now, user.timezone, settings.DEFAULT_TIMEZONE)
    last = local_date(user.last_connection, user.timezone, settings.DEFAULT_TIMEZONE)
    state = next_streak(user.current_streak, user.longest_streak, last, today)
    if state is None:
        return None

    user.current_streak = state.current_streak
    user.longest_streak = state.longest_streak
    user.last_connection = now
    logger.info(f"Streak of user {user_id} is now {state.current_streak} (best {state.longest_streak})")
    return state

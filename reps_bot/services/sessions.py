"""
Workout sessions: free logging of reps outside any challenge, and the stats
credit shared with challenge validations.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reps_bot.db.models import User, WorkoutSession
from reps_bot.errors import NotFoundError
from reps_bot.schemas import Exercise, SessionExercise, UserProfile
from reps_bot.services.calories import estimate_calories
from reps_bot.services.catalog import get_exercise
from reps_bot.services.users import get_user
from reps_bot.utils.timezone_utils import utcnow

logger = logging.getLogger(__name__)

FREE_SESSION_CATEGORY = "free"


def exercise_entry(exercise: Exercise, reps: int, sets: int = 1, weight: float = 0) -> dict:
    """JSON line stored in `WorkoutSession.exercises`."""
    return {
        "id": exercise.id,
        "name": exercise.name,
        "emoji": exercise.emoji,
        "sets": sets,
        "reps": reps,
        "weight": weight,
    }


async def credit_user_stats(
    session: AsyncSession,
    user_id: int,
    reps: int,
    calories: float,
    now: datetime,
) -> None:
    """Add one session to the user's totals with SQL-side increments."""
    await session.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            total_reps=User.total_reps + reps,
            total_sessions=User.total_sessions + 1,
            total_calories=User.total_calories + calories,
            last_activity=now,
        )
    )


async def log_session(
    session: AsyncSession,
    user_id: int,
    exercises: Sequence[SessionExercise],
    now: Optional[datetime] = None,
    duration: int = 0,
) -> WorkoutSession:
    """
    Record a free workout session and credit the user's stats.

    Raises:
        ValueError: no exercise lines
        NotFoundError: unknown user or exercise
    """
    if not exercises:
        raise ValueError("a session needs at least one exercise")
    now = now or utcnow()

    user = await get_user(session, user_id)
    profile = UserProfile.model_validate(user)

    entries = []
    total_reps = 0
    total_calories = 0.0
    for line in exercises:
        exercise = get_exercise(line.exercise_id)
        if exercise is None:
            raise NotFoundError(f"Unknown exercise: {line.exercise_id}")
        reps = line.reps * line.sets
        entries.append(exercise_entry(exercise, line.reps, line.sets, line.weight))
        total_reps += reps
        total_calories += estimate_calories(profile, exercise, reps)
    total_calories = round(total_calories, 2)

    workout = WorkoutSession(
        user_id=user_id,
        date=now,
        duration=duration,
        exercises=entries,
        total_reps=total_reps,
        total_calories=total_calories,
        category=FREE_SESSION_CATEGORY,
        challenge_id=None,
        created_at=now,
    )
    session.add(workout)
    await credit_user_stats(session, user_id, total_reps, total_calories, now)
    await session.flush()

    logger.info(f"User {user_id} logged session {workout.id}: {total_reps} reps, {total_calories} kcal")
    return workout


async def recent_sessions(session: AsyncSession, user_id: int, limit: int = 50) -> List[WorkoutSession]:
    """Latest sessions first, challenge validations included."""
    result = await session.execute(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.date.desc(), WorkoutSession.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())

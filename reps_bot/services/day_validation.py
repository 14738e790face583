"""
Day validation: the one multi-record write of the challenge engine.

A validation records the day in the challenge history, creates the matching
workout session and credits the user's cumulative stats. All of it happens
in the caller's transaction, so any error leaves nothing behind.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reps_bot.config import settings
from reps_bot.db.models import ChallengeLog, ChallengeStatus, User, WorkoutSession
from reps_bot.errors import AlreadyValidatedError, ChallengeNotActiveError, NotFoundError
from reps_bot.schemas import Exercise, UserProfile, ValidationResult
from reps_bot.services.calories import estimate_calories
from reps_bot.services.catalog import get_exercise
from reps_bot.services.challenge_manager import ChallengeManager, resolve_definition
from reps_bot.services.progression import day_index
from reps_bot.services.sessions import credit_user_stats, exercise_entry
from reps_bot.utils.timezone_utils import local_date, utcnow

logger = logging.getLogger(__name__)

SESSION_CATEGORY = "challenge"


async def validate_day(
    session: AsyncSession,
    user_challenge_id: int,
    user_id: int,
    reps: int,
    validation_date: Optional[Union[date, datetime]] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """
    Validate one calendar day of a user challenge.

    Args:
        session: Database session (one transaction, see `session_scope`)
        user_challenge_id: Instance being validated
        user_id: Owner; gets the session and the stats
        reps: Reps done for that day
        validation_date: Day being validated, user-local. Defaults to today;
            an earlier day is a catch-up. Datetimes are read as UTC.
        now: Current UTC time (naive)

    Raises:
        NotFoundError: unknown instance or user, or instance owned by someone else
        DefinitionMissingError: no snapshot and no catalog entry
        AlreadyValidatedError: the day already has a completed entry
        ChallengeNotActiveError: instance is completed or abandoned
        ValueError: non-positive reps, or a day before the start or after today
    """
    if reps <= 0:
        raise ValueError("reps must be positive")
    now = now or utcnow()

    # Row lock: concurrent validations of the same instance run one after another
    instance = await ChallengeManager.get_instance(session, user_challenge_id, user_id, for_update=True)
    definition = resolve_definition(instance)

    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    tz = user.timezone
    today = local_date(now, tz, settings.DEFAULT_TIMEZONE)
    if validation_date is None:
        validation_date = today
    elif isinstance(validation_date, datetime):
        validation_date = local_date(validation_date, tz, settings.DEFAULT_TIMEZONE)
    date_key = validation_date.isoformat()

    if any(entry.completed and entry.date == validation_date for entry in instance.history):
        raise AlreadyValidatedError()
    if instance.status != ChallengeStatus.active:
        raise ChallengeNotActiveError()

    start = local_date(instance.start_date, tz, settings.DEFAULT_TIMEZONE)
    if not start <= validation_date <= today:
        raise ValueError(f"{date_key} is outside the challenge days {start.isoformat()}..{today.isoformat()}")
    index = day_index(start, validation_date)
    catch_up = index < day_index(start, today)

    exercise = get_exercise(definition.exercise_id) or Exercise(
        id=definition.exercise_id, name=definition.exercise_id, emoji="💪"
    )
    calories = estimate_calories(UserProfile.model_validate(user), exercise, reps)

    workout = WorkoutSession(
        user_id=user_id,
        date=now,
        duration=0,
        exercises=[exercise_entry(exercise, reps)],
        total_reps=reps,
        total_calories=calories,
        category=SESSION_CATEGORY,
        challenge_id=instance.challenge_id,
        created_at=now,
    )
    session.add(workout)

    await credit_user_stats(session, user_id, reps, calories, now)

    finished = index >= definition.duration_days - 1
    instance.history.append(
        ChallengeLog(date=validation_date, amount=reps, completed=True, catch_up=catch_up, created_at=now)
    )
    instance.total_progress += reps
    instance.last_log_date = now
    instance.status = ChallengeStatus.completed if finished else ChallengeStatus.active

    try:
        await session.flush()
    except IntegrityError as exc:
        # Unique day index caught a validation committed by a concurrent request
        raise AlreadyValidatedError() from exc

    logger.info(
        f"Validated {date_key} of instance {user_challenge_id} for user {user_id}: "
        f"{reps} reps, day {index}, catch_up={catch_up}, completed={finished}"
    )
    return ValidationResult(
        user_challenge_id=user_challenge_id,
        date_key=date_key,
        day_index=index,
        reps=reps,
        calories=calories,
        catch_up=catch_up,
        completed=finished,
        session_id=workout.id,
    )

from __future__ import annotations

import logging
from typing import Optional

from aiogram import Router, types
from aiogram.filters import Command, CommandObject
from pydantic import ValidationError

from reps_bot.context import AppContext
from reps_bot.errors import ChallengeError
from reps_bot.schemas import Exercise, SessionExercise
from reps_bot.services.catalog import EXERCISES
from reps_bot.services.sessions import log_session, recent_sessions
from reps_bot.services.users import get_user
from reps_bot.utils.timezone_utils import get_user_local_time

logger = logging.getLogger(__name__)

router = Router()

HISTORY_SIZE = 10
LOG_USAGE = "Usage: /log pushups 20 [sets]\nExercises: " + ", ".join(EXERCISES)


def _normalize(name: str) -> str:
    return name.lower().replace("-", "").replace("_", "").replace(" ", "")


def find_exercise(query: str) -> Optional[Exercise]:
    """Match "pushups", "push-ups" or "Push-ups" to a catalog exercise."""
    wanted = _normalize(query)
    for exercise in EXERCISES.values():
        if wanted in (_normalize(exercise.id), _normalize(exercise.name)):
            return exercise
    return None


@router.message(Command("log"))
async def log_handler(
    message: types.Message,
    command: CommandObject,
    ctx: AppContext,
    db_user_id: Optional[int] = None,
) -> None:
    if db_user_id is None:
        return
    parts = (command.args or "").split()
    if len(parts) < 2:
        await message.answer(LOG_USAGE)
        return
    exercise = find_exercise(parts[0])
    if exercise is None:
        await message.answer(f"Unknown exercise.\n{LOG_USAGE}")
        return
    try:
        line = SessionExercise(
            exercise_id=exercise.id,
            reps=int(parts[1]),
            sets=int(parts[2]) if len(parts) > 2 else 1,
        )
    except (ValueError, ValidationError):
        await message.answer(LOG_USAGE)
        return

    try:
        async with ctx.transaction() as session:
            workout = await log_session(session, db_user_id, [line])
    except ChallengeError as e:
        logger.info(f"Rejected /log for user {db_user_id}: {e}")
        await message.answer(e.user_message)
        return
    await message.answer(
        f"{exercise.emoji} Logged {workout.total_reps} {exercise.name.lower()} · {workout.total_calories:g} kcal"
    )


@router.message(Command("history"))
async def history_handler(message: types.Message, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        return
    async with ctx.transaction() as session:
        user = await get_user(session, db_user_id)
        workouts = await recent_sessions(session, db_user_id, limit=HISTORY_SIZE)
        tz = user.timezone

    if not workouts:
        await message.answer("No session yet. Try /log pushups 20")
        return
    lines = ["🗓 <b>Recent sessions</b>"]
    for workout in workouts:
        when = get_user_local_time(tz, workout.date, ctx.settings.DEFAULT_TIMEZONE).strftime("%d.%m %H:%M")
        names = ", ".join(f"{e['emoji']} {e['reps']}x{e['sets']}" for e in workout.exercises)
        tag = " 🏆" if workout.category == "challenge" else ""
        lines.append(f"{when} · {names} · {workout.total_reps} reps{tag}")
    await message.answer("\n".join(lines))

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup

from reps_bot.context import AppContext
from reps_bot.db.models import ChallengeDifficulty, UserChallenge
from reps_bot.errors import ChallengeError
from reps_bot.keyboards.common import (
    CUSTOM_DURATIONS,
    abandon_confirm_keyboard,
    catalog_keyboard,
    challenge_detail_keyboard,
    challenges_list_keyboard,
    challenges_menu,
    custom_difficulty_keyboard,
    custom_duration_keyboard,
    custom_exercise_keyboard,
)
from reps_bot.schemas import ChallengeDefinition
from reps_bot.services.catalog import CHALLENGE_TEMPLATES, EXERCISES, get_exercise
from reps_bot.services.challenge_manager import ChallengeManager, resolve_definition
from reps_bot.services.day_validation import validate_day
from reps_bot.services.progression import (
    ChallengeProgress,
    day_index,
    derive_custom_params,
    first_missed_date,
    sort_for_today,
    summarize_progress,
    target_for_day,
    total_expected_reps,
)
from reps_bot.services.users import get_user
from reps_bot.utils.timezone_utils import local_date, utcnow

logger = logging.getLogger(__name__)

router = Router()


class CustomChallengeForm(StatesGroup):
    exercise = State()
    duration = State()
    difficulty = State()


@dataclass
class _Overview:
    instance: UserChallenge
    definition: ChallengeDefinition
    progress: ChallengeProgress
    start: date
    today: date
    validated_today: bool
    missed: Optional[date]


def _overview(instance: UserChallenge, tz: Optional[str], default_tz: str) -> _Overview:
    definition = resolve_definition(instance)
    today = local_date(utcnow(), tz, default_tz)
    start = local_date(instance.start_date, tz, default_tz)
    validated = [entry.date for entry in instance.history if entry.completed]
    progress = summarize_progress(definition, start, len(validated), instance.total_progress, today)
    return _Overview(
        instance=instance,
        definition=definition,
        progress=progress,
        start=start,
        today=today,
        validated_today=today in validated,
        missed=first_missed_date(definition, start, validated, today),
    )


def _detail_text(ov: _Overview) -> str:
    p = ov.progress
    exercise = get_exercise(ov.definition.exercise_id)
    emoji = exercise.emoji if exercise else "🏆"
    lines = [
        f"{emoji} <b>{ov.definition.title}</b>",
        ov.definition.description,
        "",
        f"Day {p.calendar_day_index + 1}/{ov.definition.duration_days}",
        f"Next target: {p.next_target} reps",
        f"Progress: {ov.instance.total_progress}/{p.total_target} reps ({p.percent}%)",
    ]
    if ov.validated_today:
        lines.append("✅ Done for today")
    if p.late_days:
        lines.append(f"⚠️ {p.late_days} day(s) behind")
    return "\n".join(lines)


@router.callback_query(F.data == "menu_challenges")
async def menu_challenges(cb: types.CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await cb.message.edit_text("Challenges:", reply_markup=challenges_menu())
    await cb.answer()


@router.callback_query(F.data == "ch_catalog")
async def ch_catalog(cb: types.CallbackQuery) -> None:
    items = [
        (d.id, f"{d.title} · {total_expected_reps(d)} reps / {d.duration_days} days")
        for d in CHALLENGE_TEMPLATES
    ]
    await cb.message.edit_text("Pick a challenge to join:", reply_markup=catalog_keyboard(items))
    await cb.answer()


@router.callback_query(F.data.startswith("ch_join:"))
async def ch_join(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    template_id = cb.data.split(":", 1)[1]
    try:
        async with ctx.transaction() as session:
            await ChallengeManager.join(session, db_user_id, template_id)
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return
    await cb.answer("Let's go! 🚀")
    await _render_list(cb, ctx, db_user_id)


@router.callback_query(F.data == "ch_list")
async def ch_list(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is not None:
        await _render_list(cb, ctx, db_user_id)
    await cb.answer()


async def _render_list(cb: types.CallbackQuery, ctx: AppContext, user_id: int) -> None:
    async with ctx.transaction() as session:
        user = await get_user(session, user_id)
        instances = await ChallengeManager.list_active(session, user_id)
        overviews = [_overview(i, user.timezone, ctx.settings.DEFAULT_TIMEZONE) for i in instances]

    overviews = sort_for_today(overviews, lambda ov: ov.validated_today)
    items = [
        (
            ov.instance.id,
            f"{'✅' if ov.validated_today else '⏳'} {ov.definition.title} · {ov.progress.percent}%",
        )
        for ov in overviews
    ]
    done = sum(1 for ov in overviews if ov.validated_today)
    text = f"Your challenges ({done}/{len(overviews)} done today):" if overviews else "No active challenge yet."
    await cb.message.edit_text(text, reply_markup=challenges_list_keyboard(items))


async def _show_instance(cb: types.CallbackQuery, ctx: AppContext, ch_id: int, user_id: int) -> None:
    async with ctx.transaction() as session:
        user = await get_user(session, user_id)
        instance = await ChallengeManager.get_instance(session, ch_id, user_id)
        ov = _overview(instance, user.timezone, ctx.settings.DEFAULT_TIMEZONE)
    await cb.message.edit_text(
        _detail_text(ov),
        reply_markup=challenge_detail_keyboard(ch_id, ov.validated_today, ov.missed is not None),
    )


@router.callback_query(F.data.startswith("ch_open:"))
async def ch_open(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    ch_id = int(cb.data.split(":", 1)[1])
    try:
        await _show_instance(cb, ctx, ch_id, db_user_id)
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return
    await cb.answer()


@router.callback_query(F.data.startswith("ch_done:"))
async def ch_done(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    ch_id = int(cb.data.split(":", 1)[1])
    try:
        async with ctx.transaction() as session:
            user = await get_user(session, db_user_id)
            instance = await ChallengeManager.get_instance(session, ch_id, db_user_id)
            ov = _overview(instance, user.timezone, ctx.settings.DEFAULT_TIMEZONE)
            result = await validate_day(session, ch_id, db_user_id, ov.progress.next_target, ov.today)
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return

    if result.completed:
        await cb.answer(f"🏆 Challenge completed! {result.reps} reps", show_alert=True)
        await _render_list(cb, ctx, db_user_id)
        return
    await cb.answer(f"Validated ✅ {result.reps} reps · {result.calories:g} kcal")
    await _show_instance(cb, ctx, ch_id, db_user_id)


@router.callback_query(F.data.startswith("ch_catchup:"))
async def ch_catchup(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    ch_id = int(cb.data.split(":", 1)[1])
    try:
        async with ctx.transaction() as session:
            user = await get_user(session, db_user_id)
            instance = await ChallengeManager.get_instance(session, ch_id, db_user_id)
            ov = _overview(instance, user.timezone, ctx.settings.DEFAULT_TIMEZONE)
            if ov.missed is None:
                await cb.answer("Nothing to catch up 👌")
                return
            reps = target_for_day(ov.definition, day_index(ov.start, ov.missed))
            result = await validate_day(session, ch_id, db_user_id, reps, ov.missed)
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return

    await cb.answer(f"Caught up {result.date_key} ✅ {result.reps} reps")
    if result.completed:
        await _render_list(cb, ctx, db_user_id)
        return
    await _show_instance(cb, ctx, ch_id, db_user_id)


@router.callback_query(F.data.startswith("ch_abandon:"))
async def ch_abandon(cb: types.CallbackQuery) -> None:
    ch_id = int(cb.data.split(":", 1)[1])
    await cb.message.edit_text(
        "Abandon this challenge? Its history will be kept.",
        reply_markup=abandon_confirm_keyboard(ch_id),
    )
    await cb.answer()


@router.callback_query(F.data.startswith("ch_abandon_yes:"))
async def ch_abandon_yes(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    ch_id = int(cb.data.split(":", 1)[1])
    try:
        async with ctx.transaction() as session:
            await ChallengeManager.abandon(session, ch_id, user_id=db_user_id)
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return
    await cb.answer("Challenge stopped")
    await _render_list(cb, ctx, db_user_id)


# --- Custom challenge wizard ---


@router.callback_query(F.data == "ch_custom")
async def ch_custom(cb: types.CallbackQuery, state: FSMContext) -> None:
    await state.set_state(CustomChallengeForm.exercise)
    exercises = [(ex.id, f"{ex.emoji} {ex.name}") for ex in EXERCISES.values()]
    await cb.message.edit_text("Step 1/3: pick your exercise", reply_markup=custom_exercise_keyboard(exercises))
    await cb.answer()


@router.callback_query(CustomChallengeForm.exercise, F.data.startswith("chc_ex:"))
async def ch_custom_exercise(cb: types.CallbackQuery, state: FSMContext) -> None:
    await state.update_data(exercise_id=cb.data.split(":", 1)[1])
    await state.set_state(CustomChallengeForm.duration)
    await cb.message.edit_text("Step 2/3: how long?", reply_markup=custom_duration_keyboard())
    await cb.answer()


@router.callback_query(CustomChallengeForm.duration, F.data.startswith("chc_days:"))
async def ch_custom_duration(cb: types.CallbackQuery, state: FSMContext) -> None:
    days = int(cb.data.split(":", 1)[1])
    if days not in CUSTOM_DURATIONS:
        await cb.answer()
        return
    data = await state.get_data()
    await state.update_data(duration_days=days)
    await state.set_state(CustomChallengeForm.difficulty)

    options = []
    for difficulty in ChallengeDifficulty:
        params = derive_custom_params(difficulty, data["exercise_id"])
        preview = ChallengeDefinition(
            id="preview",
            exercise_id=data["exercise_id"],
            duration_days=days,
            base_amount=params.base,
            increment=params.increment,
        )
        options.append(
            (
                difficulty.value,
                f"{difficulty.value.title()}: {params.base} reps, +{params.increment}/day · "
                f"{total_expected_reps(preview)} total",
            )
        )
    await cb.message.edit_text("Step 3/3: which difficulty?", reply_markup=custom_difficulty_keyboard(options))
    await cb.answer()


@router.callback_query(CustomChallengeForm.difficulty, F.data.startswith("chc_diff:"))
async def ch_custom_difficulty(
    cb: types.CallbackQuery,
    state: FSMContext,
    ctx: AppContext,
    db_user_id: Optional[int] = None,
) -> None:
    if db_user_id is None:
        await cb.answer()
        return
    data = await state.get_data()
    try:
        difficulty = ChallengeDifficulty(cb.data.split(":", 1)[1])
        async with ctx.transaction() as session:
            await ChallengeManager.create_custom(
                session, db_user_id, data["exercise_id"], int(data["duration_days"]), difficulty
            )
    except ChallengeError as e:
        logger.info(f"Rejected {cb.data} for user {db_user_id}: {e}")
        await cb.answer(e.user_message, show_alert=True)
        return
    finally:
        await state.clear()

    await cb.answer("Custom challenge created! 🔥")
    await _render_list(cb, ctx, db_user_id)

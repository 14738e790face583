from __future__ import annotations

from typing import Optional

from aiogram import F, Router, types
from aiogram.filters import Command, CommandObject, CommandStart

from reps_bot.context import AppContext
from reps_bot.db.models import Gender
from reps_bot.keyboards.common import back_main_menu, main_menu
from reps_bot.schemas import UserStats
from reps_bot.services.badges import next_badge, unlocked_badges
from reps_bot.services.users import get_user
from reps_bot.utils.timezone_utils import get_timezone_display_name, validate_timezone

router = Router()


HELP_TEXT = (
    "🏆 <b>Challenges</b>: join one from the catalog or build your own, then validate "
    "each day with the reps it asks for. Missed a day? Catch it up later.\n"
    "🔥 <b>Streak</b>: open the bot every day to keep it going.\n\n"
    "/log pushups 20 · log reps outside a challenge\n"
    "/history · your last sessions\n"
    "/stats · your totals and badges\n"
    "/timezone Europe/Paris · days are counted in your timezone\n"
    "/profile 75 180 male · weight (kg), height (cm), gender for calorie estimates"
)


@router.message(CommandStart())
async def start_handler(message: types.Message) -> None:
    await message.answer(
        "Welcome! Small daily reps, big results.\n\nPick a section:",
        reply_markup=main_menu(),
    )


@router.callback_query(F.data == "back_main")
async def back_main(cb: types.CallbackQuery) -> None:
    await cb.message.edit_text("Pick a section:", reply_markup=main_menu())
    await cb.answer()


@router.callback_query(F.data == "help")
async def help_cb(cb: types.CallbackQuery) -> None:
    await cb.message.edit_text(HELP_TEXT, reply_markup=back_main_menu())
    await cb.answer()


async def _stats_text(ctx: AppContext, user_id: int) -> str:
    async with ctx.transaction() as session:
        stats = UserStats.model_validate(await get_user(session, user_id))

    lines = [
        "📊 <b>Your stats</b>",
        f"Reps: {stats.total_reps}",
        f"Sessions: {stats.total_sessions}",
        f"Calories: {stats.total_calories:.0f} kcal",
        f"🔥 Streak: {stats.current_streak} day(s) (best {stats.longest_streak})",
    ]
    badges = unlocked_badges(stats.total_reps)
    if badges:
        lines.append("Badges: " + " ".join(b.emoji for b in badges))
    upcoming = next_badge(stats.total_reps)
    if upcoming:
        lines.append(f"Next badge {upcoming.emoji} {upcoming.name}: {upcoming.threshold - stats.total_reps} reps to go")
    return "\n".join(lines)


@router.message(Command("stats"))
async def stats_handler(message: types.Message, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is None:
        return
    await message.answer(await _stats_text(ctx, db_user_id), reply_markup=back_main_menu())


@router.callback_query(F.data == "menu_stats")
async def stats_cb(cb: types.CallbackQuery, ctx: AppContext, db_user_id: Optional[int] = None) -> None:
    if db_user_id is not None:
        await cb.message.edit_text(await _stats_text(ctx, db_user_id), reply_markup=back_main_menu())
    await cb.answer()


@router.message(Command("timezone"))
async def timezone_handler(
    message: types.Message,
    command: CommandObject,
    ctx: AppContext,
    db_user_id: Optional[int] = None,
) -> None:
    if db_user_id is None:
        return
    tz = (command.args or "").strip()
    if not tz or not validate_timezone(tz):
        await message.answer("Usage: /timezone Europe/Paris (or UTC+2)")
        return
    async with ctx.transaction() as session:
        user = await get_user(session, db_user_id)
        user.timezone = tz
    await message.answer(f"Timezone set to {get_timezone_display_name(tz)} ✅")


@router.message(Command("profile"))
async def profile_handler(
    message: types.Message,
    command: CommandObject,
    ctx: AppContext,
    db_user_id: Optional[int] = None,
) -> None:
    """Quick profile: /profile <weight kg> <height cm> [male|female|other]."""
    if db_user_id is None:
        return
    parts = (command.args or "").split()
    try:
        weight, height = float(parts[0]), float(parts[1])
        gender = Gender(parts[2].lower()) if len(parts) > 2 else None
    except (IndexError, ValueError):
        await message.answer("Usage: /profile 75 180 male")
        return
    if weight <= 0 or height <= 0:
        await message.answer("Weight and height must be positive.")
        return
    async with ctx.transaction() as session:
        user = await get_user(session, db_user_id)
        user.weight = weight
        user.height = height
        if gender is not None:
            user.gender = gender
    await message.answer("Profile updated ✅")

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

CUSTOM_DURATIONS = (30, 60, 90, 365)


def main_menu() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="🏆 Challenges", callback_data="menu_challenges"),
                InlineKeyboardButton(text="📊 Stats", callback_data="menu_stats"),
            ],
            [
                InlineKeyboardButton(text="❓ Help", callback_data="help"),
            ],
        ]
    )


def back_main_menu() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="⬅️ Back", callback_data="back_main")]])


def challenges_menu() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="📃 My challenges", callback_data="ch_list"),
                InlineKeyboardButton(text="📚 Catalog", callback_data="ch_catalog"),
            ],
            [
                InlineKeyboardButton(text="➕ Create my own", callback_data="ch_custom"),
            ],
            [
                InlineKeyboardButton(text="⬅️ Back", callback_data="back_main"),
            ],
        ]
    )


def catalog_keyboard(items: list[tuple[str, str]]) -> InlineKeyboardMarkup:
    rows = [[InlineKeyboardButton(text=title, callback_data=f"ch_join:{template_id}")] for template_id, title in items]
    rows.append([InlineKeyboardButton(text="⬅️ Back", callback_data="menu_challenges")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def challenges_list_keyboard(ch_items: list[tuple[int, str]]) -> InlineKeyboardMarkup:
    rows = [[InlineKeyboardButton(text=title, callback_data=f"ch_open:{ch_id}")] for ch_id, title in ch_items]
    rows.append([InlineKeyboardButton(text="⬅️ Back", callback_data="menu_challenges")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def challenge_detail_keyboard(ch_id: int, done_today: bool, late: bool) -> InlineKeyboardMarkup:
    rows = []
    if not done_today:
        rows.append([InlineKeyboardButton(text="✅ Validate today", callback_data=f"ch_done:{ch_id}")])
    if late:
        rows.append([InlineKeyboardButton(text="⏪ Catch up a missed day", callback_data=f"ch_catchup:{ch_id}")])
    rows.append(
        [
            InlineKeyboardButton(text="🏳️ Abandon", callback_data=f"ch_abandon:{ch_id}"),
            InlineKeyboardButton(text="⬅️ Back", callback_data="ch_list"),
        ]
    )
    return InlineKeyboardMarkup(inline_keyboard=rows)


def abandon_confirm_keyboard(ch_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="Yes, abandon", callback_data=f"ch_abandon_yes:{ch_id}"),
                InlineKeyboardButton(text="No", callback_data=f"ch_open:{ch_id}"),
            ]
        ]
    )


def custom_exercise_keyboard(exercises: list[tuple[str, str]]) -> InlineKeyboardMarkup:
    rows = []
    for i in range(0, len(exercises), 2):
        rows.append(
            [InlineKeyboardButton(text=label, callback_data=f"chc_ex:{ex_id}") for ex_id, label in exercises[i:i + 2]]
        )
    rows.append([InlineKeyboardButton(text="⬅️ Back", callback_data="menu_challenges")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def custom_duration_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=f"{days} days", callback_data=f"chc_days:{days}") for days in CUSTOM_DURATIONS],
            [InlineKeyboardButton(text="⬅️ Back", callback_data="ch_custom")],
        ]
    )


def custom_difficulty_keyboard(options: list[tuple[str, str]]) -> InlineKeyboardMarkup:
    rows = [[InlineKeyboardButton(text=label, callback_data=f"chc_diff:{value}")] for value, label in options]
    rows.append([InlineKeyboardButton(text="⬅️ Back", callback_data="ch_custom")])
    return InlineKeyboardMarkup(inline_keyboard=rows)

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User as TelegramUser

from reps_bot.context import AppContext
from reps_bot.services.streaks import register_visit
from reps_bot.services.users import get_or_create_user

logger = logging.getLogger(__name__)


class VisitMiddleware(BaseMiddleware):
    """Registers every incoming message or button press as a user visit.

    Makes sure the user row exists, runs the daily streak rule (a no-op after
    the first visit of the day) and hands the internal user id to handlers
    as `db_user_id`.
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        from_user: TelegramUser | None = data.get("event_from_user")
        ctx: AppContext | None = data.get("ctx")
        if from_user and ctx:
            async with ctx.transaction() as session:
                db_user = await get_or_create_user(
                    session,
                    telegram_id=from_user.id,
                    username=from_user.username,
                    first_name=from_user.first_name,
                    last_name=from_user.last_name,
                )
                state = await register_visit(session, db_user.id)
            data["db_user_id"] = db_user.id
            if state is not None and state.current_streak > 1:
                logger.debug(f"User {db_user.id} keeps a {state.current_streak}-day streak")
        return await handler(event, data)

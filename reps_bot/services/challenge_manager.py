from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reps_bot.config import settings
from reps_bot.db.models import ChallengeDifficulty, ChallengeLogic, ChallengeStatus, User, UserChallenge
from reps_bot.errors import (
    AlreadyActiveError,
    DefinitionMissingError,
    LimitExceededError,
    NotFoundError,
)
from reps_bot.schemas import ChallengeDefinition
from reps_bot.services.catalog import get_definition, get_exercise
from reps_bot.services.progression import derive_custom_params
from reps_bot.utils.timezone_utils import utcnow

logger = logging.getLogger(__name__)


def resolve_definition(instance: UserChallenge) -> ChallengeDefinition:
    """Definition an instance runs on: its snapshot, or the catalog for legacy rows."""
    if instance.definition_snapshot:
        return ChallengeDefinition.model_validate(instance.definition_snapshot)
    definition = get_definition(instance.challenge_id)
    if definition is None:
        raise DefinitionMissingError(instance.challenge_id)
    return definition


class ChallengeManager:
    """Join, create, list and abandon user challenges.

    Every method works inside the caller's transaction (see `session_scope`);
    the cap check and the insert therefore commit or roll back together.
    """

    @staticmethod
    async def join(
        session: AsyncSession,
        user_id: int,
        challenge_id: str,
        now: Optional[datetime] = None,
        max_active: Optional[int] = None,
    ) -> int:
        """Start a catalog challenge for the user and return the new instance id."""
        definition = get_definition(challenge_id)
        if definition is None:
            raise NotFoundError("This challenge does not exist.")

        await ChallengeManager._lock_user(session, user_id)
        await ChallengeManager._check_active_cap(session, user_id, max_active)

        duplicate = await session.scalar(
            select(UserChallenge.id)
            .where(
                UserChallenge.user_id == user_id,
                UserChallenge.challenge_id == challenge_id,
                UserChallenge.status == ChallengeStatus.active,
            )
            .limit(1)
        )
        if duplicate is not None:
            raise AlreadyActiveError()

        instance_id = await ChallengeManager._create_instance(session, user_id, definition, now)
        logger.info(f"User {user_id} joined challenge {challenge_id} (instance {instance_id})")
        return instance_id

    @staticmethod
    async def create_custom(
        session: AsyncSession,
        user_id: int,
        exercise_id: str,
        duration_days: int,
        difficulty: ChallengeDifficulty,
        now: Optional[datetime] = None,
        max_active: Optional[int] = None,
    ) -> int:
        """Build a progressive challenge from difficulty presets and start it."""
        exercise = get_exercise(exercise_id)
        if exercise is None:
            raise NotFoundError("Unknown exercise.")
        if duration_days <= 0:
            raise ValueError("duration_days must be positive")
        difficulty = ChallengeDifficulty(difficulty)

        await ChallengeManager._lock_user(session, user_id)
        await ChallengeManager._check_active_cap(session, user_id, max_active)

        now = now or utcnow()
        params = derive_custom_params(difficulty, exercise_id)
        stamp_ms = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000)
        definition = ChallengeDefinition(
            id=f"custom_{user_id}_{stamp_ms}",
            exercise_id=exercise_id,
            title=f"{exercise.name} ({difficulty.value}, {duration_days} days)",
            description=f"Start at {params.base} reps, +{params.increment} per day.",
            difficulty=difficulty,
            logic=ChallengeLogic.progressive,
            duration_days=duration_days,
            base_amount=params.base,
            increment=params.increment,
        )

        instance_id = await ChallengeManager._create_instance(session, user_id, definition, now)
        logger.info(f"User {user_id} created custom challenge {definition.id} (instance {instance_id})")
        return instance_id

    @staticmethod
    async def list_active(session: AsyncSession, user_id: int) -> List[UserChallenge]:
        """Active instances of the user. No particular order."""
        result = await session.execute(
            select(UserChallenge).where(
                UserChallenge.user_id == user_id,
                UserChallenge.status == ChallengeStatus.active,
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_instance(
        session: AsyncSession,
        user_challenge_id: int,
        user_id: Optional[int] = None,
        for_update: bool = False,
    ) -> UserChallenge:
        stmt = select(UserChallenge).where(UserChallenge.id == user_challenge_id)
        if for_update:
            stmt = stmt.with_for_update()
        instance = (await session.execute(stmt)).scalar_one_or_none()
        # Someone else's instance is reported exactly like a missing one
        if instance is None or (user_id is not None and instance.user_id != user_id):
            raise NotFoundError("Challenge not found.")
        return instance

    @staticmethod
    async def abandon(session: AsyncSession, user_challenge_id: int, user_id: Optional[int] = None) -> None:
        """Move an instance to the terminal `abandoned` state; history is kept."""
        instance = await ChallengeManager.get_instance(session, user_challenge_id, user_id, for_update=True)
        instance.status = ChallengeStatus.abandoned
        logger.info(f"Challenge instance {user_challenge_id} abandoned")

    @staticmethod
    async def _lock_user(session: AsyncSession, user_id: int) -> User:
        # Serializes concurrent joins of the same user on databases with row locks
        user = (
            await session.execute(select(User).where(User.id == user_id).with_for_update())
        ).scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found.")
        return user

    @staticmethod
    async def _check_active_cap(session: AsyncSession, user_id: int, max_active: Optional[int]) -> None:
        limit = settings.MAX_ACTIVE_CHALLENGES if max_active is None else max_active
        active = await session.scalar(
            select(func.count())
            .select_from(UserChallenge)
            .where(
                UserChallenge.user_id == user_id,
                UserChallenge.status == ChallengeStatus.active,
            )
        )
        if (active or 0) >= limit:
            raise LimitExceededError(f"You can only have {limit} active challenges at a time.")

    @staticmethod
    async def _create_instance(
        session: AsyncSession,
        user_id: int,
        definition: ChallengeDefinition,
        now: Optional[datetime],
    ) -> int:
        instance = UserChallenge(
            user_id=user_id,
            challenge_id=definition.id,
            definition_snapshot=definition.snapshot(),
            start_date=now or utcnow(),
            last_log_date=None,
            total_progress=0,
            status=ChallengeStatus.active,
            history=[],
        )
        session.add(instance)
        await session.flush()
        return instance.id

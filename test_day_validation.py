"""
Day validation: history, workout session and stats written as one unit.
"""
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from reps_bot.db.models import ChallengeDifficulty, ChallengeLog, ChallengeStatus, User, WorkoutSession
from reps_bot.db.session import session_scope
from reps_bot.errors import AlreadyValidatedError, ChallengeNotActiveError, NotFoundError
from reps_bot.schemas import UserChallengeRead
from reps_bot.services.challenge_manager import ChallengeManager
from reps_bot.services.day_validation import validate_day

NOW = datetime(2024, 3, 10, 12, 0)
START = date(2024, 3, 10)


async def _join(factory, user_id, challenge_id="pushups_medium") -> int:
    async with session_scope(factory) as session:
        return await ChallengeManager.join(session, user_id, challenge_id, now=NOW)


async def _validate(factory, instance_id, user_id, reps, **kwargs):
    async with session_scope(factory) as session:
        return await validate_day(session, instance_id, user_id, reps, **kwargs)


async def _user(factory, user_id) -> User:
    async with session_scope(factory) as session:
        return await session.get(User, user_id)


async def _session_count(factory, user_id) -> int:
    async with session_scope(factory) as session:
        return await session.scalar(
            select(func.count()).select_from(WorkoutSession).where(WorkoutSession.user_id == user_id)
        )


@pytest.mark.asyncio
async def test_validate_today(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    result = await _validate(session_factory, instance_id, user_id, 5, now=NOW)

    assert result.date_key == "2024-03-10"
    assert result.day_index == 0
    assert result.catch_up is False
    assert result.completed is False
    assert result.calories > 0

    user = await _user(session_factory, user_id)
    assert user.total_reps == 5
    assert user.total_sessions == 1
    assert user.total_calories == pytest.approx(result.calories)
    assert user.last_activity == NOW

    async with session_scope(session_factory) as session:
        instance = await ChallengeManager.get_instance(session, instance_id)
        assert instance.total_progress == 5
        assert instance.last_log_date == NOW
        assert [(e.date, e.amount, e.catch_up) for e in instance.history] == [(START, 5, False)]
        read = UserChallengeRead.model_validate(instance)
        assert read.status == ChallengeStatus.active
        assert read.history[0].date == START

        workout = await session.get(WorkoutSession, result.session_id)
        assert workout.category == "challenge"
        assert workout.challenge_id == "pushups_medium"
        assert workout.total_reps == 5
        assert workout.exercises == [
            {"id": "pushups", "name": "Push-ups", "emoji": "💪", "sets": 1, "reps": 5, "weight": 0}
        ]


@pytest.mark.asyncio
async def test_second_validation_same_day_changes_nothing(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    await _validate(session_factory, instance_id, user_id, 5, now=NOW)
    before = await _user(session_factory, user_id)

    with pytest.raises(AlreadyValidatedError):
        await _validate(session_factory, instance_id, user_id, 5, now=NOW + timedelta(hours=2))

    after = await _user(session_factory, user_id)
    assert (after.total_reps, after.total_sessions, after.total_calories) == (
        before.total_reps,
        before.total_sessions,
        before.total_calories,
    )
    assert await _session_count(session_factory, user_id) == 1


@pytest.mark.asyncio
async def test_catch_up_previous_day(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    later = NOW + timedelta(days=3)

    result = await _validate(
        session_factory, instance_id, user_id, 7, validation_date=START + timedelta(days=1), now=later
    )
    assert result.day_index == 1
    assert result.catch_up is True

    today = await _validate(session_factory, instance_id, user_id, 11, now=later)
    assert today.day_index == 3
    assert today.catch_up is False

    async with session_scope(session_factory) as session:
        instance = await ChallengeManager.get_instance(session, instance_id)
        assert instance.total_progress == 18
        assert [e.catch_up for e in instance.history] == [True, False]


@pytest.mark.asyncio
async def test_last_day_completes_challenge(session_factory, user_id):
    async with session_scope(session_factory) as session:
        instance_id = await ChallengeManager.create_custom(
            session, user_id, "squats", 2, ChallengeDifficulty.easy, now=NOW
        )

    first = await _validate(session_factory, instance_id, user_id, 5, now=NOW)
    assert first.completed is False
    last = await _validate(session_factory, instance_id, user_id, 6, now=NOW + timedelta(days=1))
    assert last.completed is True

    async with session_scope(session_factory) as session:
        instance = await ChallengeManager.get_instance(session, instance_id)
        assert instance.status == ChallengeStatus.completed
        assert await ChallengeManager.list_active(session, user_id) == []

    with pytest.raises(ChallengeNotActiveError):
        await _validate(session_factory, instance_id, user_id, 7, now=NOW + timedelta(days=2))


@pytest.mark.asyncio
async def test_late_validation_of_last_day_completes(session_factory, user_id):
    async with session_scope(session_factory) as session:
        instance_id = await ChallengeManager.create_custom(
            session, user_id, "abs", 3, ChallengeDifficulty.easy, now=NOW
        )
    # Past the end, the calendar day index is beyond the last day
    result = await _validate(session_factory, instance_id, user_id, 5, now=NOW + timedelta(days=10))
    assert result.day_index == 10
    assert result.completed is True


@pytest.mark.asyncio
async def test_abandoned_challenge_cannot_be_validated(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    async with session_scope(session_factory) as session:
        await ChallengeManager.abandon(session, instance_id, user_id)

    with pytest.raises(ChallengeNotActiveError):
        await _validate(session_factory, instance_id, user_id, 5, now=NOW)
    assert await _session_count(session_factory, user_id) == 0


@pytest.mark.asyncio
async def test_other_user_cannot_validate(session_factory, user_id, other_user_id):
    instance_id = await _join(session_factory, user_id)
    with pytest.raises(NotFoundError):
        await _validate(session_factory, instance_id, other_user_id, 5, now=NOW)

    other = await _user(session_factory, other_user_id)
    assert other.total_reps == 0


@pytest.mark.asyncio
async def test_non_positive_reps(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    with pytest.raises(ValueError):
        await _validate(session_factory, instance_id, user_id, 0, now=NOW)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "validation_date, now",
    [
        (START - timedelta(days=1), NOW),
        (START + timedelta(days=1), NOW),
        (START + timedelta(days=29), NOW + timedelta(days=3)),
    ],
)
async def test_date_outside_challenge_days_rejected(session_factory, user_id, validation_date, now):
    instance_id = await _join(session_factory, user_id)

    with pytest.raises(ValueError):
        await _validate(session_factory, instance_id, user_id, 5, validation_date=validation_date, now=now)

    user = await _user(session_factory, user_id)
    assert (user.total_reps, user.total_sessions) == (0, 0)
    assert await _session_count(session_factory, user_id) == 0
    async with session_scope(session_factory) as session:
        instance = await ChallengeManager.get_instance(session, instance_id)
        assert instance.history == []
        assert instance.total_progress == 0


@pytest.mark.asyncio
async def test_failure_after_validation_rolls_everything_back(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)

    with pytest.raises(RuntimeError):
        async with session_scope(session_factory) as session:
            await validate_day(session, instance_id, user_id, 5, now=NOW)
            raise RuntimeError("connection lost")

    user = await _user(session_factory, user_id)
    assert (user.total_reps, user.total_sessions) == (0, 0)
    assert await _session_count(session_factory, user_id) == 0
    async with session_scope(session_factory) as session:
        instance = await ChallengeManager.get_instance(session, instance_id)
        assert instance.history == []
        assert instance.total_progress == 0


@pytest.mark.asyncio
async def test_validation_date_is_user_local(session_factory, user_id):
    async with session_scope(session_factory) as session:
        user = await session.get(User, user_id)
        user.timezone = "Asia/Tokyo"
    instance_id = await _join(session_factory, user_id)

    # 20:00 UTC is already the next morning in Tokyo
    result = await _validate(session_factory, instance_id, user_id, 7, now=NOW.replace(hour=20))
    assert result.date_key == "2024-03-11"
    assert result.day_index == 1


@pytest.mark.asyncio
async def test_unique_completed_day_index(session_factory, user_id):
    instance_id = await _join(session_factory, user_id)
    with pytest.raises(IntegrityError):
        async with session_scope(session_factory) as session:
            session.add(ChallengeLog(user_challenge_id=instance_id, date=START, amount=5, completed=True))
            session.add(ChallengeLog(user_challenge_id=instance_id, date=START, amount=5, completed=True))
            await session.flush()

    # Uncompleted entries are not constrained
    async with session_scope(session_factory) as session:
        session.add(ChallengeLog(user_challenge_id=instance_id, date=START, amount=0, completed=False))
        session.add(ChallengeLog(user_challenge_id=instance_id, date=START, amount=0, completed=False))

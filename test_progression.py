"""
Progression arithmetic: day numbering, daily targets, totals and custom presets.
"""
from datetime import date, datetime

import pytest
from pydantic import ValidationError

from reps_bot.db.models import ChallengeDifficulty, ChallengeLogic
from reps_bot.schemas import ChallengeDefinition
from reps_bot.services.catalog import get_definition
from reps_bot.services.progression import (
    day_index,
    derive_custom_params,
    first_missed_date,
    round_half_up,
    sort_for_today,
    summarize_progress,
    target_for_day,
    total_expected_reps,
)


def _definition(base=5, increment=2, days=30, logic=ChallengeLogic.progressive) -> ChallengeDefinition:
    return ChallengeDefinition(
        id="t",
        exercise_id="pushups",
        logic=logic,
        duration_days=days,
        base_amount=base,
        increment=increment,
    )


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(6.67) == 7
    assert round_half_up(1.49) == 1


def test_day_index_ignores_time_of_day():
    start = datetime(2024, 3, 1, 23, 59)
    assert day_index(start, datetime(2024, 3, 2, 0, 1)) == 1
    assert day_index(start, datetime(2024, 3, 1, 0, 0)) == 0
    assert day_index(date(2024, 3, 1), date(2024, 3, 5)) == 4


def test_day_index_clamps_before_start():
    assert day_index(date(2024, 3, 10), date(2024, 3, 1)) == 0


def test_day_index_monotonic():
    start = date(2024, 1, 1)
    previous = 0
    for day in range(1, 60):
        current = day_index(start, date.fromordinal(start.toordinal() + day))
        assert current >= previous
        previous = current


def test_target_for_day_progressive():
    medium = get_definition("pushups_medium")
    assert target_for_day(medium, 0) == 5
    assert target_for_day(medium, 4) == 13
    assert target_for_day(_definition(base=10, increment=2), 4) == 18


def test_target_for_day_fixed_ignores_index():
    fixed = _definition(base=20, increment=5, logic=ChallengeLogic.fixed)
    assert target_for_day(fixed, 0) == 20
    assert target_for_day(fixed, 29) == 20


def test_target_not_clamped_past_duration():
    assert target_for_day(_definition(base=1, increment=1, days=3), 10) == 11


def test_total_expected_reps_small_example():
    # 10 + 12 + 14 + 16 + 18
    assert total_expected_reps(_definition(base=10, increment=2, days=5)) == 70


@pytest.mark.parametrize("template_id", ["pushups_easy", "pushups_medium", "pushups_hard", "squats_easy"])
def test_total_matches_sum_of_daily_targets(template_id):
    definition = get_definition(template_id)
    expected = sum(target_for_day(definition, i) for i in range(definition.duration_days))
    assert total_expected_reps(definition) == expected


@pytest.mark.parametrize("logic", list(ChallengeLogic))
@pytest.mark.parametrize("days", [1, 2, 5, 365, 10_000])
@pytest.mark.parametrize("base, increment", [(1, 0), (1, 1), (5, 2), (7, 3), (30, 5)])
def test_closed_form_equals_day_by_day_sum(logic, days, base, increment):
    definition = _definition(base=base, increment=increment, days=days, logic=logic)
    expected = sum(target_for_day(definition, i) for i in range(definition.duration_days))
    assert total_expected_reps(definition) == expected


def test_total_expected_reps_fixed():
    assert total_expected_reps(_definition(base=20, days=30, logic=ChallengeLogic.fixed)) == 600


def test_catalog_pushups_easy_total():
    assert total_expected_reps(get_definition("pushups_easy")) == 465


@pytest.mark.parametrize(
    "difficulty, base, increment",
    [
        (ChallengeDifficulty.easy, 5, 1),
        (ChallengeDifficulty.medium, 10, 2),
        (ChallengeDifficulty.hard, 20, 3),
        (ChallengeDifficulty.extreme, 30, 5),
    ],
)
def test_custom_params_regular_exercise(difficulty, base, increment):
    params = derive_custom_params(difficulty, "pushups")
    assert (params.base, params.increment) == (base, increment)


@pytest.mark.parametrize(
    "difficulty, base, increment",
    [
        # 5/3 -> 2, 1/2 -> 1 (half-up, floor 1)
        (ChallengeDifficulty.easy, 2, 1),
        # 10/3 -> 3, 2/2 -> 1
        (ChallengeDifficulty.medium, 3, 1),
        # 20/3 -> 7, 3/2 = 1.5 -> 2
        (ChallengeDifficulty.hard, 7, 2),
        # 30/3 -> 10, 5/2 = 2.5 -> 3
        (ChallengeDifficulty.extreme, 10, 3),
    ],
)
def test_custom_params_hard_exercise(difficulty, base, increment):
    params = derive_custom_params(difficulty, "pullups")
    assert (params.base, params.increment) == (base, increment)


def test_pullups_start_lower_than_pushups():
    for difficulty in ChallengeDifficulty:
        assert derive_custom_params(difficulty, "pullups").base < derive_custom_params(difficulty, "pushups").base


def test_summarize_progress_fresh_instance():
    progress = summarize_progress(_definition(), date(2024, 3, 1), 0, 0, date(2024, 3, 1))
    assert progress.calendar_day_index == 0
    assert progress.next_target == 5
    assert progress.done_today is False
    assert progress.late_days == 0
    assert progress.percent == 0


def test_summarize_progress_late_and_catching_up():
    # Day 3 of the challenge, only one validated step
    progress = summarize_progress(_definition(), date(2024, 3, 1), 1, 5, date(2024, 3, 4))
    assert progress.calendar_day_index == 3
    assert progress.next_step_index == 1
    assert progress.next_target == 7
    assert progress.late_days == 2
    assert progress.done_today is False


def test_summarize_progress_done_today():
    progress = summarize_progress(_definition(base=10, increment=2, days=5), date(2024, 3, 1), 2, 22, date(2024, 3, 2))
    assert progress.done_today is True
    assert progress.percent == 31  # 22 / 70


def test_summarize_progress_caps_past_last_day():
    definition = _definition(base=10, increment=2, days=5)
    progress = summarize_progress(definition, date(2024, 3, 1), 5, 70, date(2024, 4, 1))
    assert progress.calendar_day_index == 4
    assert progress.next_step_index == 4
    assert progress.percent == 100
    assert progress.done_today is True


def test_first_missed_date():
    start = date(2024, 3, 1)
    validated = [date(2024, 3, 1), date(2024, 3, 3)]
    assert first_missed_date(_definition(), start, validated, date(2024, 3, 4)) == date(2024, 3, 2)


def test_first_missed_date_excludes_today():
    start = date(2024, 3, 1)
    assert first_missed_date(_definition(), start, [date(2024, 3, 1)], date(2024, 3, 2)) is None


def test_first_missed_date_stops_at_duration():
    start = date(2024, 3, 1)
    validated = [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]
    assert first_missed_date(_definition(days=3), start, validated, date(2024, 5, 1)) is None


def test_sort_for_today_is_stable():
    items = [("a", True), ("b", False), ("c", True), ("d", False)]
    ordered = sort_for_today(items, lambda item: item[1])
    assert [name for name, _ in ordered] == ["b", "d", "a", "c"]


def test_amounts_are_whole_reps():
    assert _definition(base=5.0, increment=2.0).base_amount == 5
    with pytest.raises(ValidationError):
        _definition(base=2.5)
    with pytest.raises(ValidationError):
        _definition(increment=0.5)

"""
Calorie estimates and rep badges.
"""
import pytest

from reps_bot.db.models import Gender
from reps_bot.schemas import Exercise, UserProfile
from reps_bot.services.badges import BADGES, next_badge, unlocked_badges
from reps_bot.services.calories import estimate_calories
from reps_bot.services.catalog import get_exercise


def test_no_profile_burns_nothing():
    assert estimate_calories(None, get_exercise("pushups"), 50) == 0.0


def test_male_defaults():
    # (8 * 3.5 * 75 / 200) kcal/min * 2 s per rep * 10 reps
    assert estimate_calories(UserProfile(), get_exercise("pushups"), 10) == pytest.approx(3.5)


def test_female_defaults_use_smaller_body_and_factor():
    profile = UserProfile(gender=Gender.female)
    # 8.4 kcal/min * 2/60 * 165/175 * 0.9 * 10
    assert estimate_calories(profile, get_exercise("pushups"), 10) == pytest.approx(2.38, abs=0.01)


def test_full_profile():
    profile = UserProfile(gender=Gender.male, weight=80, height=180)
    assert estimate_calories(profile, get_exercise("squats"), 20) == pytest.approx(6.0, abs=0.01)


def test_exercise_without_metabolic_data_uses_defaults():
    generic = Exercise(id="burpees", name="Burpees", emoji="💥")
    assert estimate_calories(UserProfile(), generic, 10) == pytest.approx(1.75)


def test_result_has_two_decimals():
    value = estimate_calories(UserProfile(weight=71.3, height=169), get_exercise("dips"), 33)
    assert value == round(value, 2)


def test_profile_reads_orm_like_objects():
    class Row:
        gender = Gender.female
        weight = 55.0
        height = None

    profile = UserProfile.model_validate(Row())
    assert profile.weight == 55.0
    assert profile.height is None


def test_badges_unlock_by_total_reps():
    assert unlocked_badges(999) == []
    assert [b.id for b in unlocked_badges(2500)] == ["mosquito", "tiger"]
    assert len(unlocked_badges(10_000)) == len(BADGES)


def test_next_badge():
    assert next_badge(0).threshold == 1000
    assert next_badge(1000).threshold == 2000
    assert next_badge(7000) is None

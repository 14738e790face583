from __future__ import annotations

from typing import Optional

from reps_bot.db.models.user import Gender
from reps_bot.schemas import Exercise, UserProfile

# Fallbacks for missing profile data: (weight kg, height cm, gender factor)
_GENDER_DEFAULTS = {
    Gender.male: (75.0, 175.0, 1.0),
    Gender.female: (60.0, 165.0, 0.9),
}
DEFAULT_MET = 4.0
DEFAULT_TIME_PER_REP = 2.0
REFERENCE_HEIGHT = 175.0


def estimate_calories(profile: Optional[UserProfile], exercise: Exercise, reps: int) -> float:
    """
    Kcal burned for `reps` repetitions of an exercise.

    ((MET * 3.5 * weight) / 200) is the ACSM cost per minute; it is scaled to the
    time under tension of one rep, by height (longer levers do more work) and by
    a gender factor. Rounded to 2 decimals.
    """
    if profile is None:
        return 0.0

    gender = profile.gender or Gender.male
    default_weight, default_height, gender_factor = _GENDER_DEFAULTS.get(gender, _GENDER_DEFAULTS[Gender.male])
    weight = profile.weight or default_weight
    height = profile.height or default_height

    met = exercise.met or DEFAULT_MET
    time_per_rep = exercise.time_per_rep or DEFAULT_TIME_PER_REP

    kcal_per_minute = (met * 3.5 * weight) / 200
    cost_per_rep = kcal_per_minute * (time_per_rep / 60)
    height_factor = height / REFERENCE_HEIGHT

    return round(cost_per_rep * height_factor * gender_factor * reps, 2)

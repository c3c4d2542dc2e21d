"""Daily macro targets derived from a user profile."""

from meal_planner.domain.nutrition import MacroProfile, MacroSplit, UserProfile

_KCAL_PER_G_PROTEIN = 4
_KCAL_PER_G_CARBS = 4
_KCAL_PER_G_FAT = 9


def resolve_targets(profile: UserProfile | None) -> MacroProfile | None:
    """Return daily targets, or None when the profile sets no calorie goal."""
    if profile is None or not profile.caloric_target:
        return None
    calories = float(profile.caloric_target)
    if calories <= 0:
        return None
    split = profile.macro_split or MacroSplit()
    return MacroProfile(
        calories=calories,
        protein_g=_grams(split.protein_pct, calories, _KCAL_PER_G_PROTEIN),
        carbs_g=_grams(split.carbs_pct, calories, _KCAL_PER_G_CARBS),
        fat_g=_grams(split.fat_pct, calories, _KCAL_PER_G_FAT),
    )


def _grams(percent: float, calories: float, kcal_per_gram: int) -> float:
    return float(round(percent / 100 * calories / kcal_per_gram))

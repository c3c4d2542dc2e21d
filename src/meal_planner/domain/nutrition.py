"""Nutrition domain models."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile for a serving, a day, or a budget."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    @classmethod
    def zero(cls) -> "MacroProfile":
        """Return an empty profile."""
        return cls(0.0, 0.0, 0.0, 0.0)

    def scaled(self, factor: float) -> "MacroProfile":
        """Return every macro multiplied by factor."""
        return MacroProfile(
            calories=self.calories * factor,
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
        )

    def plus(self, other: "MacroProfile") -> "MacroProfile":
        """Return the element-wise sum."""
        return MacroProfile(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )

    def minus(self, other: "MacroProfile") -> "MacroProfile":
        """Return the element-wise difference, floored at zero."""
        return MacroProfile(
            calories=max(0.0, self.calories - other.calories),
            protein_g=max(0.0, self.protein_g - other.protein_g),
            carbs_g=max(0.0, self.carbs_g - other.carbs_g),
            fat_g=max(0.0, self.fat_g - other.fat_g),
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fat_g": self.fat_g,
        }


@dataclass(frozen=True)
class MacroSplit:
    """Percent of calories assigned to each macro."""

    protein_pct: float = 30.0
    carbs_pct: float = 40.0
    fat_pct: float = 30.0


@dataclass(frozen=True)
class UserProfile:
    """Stored profile fields the engine reads."""

    user_id: UUID
    caloric_target: float | None = None
    macro_split: MacroSplit | None = None
    subscription_status: str | None = None

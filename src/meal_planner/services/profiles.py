"""User profile lookups: macro targets and subscription status."""

from collections.abc import Collection
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.nutrition import MacroProfile, UserProfile
from meal_planner.domain.plans import PlanTier
from meal_planner.services.access import PREMIUM_STATUSES, can_use, is_premium_status
from meal_planner.services.targets import resolve_targets


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user, if present."""


@dataclass
class ProfileService:
    """Application service for profile-derived facts."""

    repository: ProfileRepository
    premium_statuses: Collection[str] = PREMIUM_STATUSES

    def get_targets(self, user_id: UUID) -> MacroProfile | None:
        """Return daily macro targets, or None when unconstrained."""
        return resolve_targets(self.repository.get_profile(user_id))

    def get_subscription_status(self, user_id: UUID) -> str | None:
        """Return the user's subscription status, if any."""
        profile = self.repository.get_profile(user_id)
        return profile.subscription_status if profile else None

    def is_premium(self, user_id: UUID) -> bool:
        """Return True when the user has premium access."""
        return is_premium_status(
            self.get_subscription_status(user_id), self.premium_statuses
        )

    def can_use_tier(self, user_id: UUID, tier: PlanTier | str) -> bool:
        """Apply the access gate for this user."""
        return can_use(
            self.get_subscription_status(user_id), tier, self.premium_statuses
        )

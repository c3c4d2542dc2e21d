"""Tier gating shared by every caller that touches premium plans."""

from collections.abc import Collection

from meal_planner.domain.plans import PlanTier

PREMIUM_STATUSES = frozenset({"active", "trialing"})


def is_premium_status(
    subscription_status: str | None,
    premium_statuses: Collection[str] = PREMIUM_STATUSES,
) -> bool:
    """Return True when the subscription status unlocks premium plans."""
    if not subscription_status:
        return False
    return subscription_status.strip().lower() in premium_statuses


def can_use(
    subscription_status: str | None,
    tier: PlanTier | str,
    premium_statuses: Collection[str] = PREMIUM_STATUSES,
) -> bool:
    """Return True when a plan of the given tier is usable with this status."""
    if str(tier).strip().lower() == PlanTier.FREE:
        return True
    return is_premium_status(subscription_status, premium_statuses)

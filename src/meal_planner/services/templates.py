"""Plan template library."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.errors import (
    InvalidMultiplier,
    InvalidTemplate,
    PlanLocked,
    PlanNotFound,
)
from meal_planner.domain.plans import DAY_NAMES, PlanItem, PlanTemplate, PlanTier
from meal_planner.domain.recipes import MealSlot
from meal_planner.services.profiles import ProfileService
from meal_planner.services.scaling import validate_multiplier

_logger = logging.getLogger(__name__)


class TemplateRepository(Protocol):
    """Persistence interface for plan templates."""

    def get_template(self, template_id: UUID) -> PlanTemplate | None:
        """Return a template by id, if present."""

    def list_templates(self, tier: PlanTier | None) -> list[PlanTemplate]:
        """Return templates, optionally filtered by tier."""

    def upsert_template(
        self, template_id: UUID | None, payload: dict[str, object]
    ) -> PlanTemplate:
        """Create or replace a template and return it."""

    def delete_template(self, template_id: UUID) -> None:
        """Delete a template; missing templates are ignored."""


@dataclass(frozen=True)
class TemplateListing:
    """Template as seen by a specific user."""

    template: PlanTemplate
    locked: bool


@dataclass
class TemplateService:
    """Reads templates and applies the access gate for users."""

    repository: TemplateRepository
    profiles: ProfileService

    def get_template(self, template_id: UUID) -> PlanTemplate:
        """Return a template or raise PlanNotFound."""
        template = self.repository.get_template(template_id)
        if template is None:
            raise PlanNotFound
        return template

    def ensure_usable(self, user_id: UUID, template: PlanTemplate) -> None:
        """Raise PlanLocked when the user's subscription does not cover the tier."""
        if not self.profiles.can_use_tier(user_id, template.tier):
            raise PlanLocked

    def list_for_user(
        self, user_id: UUID, tier: PlanTier | None = None
    ) -> list[TemplateListing]:
        """Return templates with a locked flag for this user."""
        return [
            TemplateListing(
                template=template,
                locked=not self.profiles.can_use_tier(user_id, template.tier),
            )
            for template in self.repository.list_templates(tier)
        ]

    def upsert(self, payload: dict[str, object]) -> PlanTemplate:
        """Validate an admin payload and store it."""
        cleaned = clean_template_payload(payload)
        template_id = _template_id(payload.get("id"))
        return self.repository.upsert_template(template_id, cleaned)

    def upsert_many(self, payloads: list[dict[str, object]]) -> list[PlanTemplate]:
        """Validate every payload, then store them in order.

        A single invalid payload rejects the whole batch before anything is
        written; the error message names the offending index.
        """
        if not payloads:
            raise InvalidTemplate("plans must be a non-empty list")
        batch: list[tuple[UUID | None, dict[str, object]]] = []
        for idx, payload in enumerate(payloads):
            if not isinstance(payload, dict):
                raise InvalidTemplate(f"plans[{idx}] must be an object")
            try:
                cleaned = clean_template_payload(payload)
                template_id = _template_id(payload.get("id"))
            except InvalidTemplate as exc:
                raise InvalidTemplate(f"plans[{idx}]: {exc.message}") from exc
            batch.append((template_id, cleaned))
        saved = [
            self.repository.upsert_template(template_id, cleaned)
            for template_id, cleaned in batch
        ]
        _logger.info("Plan templates saved in bulk: count=%s", len(saved))
        return saved

    def delete(self, template_id: UUID) -> None:
        """Delete a template from the library.

        Assignments and planner items already created from it are kept.
        """
        self.repository.delete_template(template_id)
        _logger.info("Plan template deleted", extra={"template_id": str(template_id)})


def clean_template_payload(payload: dict[str, object]) -> dict[str, object]:
    """Return a normalized template payload, raising InvalidTemplate on bad input."""
    title = str(payload.get("title") or "").strip()
    if not title:
        raise InvalidTemplate("title required")
    tier = str(payload.get("tier") or PlanTier.FREE).strip().lower()
    if tier not in {PlanTier.FREE, PlanTier.PREMIUM}:
        raise InvalidTemplate("tier must be 'free' or 'premium'")

    raw_items = payload.get("items") or []
    if not isinstance(raw_items, list):
        raise InvalidTemplate("items must be a list")
    items: list[dict[str, object]] = []
    for idx, raw in enumerate(raw_items):
        if not isinstance(raw, dict) or not raw.get("recipe_id"):
            raise InvalidTemplate(f"items[{idx}].recipe_id required")
        try:
            recipe_id = UUID(str(raw["recipe_id"]))
        except ValueError as exc:
            raise InvalidTemplate(f"items[{idx}].recipe_id invalid") from exc
        day = str(raw.get("day") or "")
        if day not in DAY_NAMES:
            raise InvalidTemplate(f"items[{idx}].day invalid")
        meal_type = str(raw.get("meal_type") or "")
        if meal_type not in {slot.value for slot in MealSlot}:
            raise InvalidTemplate(f"items[{idx}].meal_type invalid")
        multiplier = raw.get("default_multiplier")
        if multiplier is not None:
            try:
                multiplier = validate_multiplier(multiplier)
            except InvalidMultiplier as exc:
                raise InvalidTemplate(
                    f"items[{idx}].default_multiplier must be > 0"
                ) from exc
        items.append(
            {
                "day": day,
                "meal_type": meal_type,
                "recipe_id": str(recipe_id),
                "default_multiplier": multiplier,
            }
        )

    description = payload.get("description")
    image = payload.get("image")
    return {
        "title": title,
        "tier": tier,
        "description": str(description) if description else None,
        "image": str(image) if image else None,
        "items": items,
    }


def _template_id(raw_id: object) -> UUID | None:
    if not raw_id:
        return None
    try:
        return UUID(str(raw_id))
    except ValueError as exc:
        raise InvalidTemplate("id invalid") from exc


def parse_plan_item(row: dict[str, object]) -> PlanItem:
    """Parse a stored template item row."""
    multiplier = row.get("default_multiplier")
    return PlanItem(
        day=str(row["day"]),
        meal_slot=MealSlot(str(row["meal_type"])),
        recipe_id=UUID(str(row["recipe_id"])),
        default_multiplier=float(multiplier) if multiplier is not None else 1.0,
    )

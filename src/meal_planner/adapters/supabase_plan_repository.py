"""Supabase repositories for plan templates and assignments."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from meal_planner.domain.plans import PlanAssignment, PlanTemplate, PlanTier
from meal_planner.services.assignments import AssignmentRepository
from meal_planner.services.templates import TemplateRepository, parse_plan_item


@dataclass
class SupabaseTemplateRepository(TemplateRepository):
    """Supabase-backed plan template library."""

    client: Client

    def get_template(self, template_id: UUID) -> PlanTemplate | None:
        """Return a template by id, if present."""
        response = (
            self.client.table("meal_plan_library")
            .select("*")
            .eq("id", str(template_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def list_templates(self, tier: PlanTier | None) -> list[PlanTemplate]:
        """Return templates ordered by title."""
        request = self.client.table("meal_plan_library").select("*")
        if tier is not None:
            request = request.eq("tier", tier.value)
        response = request.order("title", desc=False).execute()
        return [_parse_template(row) for row in response.data or []]

    def upsert_template(
        self, template_id: UUID | None, payload: dict[str, object]
    ) -> PlanTemplate:
        """Create or replace a template."""
        now = datetime.now(tz=UTC).isoformat()
        table = self.client.table("meal_plan_library")
        if template_id is None:
            response = table.insert({**payload, "created_at": now, "updated_at": now})
        else:
            response = table.update({**payload, "updated_at": now}).eq(
                "id", str(template_id)
            )
        result = response.execute()
        if not result.data:
            raise RuntimeError("Failed to save plan template")
        return _parse_template(result.data[0])

    def delete_template(self, template_id: UUID) -> None:
        """Delete a template row."""
        self.client.table("meal_plan_library").delete().eq(
            "id", str(template_id)
        ).execute()


@dataclass
class SupabaseAssignmentRepository(AssignmentRepository):
    """Stores one current assignment row per user."""

    client: Client

    def get_current(self, user_id: UUID) -> PlanAssignment | None:
        """Return the user's stored assignment, if any."""
        response = (
            self.client.table("meal_plan_assignments")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_assignment(response.data[0])

    def save_current(  # noqa: PLR0913
        self,
        user_id: UUID,
        template_id: UUID,
        start_date: date,
        end_date: date,
        overwrite: bool,
        created_at: datetime,
    ) -> PlanAssignment:
        """Upsert the user's assignment row."""
        response = (
            self.client.table("meal_plan_assignments")
            .upsert(
                {
                    "user_id": str(user_id),
                    "plan_id": str(template_id),
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "overwrite": overwrite,
                    "created_at": created_at.isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save plan assignment")
        return _parse_assignment(response.data[0])


def _parse_template(row: dict[str, object]) -> PlanTemplate:
    tier = str(row.get("tier") or "free").lower()
    return PlanTemplate(
        id=UUID(str(row["id"])),
        title=str(row.get("title") or ""),
        tier=PlanTier.PREMIUM if tier == PlanTier.PREMIUM else PlanTier.FREE,
        items=[parse_plan_item(item) for item in row.get("items") or []],
        description=row.get("description"),
        image=row.get("image"),
    )


def _parse_assignment(row: dict[str, object]) -> PlanAssignment:
    return PlanAssignment(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        template_id=UUID(str(row["plan_id"])),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        end_date=date.fromisoformat(str(row["end_date"])[:10]),
        overwrite=bool(row.get("overwrite", False)),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )

"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, status

from meal_planner.api.dependencies import get_container, parse_id
from meal_planner.api.serializers import serialize_template
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import PlanNotFound

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/plans", dependencies=[Depends(require_admin)])
async def list_plans(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return every plan template."""
    templates = container.template_service.repository.list_templates(None)
    return {"plans": [serialize_template(template) for template in templates]}


@router.put("/plans/bulk", dependencies=[Depends(require_admin)])
async def upsert_plans_bulk(
    payload: dict[str, object] = Body(...),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create or replace several plan templates at once."""
    plans = payload.get("plans")
    if isinstance(plans, dict):
        plans = [plans]
    templates = container.template_service.upsert_many(
        plans if isinstance(plans, list) else []
    )
    return {
        "ok": True,
        "saved": len(templates),
        "plans": [serialize_template(template) for template in templates],
    }


@router.put("/plans", dependencies=[Depends(require_admin)])
async def upsert_plan(
    payload: dict[str, object] = Body(...),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create or replace a plan template."""
    template = container.template_service.upsert(payload)
    return {"ok": True, "plan": serialize_template(template)}


@router.delete("/plans/{plan_id}", dependencies=[Depends(require_admin)])
async def delete_plan(
    plan_id: str,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete a plan template; existing assignments and planner items remain."""
    container.template_service.delete(parse_id(plan_id, PlanNotFound()))
    return {"ok": True}

"""Shared request dependencies."""

from __future__ import annotations

from uuid import UUID

from fastapi import Header, HTTPException, Request, status

from meal_planner.containers import AppContainer
from meal_planner.domain.errors import PlannerError


def get_container(request: Request) -> AppContainer:
    """Return the container stored on the application state."""
    return request.app.state.container


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the calling user from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id.strip())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


def parse_id(value: object, error: PlannerError) -> UUID:
    """Parse a UUID from a request value, raising ``error`` when malformed."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError as exc:
        raise error from exc

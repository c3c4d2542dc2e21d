"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from meal_planner.api.admin import router as admin_router
from meal_planner.api.mealplan import router as mealplan_router
from meal_planner.api.shopping import router as shopping_router
from meal_planner.app_logging import configure_logging
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import PlannerError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Meal Planner")
    app.state.container = container

    app.include_router(mealplan_router)
    app.include_router(shopping_router)
    app.include_router(admin_router)

    @app.exception_handler(PlannerError)
    async def planner_error_handler(
        request: Request, exc: PlannerError
    ) -> JSONResponse:
        logger.info(
            "Request rejected: %s %s -> %s %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app

"""Harvest Guard FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from .api import api_router
from .core.config import settings
from .core.logging_config import setup_logging
from .services.assessment import RiskAssessmentService, build_assessment_service


def create_app(service: RiskAssessmentService | None = None) -> FastAPI:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Initializing %s API (environment provider: %s)", settings.app_name, settings.environment_provider)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.assessment_service = service or build_assessment_service()
    app.include_router(api_router, prefix=settings.api_prefix)
    if settings.metrics_enabled:
        # Cache hit/miss/coalesced counters and fetch latency
        app.mount("/metrics", make_asgi_app())

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Provide a friendly landing response for the bare hostname."""

        return {
            "message": (
                f"{settings.app_name} API is online. Try GET "
                f"{settings.api_prefix}/health for a health check."
            )
        }

    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual run helper
    import uvicorn

    uvicorn.run("harvest_guard.main:app", host=settings.host, port=settings.port, reload=False)

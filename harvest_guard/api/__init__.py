"""API router definitions."""

from fastapi import APIRouter

from .environment import router as environment_router
from .logs import router as logs_router
from .risk import router as risk_router
from .routes import health_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(environment_router)
api_router.include_router(risk_router)
api_router.include_router(logs_router)

__all__ = ["api_router"]

"""API router aggregator."""

from fastapi import APIRouter

from app.api.v1.endpoints import admin, content, profile, subscription

api_router = APIRouter(prefix="/api")

api_router.include_router(content.router)
api_router.include_router(admin.router)
api_router.include_router(profile.router)
api_router.include_router(subscription.router)

__all__ = ["api_router"]

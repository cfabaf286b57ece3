from fastapi import APIRouter

from roomclimate.api.routes import dashboard, readings

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(readings.router, tags=["readings"])
api_router.include_router(dashboard.router, tags=["dashboard"])

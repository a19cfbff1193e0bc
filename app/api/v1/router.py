"""
API v1 router.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import areas, auditors, audits, health, password

api_router = APIRouter()

# Health check endpoint (no prefix, so it's /api/v1/health)
api_router.include_router(health.router, tags=["health"])

api_router.include_router(audits.router, prefix="/audits", tags=["audits"])
api_router.include_router(auditors.router, prefix="/auditors", tags=["auditors"])
api_router.include_router(areas.router, prefix="/areas", tags=["areas"])
api_router.include_router(password.router, prefix="/password", tags=["password"])

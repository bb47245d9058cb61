# app/routers/health.py

from fastapi import APIRouter

from app.config import get_settings

settings = get_settings()
router = APIRouter()


def _configured(*values) -> str:
    return "ok" if all(values) else "not_configured"


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "catalog-import-api",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check: reports which backing services are configured."""
    checks = {
        "database": _configured(settings.supabase_url, settings.supabase_service_role_key),
        "claude": _configured(settings.anthropic_api_key),
    }
    return {
        "status": "ready" if checks["database"] == "ok" else "degraded",
        "checks": checks,
    }

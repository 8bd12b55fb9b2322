from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()

SYSTEM_RATE_LIMIT = "50/minute"


@router.get("/version")
@limiter.limit(SYSTEM_RATE_LIMIT)
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Deployed commit."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit(SYSTEM_RATE_LIMIT)
def get_health(request: Request):  # pylint: disable=unused-argument
    """Liveness probe; does not touch the store."""
    return {"status": "ok"}

"""HTTP-level rate limiting for unauthenticated system endpoints.

Command calls are rate limited per actor and action by the admission gate;
this limiter only protects the plain HTTP endpoints (health, version).
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


async def rate_limit_handler(_request: Request, exc: Exception):
    """Return a 429 with an error body shaped like a command error."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "error": {"code": "rate_limited", "message": "Rate limit exceeded"},
            },
        )


def setup_rate_limiter(app: FastAPI):
    """
    Setup rate limiting for the FastAPI application.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies.rate_limits import setup_rate_limiter
from api.router import api_router
from infrastructure.logging import (
    CORRELATION_HEADER,
    bind_request_context,
    get_module_logger,
)
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()
settings = get_settings()


handler = FastAPI(title="Admin Styler Commands", lifespan=lifespan)
setup_rate_limiter(handler)


allow_origins = (
    ["*"]
    if settings.is_production
    else [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
)
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@handler.middleware("http")
async def request_context_middleware(request: Request, call_next):
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


handler.include_router(api_router)

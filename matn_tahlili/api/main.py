"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount the analysis/export router under /api
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - BodyLimitMiddleware: rejects oversized request bodies (413)
  - interfaces.api.http.router: /api/analyze, /api/export

Notes:
  - Settings are validated at startup (lifespan); a missing GOOGLE_API_KEY
    without FAKE_ORACLE=1 fails the boot, not the first request
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings."""
    settings = get_settings()
    logger.info(
        "Matn Tahlili API starting up",
        extra={
            "app_env": settings.app_env,
            "oracle_protocol": settings.oracle_protocol,
            "oracle_failure_policy": settings.oracle_failure_policy,
            "oracle_max_workers": settings.oracle_max_workers,
            "fake_oracle": settings.fake_oracle,
            "chunk_max_chars": settings.chunk_max_chars,
            "max_upload_bytes": settings.max_upload_bytes,
        },
    )
    yield
    logger.info("Matn Tahlili API shutting down")


def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        return ["http://localhost:5173"]


# R: Create FastAPI application instance with API metadata
app = FastAPI(
    title="Matn Tahlili API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "analysis", "description": "Matnni tahlil qilish va tuzatish"},
        {"name": "export", "description": "Natijani TXT yoki DOCX ko'rinishida yuklash"},
    ],
)

# R: Middleware order (last added = first to execute):
# 1. CORSMiddleware - handles preflight
# 2. RequestContextMiddleware - sets request_id
# 3. BodyLimitMiddleware - rejects oversized bodies early
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(RequestContextMiddleware)

try:
    _cors_allow_credentials = get_settings().cors_allow_credentials
except Exception:
    _cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=_cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id"],
    expose_headers=["Content-Disposition", "X-Request-Id"],
)

app.include_router(router, prefix="/api")

# R: Register exception handlers for structured error responses
register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """R: Liveness check (no llama al oráculo)."""
    return {
        "status": "ok",
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics():
    """R: Expose Prometheus metrics."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)

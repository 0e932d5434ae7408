import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from synapse.core.config import get_settings
from synapse.core.errors import InternalError
from synapse.core.logging import configure_logging
from synapse.api.routers import (
    health,
    users,
    messages,
    chat_info,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("synapse.api")

app = FastAPI(title=settings.app_name)

if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Middleware approach ensures even endpoints without dependency declaration are protected.
if settings.auth_enabled:
    EXEMPT_PATHS = {
        "/",  # root
        f"{settings.api_prefix}/health/liveness",
        f"{settings.api_prefix}/health/readiness",
        app.openapi_url,
    }
    EXEMPT_PATHS = {p for p in EXEMPT_PATHS if isinstance(p, str)}
    EXEMPT_PREFIXES = (
        "/docs",
        "/redoc",
    )

    @app.middleware("http")
    async def auth_middleware(request: Request, call_next):
        if request.method == "OPTIONS":  # allow CORS preflight without auth
            return await call_next(request)
        path = request.url.path
        if path in EXEMPT_PATHS or any(path.startswith(prefix) for prefix in EXEMPT_PREFIXES):
            return await call_next(request)
        auth = request.headers.get("Authorization")
        # exceptions raised in middleware bypass FastAPI's handlers, so answer directly
        if not auth or not auth.startswith("Bearer "):
            return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": "Unauthorized Access"})
        token = auth[len("Bearer "):].strip()
        try:
            from synapse.core.auth import _verify_token  # local import to avoid circular
            request.state.verified_claims = await _verify_token(token, settings)
        except Exception:
            logger.info("auth.rejected", extra={"path": path})
            return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": "Unauthorized Access"})
        return await call_next(request)


@app.exception_handler(InternalError)
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: Exception):
    logger.error(
        "storage.failure",
        extra={"path": request.url.path, "method": request.method, "error": repr(exc)},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def _include(router):
    app.include_router(router, prefix=settings.api_prefix)

_include(health.router)
_include(users.router)
_include(messages.router)
_include(chat_info.router)

@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "ok"}

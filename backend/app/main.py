import logging
import warnings
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.errors import register_error_handlers
from app.core.middleware import RequestIDMiddleware, AccessLogMiddleware
from app.core.rate_limit import RateLimitMiddleware
from app.routers import agents, audit_log, auth, comm_logs, dashboard, facilities, providers

# Validate session secret in production
if settings.is_production and settings.secret_key == "change-me-in-production":
    raise RuntimeError(
        "SECRET_KEY must be set to a secure random value in production. "
        "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
    )

if not settings.is_production and settings.secret_key == "change-me-in-production":
    warnings.warn("SECRET_KEY is using default value. Set it for production.", stacklevel=1)

logger = logging.getLogger("credtrack")


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create database tables on startup if they don't exist, then seed the first superadmin."""
    from app import models  # noqa: F401
    from app.dependencies import async_session_factory, engine
    from app.models.base import Base
    from app.services import agent_service

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified/created")

    if settings.bootstrap_superadmin_email and settings.bootstrap_superadmin_password:
        async with async_session_factory() as session:
            agent = await agent_service.ensure_bootstrap_superadmin(
                session,
                email=settings.bootstrap_superadmin_email,
                password=settings.bootstrap_superadmin_password,
            )
            await session.commit()
        if agent is not None:
            logger.info("Bootstrap superadmin created id=%s", agent.id)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Middleware: order matters (last added = outermost = first to execute)
# CORS outermost so all responses get CORS headers (including 429s)
cors_kwargs = {
    "allow_origins": settings.cors_origins_list,
    "allow_credentials": True,
    "allow_methods": ["*"],
    "allow_headers": ["*"],
    "expose_headers": ["x-request-id"],
}
if settings.cors_allow_origin_regex:
    cors_kwargs["allow_origin_regex"] = settings.cors_allow_origin_regex
app.add_middleware(RequestIDMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(CORSMiddleware, **cors_kwargs)

# Error handlers
register_error_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(agents.router)
app.include_router(providers.router)
app.include_router(facilities.router)
app.include_router(comm_logs.router)
app.include_router(audit_log.router)
app.include_router(dashboard.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.app_name, "version": "0.1.0"}


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()

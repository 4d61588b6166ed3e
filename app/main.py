"""
Restaurant Sites - FastAPI Backend Application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from app.config import settings
from app.errors import register_exception_handlers
from app.middleware import CanonicalHostMiddleware
from app.services.espn import EspnScheduleClient, ScheduleCache
from app.api import (
    activity,
    auth,
    cron,
    events,
    health,
    menu,
    public,
    schedule,
    site_settings,
    special_days,
    specials,
    tenants,
    users,
)

VERSION = "1.0.0"

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Restaurant Sites API", version=VERSION)
    app.state.schedule_cache = ScheduleCache(
        EspnScheduleClient(),
        ttl=settings.schedule_cache_ttl_seconds,
    )
    yield
    app.state.schedule_cache.clear()
    logger.info("Shutting down Restaurant Sites API")


# Create FastAPI application
app = FastAPI(
    title="Restaurant Sites",
    description="Multi-tenant restaurant website platform with an audited admin API",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Admin pages only live on the platform host
app.add_middleware(CanonicalHostMiddleware)

register_exception_handlers(app)

# Platform routers
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(tenants.router, prefix="/tenants", tags=["Tenants"])

# Admin routers, scoped to one tenant per request
app.include_router(menu.router, prefix="/admin/menu", tags=["Menu"])
app.include_router(specials.router, prefix="/admin/specials", tags=["Specials"])
app.include_router(events.router, prefix="/admin/events", tags=["Events"])
app.include_router(events.types_router, prefix="/admin/event-types", tags=["Events"])
app.include_router(special_days.router, prefix="/admin/special-days", tags=["Hours"])
app.include_router(site_settings.router, prefix="/admin", tags=["Site Settings"])
app.include_router(users.router, prefix="/admin/users", tags=["Users"])
app.include_router(activity.router, prefix="/admin/activity", tags=["Activity"])
app.include_router(schedule.router, prefix="/admin/schedule", tags=["Schedule"])

# Public site and scheduler entry points
app.include_router(public.router, prefix="/public", tags=["Public"])
app.include_router(cron.router, prefix="/cron", tags=["Cron"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )

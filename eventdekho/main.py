from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from eventdekho.api.routes import (
    admin as admin_router,
    announcements as announcements_router,
    auth as auth_router,
    comments as comments_router,
    events as events_router,
    health as health_router,
    participation as participation_router,
    sponsor_ads as sponsor_ads_router,
    upload as upload_router,
)
from eventdekho.cache.redis_client import cache
from eventdekho.core.config import settings
from eventdekho.core.errors import register_exception_handlers
from eventdekho.core.limiter import limiter
from eventdekho.core.logging import logger
from eventdekho.db import models  # noqa: F401  registers every table on Base.metadata
from eventdekho.db.session import engine, Base
from eventdekho.middleware.security_headers import SecurityHeadersMiddleware

app = FastAPI(title="EventDekho")

# Add rate limiter to app state
app.state.limiter = limiter
register_exception_handlers(app)

# Add security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Browsers from any origin outside production; the configured list in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list if settings.ENVIRONMENT == "production" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router.router)
api_router.include_router(auth_router.router)
api_router.include_router(events_router.router)
api_router.include_router(comments_router.router)
api_router.include_router(participation_router.router)
api_router.include_router(admin_router.router)
api_router.include_router(sponsor_ads_router.router)
api_router.include_router(announcements_router.router)
api_router.include_router(upload_router.router)

app.include_router(api_router)


@app.on_event("startup")
async def on_startup():
    # create tables (no migration tool; schema comes from the models)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"EventDekho API started ({settings.ENVIRONMENT})")


@app.on_event("shutdown")
async def on_shutdown():
    cache.close()
    await engine.dispose()

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vesselbook.api.api_v1.api import api_router
from vesselbook.core.config import settings
from vesselbook.core.logging_config import setup_logging, get_logger
from vesselbook.services.scheduler import init_scheduler, shutdown_scheduler, get_scheduler_status
from vesselbook.db.session import SessionLocal
from vesselbook.db.init_db import ensure_tables_exist, seed_defaults

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR, settings.LOG_TO_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Vesselbook...")

    await ensure_tables_exist()
    logger.info("📊 Database tables ready")

    if settings.SEED_ON_STARTUP:
        async with SessionLocal() as db:
            created = await seed_defaults(db)
        if any(created.values()):
            logger.info(f"🌱 Seeded defaults: {created}")

    init_scheduler()
    yield
    logger.info("🛑 Shutting down...")
    shutdown_scheduler()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    description="Vessel bookkeeping back office",
    lifespan=lifespan,
)

if settings.cors_origins:
    logger.info(f"CORS origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok", "scheduler": get_scheduler_status()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")

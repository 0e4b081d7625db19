"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from time_profiles.config import settings
from time_profiles.database import Base, SessionLocal, engine

from time_profiles.routers import time_profiles

# Import all models so Base.metadata knows about them
from time_profiles.models.time_profile import TimeProfile, TimeProfileValidationError  # noqa: F401
from time_profiles.models.queued_job import QueuedJob                                  # noqa: F401
from time_profiles.services import time_profile_service

app = FastAPI(
    title="Time Profiles",
    description="Day/hour/timezone profiles for daily metric rollups, with rollup job scheduling",
    version="0.1.0",
)

app.include_router(time_profiles.router, prefix="/api/time-profiles", tags=["TimeProfiles"])


@app.exception_handler(TimeProfileValidationError)
def validation_error_handler(request: Request, exc: TimeProfileValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup():
    """Configure logging, create tables (SQLite dev mode) and seed the default profile."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            time_profile_service.seed(db)
        finally:
            db.close()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

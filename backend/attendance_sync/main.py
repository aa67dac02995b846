from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import uvicorn
from sqlalchemy import text

from attendance_sync.api.routes import health, webhooks
from attendance_sync.core.config import settings
from attendance_sync.core.errors import AttendanceSyncError
from attendance_sync.core.logging import setup_logging
from attendance_sync.db.base import Base
from attendance_sync.db.session import SessionLocal, engine
from attendance_sync.schemas import ErrorResponse
# Register tables on Base.metadata
from attendance_sync.models import event, participant  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    logger.info("🚀 Starting Webinar Attendance Sync...")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise
    finally:
        db.close()

    if not settings.ZOOM_VERIFICATION_TOKEN:
        logger.warning("⚠️ ZOOM_VERIFICATION_TOKEN is not set, every webhook will be rejected")
    if not settings.WEBINAR_CUSTOM_FIELD:
        logger.warning("⚠️ WEBINAR_CUSTOM_FIELD is not set, webinars cannot be matched to events")

    yield

    logger.info("👋 Shutting down...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Marks CRM event participants Attended when a Zoom webinar ends",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

@app.exception_handler(AttendanceSyncError)
async def attendance_sync_error_handler(request: Request, exc: AttendanceSyncError):
    logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
    body = ErrorResponse(error_message=exc.message, error_code=exc.error_code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(webhooks.router, prefix="/api", tags=["Webhooks"])

@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "health": "/api/health",
            "webinar_ended": "/api/webhooks/zoom/webinar-ended"
        }
    }

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime
from resume_ats.routers import analyses, resumes, requirements

from resume_ats.utils.logging_config import configure_for_environment, get_logger
from resume_ats.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    register_exception_handlers,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume ATS API starting up...")

    try:
        from resume_ats.services.db import init_indexes
        await init_indexes()
        logger.info("Database indexes initialized successfully")
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - some queries may be slower without indexes")

    logger.info("Resume ATS API startup completed")

    yield

    logger.info("Resume ATS API shutting down...")


app = FastAPI(title="Resume ATS API", version=API_VERSION, lifespan=lifespan)

# Each add_middleware call wraps the previous ones: CORS is outermost, then the
# exception handler around request logging and timing
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the Resume ATS API", "version": API_VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat() + "Z"}


app.include_router(analyses.router, prefix="/api/analyses", tags=["analyses"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(requirements.router, prefix="/api/requirements", tags=["requirements"])

logger.info("Resume ATS API initialized successfully")

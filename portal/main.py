"""
Internship Placement Portal - Main Application

FastAPI backend with:
- MongoDB for every collection
- Cloudinary for uploaded files
- JWT authentication (Authorization header or HTTP-only cookie)

Run: uvicorn portal.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api.routes import api_router
from portal.core.config import get_settings
from portal.core.errors import register_exception_handlers
from portal.db.mongodb import init_mongo_indexes, check_mongo_connection, missing_unique_indexes

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Internship Placement Portal",
    description="""
    Role-based placement portal for students, recruiters, faculty and admins.

    ## Features
    - **Authentication**: JWT for every role, recruiter approval
    - **Students**: Profiles with completion tracking, resume upload
    - **Jobs**: Posting, search and applications
    - **Applications**: Stage pipeline, notes, interviews, scores
    - **Verifications**: Document review by faculty
    - **Admin**: Dashboard statistics, student management
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

# CORS: the web client sends the auth cookie, so origins must be explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup. The app does not start without them."""
    try:
        init_mongo_indexes()
    except Exception:
        logger.exception("MongoDB index initialization failed")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down")


@app.get("/", tags=["Health"])
async def root():
    return {"success": True, "app": "Internship Placement Portal", "message": "API is running."}


@app.get("/health", tags=["Health"])
@app.get("/api/health", tags=["Health"], include_in_schema=False)
async def health_check():
    """Detailed health check."""
    mongo_ok = check_mongo_connection()
    missing = missing_unique_indexes() if mongo_ok else []
    healthy = mongo_ok and not missing
    return {
        "success": healthy,
        "status": "healthy" if healthy else "degraded",
        "mongodb": "connected" if mongo_ok else "disconnected",
        "missing_indexes": missing,
        "storage": "configured" if settings.storage_configured else "not configured",
    }

"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from portal.api.routes.auth_routes import router as auth_router
from portal.api.routes.user_routes import router as user_router
from portal.api.routes.student_routes import router as student_router
from portal.api.routes.job_routes import router as job_router
from portal.api.routes.application_routes import router as application_router
from portal.api.routes.admin_routes import router as admin_router
from portal.api.routes.verification_routes import router as verification_router
from portal.api.routes.department_routes import router as department_router
from portal.api.routes.skill_routes import router as skill_router
from portal.api.routes.upload_routes import router as upload_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(student_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(admin_router)
api_router.include_router(verification_router)
api_router.include_router(department_router)
api_router.include_router(skill_router)
api_router.include_router(upload_router)

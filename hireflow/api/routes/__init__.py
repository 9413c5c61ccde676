"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from hireflow.api.routes.auth_routes import router as auth_router
from hireflow.api.routes.post_routes import router as post_router
from hireflow.api.routes.application_routes import router as application_router
from hireflow.api.routes.notification_routes import router as notification_router
from hireflow.api.routes.interview_routes import router as interview_router
from hireflow.api.routes.upload_routes import router as upload_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(post_router)
api_router.include_router(application_router)
api_router.include_router(notification_router)
api_router.include_router(interview_router)
api_router.include_router(upload_router)

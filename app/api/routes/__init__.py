"""API routes."""

from fastapi import APIRouter

from app.api.routes import applications, auth, internships, jobs, user_settings, users

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(jobs.router, prefix="/api/jobs", tags=["Jobs"])
api_router.include_router(internships.router, prefix="/internships", tags=["Internships"])
api_router.include_router(applications.router, prefix="/api/applications", tags=["Applications"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(user_settings.router, prefix="/settings", tags=["Settings"])

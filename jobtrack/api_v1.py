"""API v1 router: all JSON endpoints under /api/v1 prefix."""

from fastapi import APIRouter

from .applications.routes import router as applications_router
from .auth.routes import router as auth_router
from .conversation_starters.routes import router as conversation_starters_router
from .cover_letters.routes import router as cover_letters_router
from .dashboard.routes import router as dashboard_router
from .profile.routes import router as profile_router
from .resume_generation.routes import application_router as tailored_resume_router
from .resume_generation.routes import router as resume_generation_router
from .resumes.routes import router as resumes_router

api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(auth_router)
api_v1_router.include_router(profile_router)
api_v1_router.include_router(applications_router)
api_v1_router.include_router(tailored_resume_router)
api_v1_router.include_router(resumes_router)
api_v1_router.include_router(cover_letters_router)
api_v1_router.include_router(dashboard_router)
api_v1_router.include_router(resume_generation_router)
api_v1_router.include_router(conversation_starters_router)

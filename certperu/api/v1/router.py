# certperu/api/v1/router.py
from fastapi import APIRouter
from certperu.api.v1 import (
    auth,
    courses,
    participants,
    enrollments,
    certificates,
    verify,
    me,
    templates,
    settings,
    course_requests,
    dashboard,
)

api_router = APIRouter()

# -------- rutas públicas --------
api_router.include_router(auth.router,            prefix="/auth",            tags=["auth"])
api_router.include_router(courses.router,                                    tags=["catalog"])
api_router.include_router(verify.router,          prefix="/verify",          tags=["verify"])
api_router.include_router(course_requests.router, prefix="/course-requests", tags=["course-requests"])

# -------- participante autenticado --------
api_router.include_router(me.router,              prefix="/me",              tags=["me"])
api_router.include_router(enrollments.router,     prefix="/enrollments",     tags=["enrollments"])

# -------- back-office --------
api_router.include_router(courses.admin_router,   prefix="/admin",           tags=["admin-catalog"])
api_router.include_router(participants.router,    prefix="/participants",    tags=["participants"])
api_router.include_router(certificates.router,    prefix="/certificates",    tags=["certificates"])
api_router.include_router(templates.router,       prefix="/templates",       tags=["templates"])
api_router.include_router(settings.router,        prefix="/settings",        tags=["settings"])
api_router.include_router(dashboard.router,       prefix="/dashboard",       tags=["dashboard"])

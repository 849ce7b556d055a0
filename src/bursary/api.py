from fastapi import APIRouter

from bursary.modules.admins.router import router as admins_router
from bursary.modules.applications.admin_router import router as review_router
from bursary.modules.applications.router import router as student_applications_router
from bursary.modules.auth import router as auth_router
from bursary.modules.bursaries.admin_router import router as bursaries_router
from bursary.modules.bursaries.router import router as student_bursaries_router
from bursary.modules.roles.router import router as roles_router
from bursary.modules.students.router import router as students_router
from bursary.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(admins_router, prefix="/admins", tags=["Admins"])

api_router.include_router(roles_router, prefix="/roles", tags=["Roles"])

api_router.include_router(
    student_applications_router,
    prefix="/students/applications",
    tags=["Students - Applications"],
)

api_router.include_router(
    student_bursaries_router,
    prefix="/students/bursaries",
    tags=["Students - Bursaries"],
)

api_router.include_router(students_router, prefix="/students", tags=["Students"])

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(bursaries_router, prefix="/bursaries", tags=["Bursaries"])

api_router.include_router(review_router, prefix="/applications", tags=["Review - Applications"])

from fastapi import APIRouter
from app.api.endpoints import work_time, reactivation, admin

api_router = APIRouter()
api_router.include_router(work_time.router, prefix="/user", tags=["work-time"])
api_router.include_router(reactivation.router, prefix="/reactivation", tags=["reactivation"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])

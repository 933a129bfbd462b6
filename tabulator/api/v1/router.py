from fastapi import APIRouter

from .endpoints import health, worksheets

api_v1_router = APIRouter()
api_v1_router.include_router(health.router, tags=["健康检查"])
api_v1_router.include_router(worksheets.router, prefix="/worksheets", tags=["工作表"])

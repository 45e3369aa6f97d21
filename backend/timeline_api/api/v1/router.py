"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from timeline_api.api.v1 import configurations, objects, report, timeline

api_router = APIRouter()

api_router.include_router(objects.router, prefix="/objects", tags=["objects"])
api_router.include_router(timeline.router, prefix="/timeline", tags=["timeline"])
api_router.include_router(
    configurations.router, prefix="/configurations", tags=["configurations"]
)
api_router.include_router(report.router, prefix="/report", tags=["report"])

"""API v1 router composition."""

from fastapi import APIRouter

from ordering_service.api.v1.endpoints import availability, branches

api_router: APIRouter = APIRouter()
api_router.include_router(branches.router, prefix="/branches", tags=["branches"])
api_router.include_router(availability.router, prefix="/branches", tags=["availability"])

from fastapi import APIRouter

from pressuretrace.api.routes import frames

api_router = APIRouter()

api_router.include_router(frames.router, tags=["frames"])

from fastapi import APIRouter

from src.sparkhub.api.v1 import ideas, supervision_requests, supervisors

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(ideas.router)
api_router.include_router(supervision_requests.router)
api_router.include_router(supervisors.router)

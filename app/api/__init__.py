from fastapi import APIRouter
from .routes import reports, timing

api_router = APIRouter()

api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(timing.router, prefix="/timing", tags=["timing"])

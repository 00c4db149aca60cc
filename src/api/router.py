"""API router aggregation."""

from fastapi import APIRouter

from src.api.auth import router as auth_router
from src.api.calendar import router as calendar_router
from src.api.chat import router as chat_router
from src.api.events import router as events_router
from src.api.health import router as health_router
from src.api.local_events import router as local_events_router
from src.api.preparation import router as preparation_router

api_router = APIRouter()
api_router.include_router(health_router)
# Preparation materials and event classification
api_router.include_router(preparation_router)
# Google Calendar listing, grid layout and editing
api_router.include_router(calendar_router)
api_router.include_router(events_router)
# Nearby events for holiday preparation
api_router.include_router(local_events_router)
api_router.include_router(chat_router)
# OAuth connect flow and stored connections
api_router.include_router(auth_router)

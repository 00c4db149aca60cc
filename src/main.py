"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.adapters.calendar_adapter import GoogleCalendarAdapter
from src.adapters.maps_adapter import MapsAdapter
from src.adapters.places_adapter import PlacesAdapter
from src.agents.registry import build_agent_registry
from src.api.errors import register_error_handlers
from src.api.router import api_router
from src.auth.oauth import GoogleOAuthClient
from src.classification.classifier import EventClassifier
from src.config import settings
from src.db.turso import TursoClient
from src.local_events.service import LocalEventsService
from src.repositories.connection_repo import ConnectionRepository
from src.services.event_chat import EventChatService
from src.services.llm_client import LLMClient, select_classification_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _initialize_services(app: FastAPI) -> None:
    """Build the LLM-backed services and API adapters on app state.

    Everything is constructed once; clients without API keys are still
    created and fail (or fall back) per request.
    """
    llm_client = LLMClient()

    app.state.agent_registry = build_agent_registry(llm_client)
    app.state.classifier = EventClassifier(select_classification_client())
    app.state.local_events_service = LocalEventsService(llm_client)
    app.state.chat_service = EventChatService(llm_client)
    logger.info(
        f"Agent registry initialized with {len(app.state.agent_registry.agent_types())} event types"
    )

    app.state.maps_adapter = MapsAdapter()
    app.state.places_adapter = PlacesAdapter()
    app.state.oauth_client = GoogleOAuthClient()
    app.state.calendar_adapter_factory = GoogleCalendarAdapter
    logger.info("Google adapters initialized")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Connect the connection store and create its schema
    - Build agents, classifier and adapters

    Shutdown:
    - Close database connection
    """
    logger.info("Starting SmartCal...")

    db = TursoClient()
    await db.connect()
    app.state.db = db

    connection_repo = ConnectionRepository(db)
    await connection_repo.initialize()
    app.state.connection_repo = connection_repo
    logger.info(f"Connection store ready: {db.url}")

    _initialize_services(app)

    yield

    logger.info("Shutting down SmartCal...")
    await db.close()


app = FastAPI(
    title=settings.app_name,
    description="Calendar event preparation powered by LLM agents",
    version=settings.app_version,
    lifespan=lifespan,
)

register_error_handlers(app)
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

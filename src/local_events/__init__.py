"""LLM-backed lookup of local events."""

from src.local_events.service import LocalEventsService

__all__ = ["LocalEventsService"]

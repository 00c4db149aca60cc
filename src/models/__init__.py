"""Persisted data models.

- BaseEntity: Base class with id, timestamps
- CalendarConnection: OAuth credentials for a calendar provider
"""

from src.models.base import BaseEntity
from src.models.connection import CalendarConnection

__all__ = [
    "BaseEntity",
    "CalendarConnection",
]

"""Repository layer for data persistence.

Repositories encapsulate data access logic and give the API layer a small
async interface over the database.
"""

from src.repositories.connection_repo import ConnectionRepository

__all__ = [
    "ConnectionRepository",
]

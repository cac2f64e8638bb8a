"""Database persistence infrastructure.

- Base models for all tables
- Database connection and session management
- Repository implementations of the domain ports
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]

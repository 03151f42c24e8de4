"""User entity module.

This module contains all User-related classes organized by responsibility:
- User / PublicUser: Domain entities (with and without credentials)
- UserTable: Database persistence model
- UserRepository: Credential store data access layer
"""

from .entity import PublicUser, User, normalize_email
from .repository import UserRepository
from .table import UserTable

__all__ = ["PublicUser", "User", "UserTable", "UserRepository", "normalize_email"]

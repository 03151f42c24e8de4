"""Entities module with hybrid entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with business logic
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.friend_edge import FriendEdge, FriendEdgeRepository, FriendEdgeTable
from .core.user import PublicUser, User, UserRepository, UserTable

__all__ = [
    "FriendEdge",
    "FriendEdgeRepository",
    "FriendEdgeTable",
    "PublicUser",
    "User",
    "UserRepository",
    "UserTable",
]

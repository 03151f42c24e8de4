"""Friend edge entity module.

- FriendEdge: Domain entity with its tagged Pending/Accepted state
- FriendEdgeTable: Database persistence model keyed by the unordered pair
- FriendEdgeRepository: Data access layer
"""

from .entity import AcceptedState, EdgeState, FriendEdge, FriendEdgeStatus, PendingState
from .repository import FriendEdgeRepository
from .table import FriendEdgeTable

__all__ = [
    "AcceptedState",
    "EdgeState",
    "FriendEdge",
    "FriendEdgeRepository",
    "FriendEdgeStatus",
    "FriendEdgeTable",
    "PendingState",
]

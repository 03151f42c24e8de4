"""Friend edge domain entity."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import Field, model_validator

from src.lingomate.entities.core._base import Entity


class FriendEdgeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class PendingState:
    """A request from ``requester`` waiting on ``recipient``."""

    requester: str
    recipient: str


@dataclass(frozen=True)
class AcceptedState:
    """A friendship; the pair is unordered."""

    members: frozenset[str]


EdgeState = PendingState | AcceptedState


def pair_key(a: str, b: str) -> tuple[str, str]:
    """Canonical ordering of an unordered pair of user ids."""
    return (a, b) if a <= b else (b, a)


class FriendEdge(Entity):
    """Relationship record between two distinct users.

    Requester and recipient matter only while the edge is pending; once
    accepted, ``state`` reports the pair as an unordered set.
    """

    requester_id: str = Field(description="User who sent the request")
    recipient_id: str = Field(description="User who may accept the request")
    status: FriendEdgeStatus = Field(default=FriendEdgeStatus.PENDING)
    accepted_at: datetime | None = Field(default=None)

    @model_validator(mode="after")
    def _distinct_users(self) -> "FriendEdge":
        if self.requester_id == self.recipient_id:
            raise ValueError("A friend edge needs two distinct users")
        return self

    @property
    def user_low(self) -> str:
        return pair_key(self.requester_id, self.recipient_id)[0]

    @property
    def user_high(self) -> str:
        return pair_key(self.requester_id, self.recipient_id)[1]

    @property
    def state(self) -> EdgeState:
        if self.status is FriendEdgeStatus.ACCEPTED:
            return AcceptedState(frozenset((self.requester_id, self.recipient_id)))
        return PendingState(self.requester_id, self.recipient_id)

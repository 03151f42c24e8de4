"""Data-access layer for friend edges."""

from datetime import datetime

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.lingomate.core.errors import DuplicateKey
from src.lingomate.entities.core._base import utc_now
from src.lingomate.entities.core.friend_edge.entity import (
    FriendEdge,
    FriendEdgeStatus,
    pair_key,
)
from src.lingomate.entities.core.friend_edge.table import FriendEdgeTable


def _to_entity(row: FriendEdgeTable) -> FriendEdge:
    return FriendEdge.model_validate(row, from_attributes=True)


class FriendEdgeRepository:
    """Data-access layer for friend edges.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, edge_id: str) -> FriendEdge | None:
        row = self._session.get(FriendEdgeTable, edge_id)
        if row is None:
            return None
        self._session.refresh(row)
        return _to_entity(row)

    def find_between(self, a: str, b: str) -> FriendEdge | None:
        low, high = pair_key(a, b)
        statement = select(FriendEdgeTable).where(
            FriendEdgeTable.user_low == low, FriendEdgeTable.user_high == high
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return _to_entity(row)

    def insert_pending(self, requester_id: str, recipient_id: str) -> FriendEdge:
        """Insert a pending edge; the unique pair key rejects any second edge."""
        edge = FriendEdge(requester_id=requester_id, recipient_id=recipient_id)
        row = FriendEdgeTable(
            id=edge.id,
            requester_id=edge.requester_id,
            recipient_id=edge.recipient_id,
            user_low=edge.user_low,
            user_high=edge.user_high,
            status=FriendEdgeStatus.PENDING.value,
            created_at=edge.created_at,
            updated_at=edge.updated_at,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as e:
            self._session.rollback()
            raise DuplicateKey("Edge already exists for this pair") from e
        return edge

    def mark_accepted(self, edge_id: str, accepted_at: datetime | None = None) -> bool:
        """Compare-and-set pending -> accepted.

        Returns False when the edge was no longer pending at write time.
        """
        statement = (
            update(FriendEdgeTable)
            .where(
                col(FriendEdgeTable.id) == edge_id,
                col(FriendEdgeTable.status) == FriendEdgeStatus.PENDING.value,
            )
            .values(
                status=FriendEdgeStatus.ACCEPTED.value,
                accepted_at=accepted_at or utc_now(),
            )
        )
        result = self._session.connection().execute(statement)
        return result.rowcount == 1

    def connected_ids(self, user_id: str) -> set[str]:
        """Ids of every user sharing an edge of any status with ``user_id``."""
        return self._peer_ids(user_id, status=None)

    def accepted_peer_ids(self, user_id: str) -> set[str]:
        return self._peer_ids(user_id, status=FriendEdgeStatus.ACCEPTED)

    def list_pending_from(self, requester_id: str) -> list[FriendEdge]:
        statement = (
            select(FriendEdgeTable)
            .where(
                FriendEdgeTable.requester_id == requester_id,
                FriendEdgeTable.status == FriendEdgeStatus.PENDING.value,
            )
            .order_by(col(FriendEdgeTable.created_at).desc())
        )
        return [_to_entity(row) for row in self._session.exec(statement)]

    def list_pending_to(self, recipient_id: str) -> list[FriendEdge]:
        statement = (
            select(FriendEdgeTable)
            .where(
                FriendEdgeTable.recipient_id == recipient_id,
                FriendEdgeTable.status == FriendEdgeStatus.PENDING.value,
            )
            .order_by(col(FriendEdgeTable.created_at).desc())
        )
        return [_to_entity(row) for row in self._session.exec(statement)]

    def list_accepted_requested_by(self, requester_id: str) -> list[FriendEdge]:
        statement = (
            select(FriendEdgeTable)
            .where(
                FriendEdgeTable.requester_id == requester_id,
                FriendEdgeTable.status == FriendEdgeStatus.ACCEPTED.value,
            )
            .order_by(col(FriendEdgeTable.accepted_at).desc())
        )
        return [_to_entity(row) for row in self._session.exec(statement)]

    def _peer_ids(self, user_id: str, status: FriendEdgeStatus | None) -> set[str]:
        statement = select(FriendEdgeTable.user_low, FriendEdgeTable.user_high).where(
            or_(
                col(FriendEdgeTable.user_low) == user_id,
                col(FriendEdgeTable.user_high) == user_id,
            )
        )
        if status is not None:
            statement = statement.where(FriendEdgeTable.status == status.value)

        peers: set[str] = set()
        for low, high in self._session.exec(statement):
            peers.add(high if low == user_id else low)
        return peers

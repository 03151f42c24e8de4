"""Friend graph: the single source of truth for relationships between users."""

from loguru import logger
from sqlmodel import Session

from src.lingomate.core.errors import (
    AlreadyAccepted,
    DuplicateKey,
    EdgeExists,
    EdgeNotFound,
    NotRecipient,
    SelfRequest,
    UserNotFound,
)
from src.lingomate.entities.core.friend_edge import (
    FriendEdge,
    FriendEdgeRepository,
    FriendEdgeStatus,
)
from src.lingomate.entities.core.user import PublicUser, UserRepository


class FriendGraphService:
    """Friend requests and the queries every other component asks of them.

    Mutations commit on success and roll back on any failure, so a
    rejected call never leaves a partial write behind.
    """

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._edges = FriendEdgeRepository(db_session)
        self._users = UserRepository(db_session)

    def send_request(self, requester_id: str, recipient_id: str) -> FriendEdge:
        if requester_id == recipient_id:
            raise SelfRequest()

        for user_id in (requester_id, recipient_id):
            if not self._users.exists(user_id):
                raise UserNotFound(f"User {user_id} not found")

        if self._edges.find_between(requester_id, recipient_id) is not None:
            raise EdgeExists()

        # A concurrent sender may have inserted the same pair since the check above
        try:
            edge = self._edges.insert_pending(requester_id, recipient_id)
            self._db_session.commit()
        except DuplicateKey as e:
            raise EdgeExists() from e
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "Friend request sent",
            edge_id=edge.id,
            requester_id=requester_id,
            recipient_id=recipient_id,
        )
        return edge

    def accept_request(self, edge_id: str, acting_user_id: str) -> FriendEdge:
        edge = self._edges.get(edge_id)
        if edge is None:
            raise EdgeNotFound()
        if edge.recipient_id != acting_user_id:
            raise NotRecipient()
        if edge.status is FriendEdgeStatus.ACCEPTED:
            raise AlreadyAccepted()

        try:
            won = self._edges.mark_accepted(edge_id)
            if not won:
                # Another accept landed between our read and our write
                self._db_session.rollback()
                raise AlreadyAccepted()
            self._db_session.commit()
        except AlreadyAccepted:
            raise
        except Exception:
            self._db_session.rollback()
            raise

        accepted = self._edges.get(edge_id)
        if accepted is None:
            raise EdgeNotFound()
        logger.info(
            "Friend request accepted",
            edge_id=edge_id,
            requester_id=accepted.requester_id,
            recipient_id=accepted.recipient_id,
        )
        return accepted

    def list_friends(self, user_id: str) -> list[PublicUser]:
        friend_ids = self._edges.accepted_peer_ids(user_id)
        friends = self._users.list_by_ids(friend_ids)
        return sorted(
            (friend.to_public() for friend in friends), key=lambda u: u.full_name
        )

    def list_outgoing_pending(self, user_id: str) -> list[FriendEdge]:
        return self._edges.list_pending_from(user_id)

    def list_incoming_pending(self, user_id: str) -> list[FriendEdge]:
        return self._edges.list_pending_to(user_id)

    def list_recently_accepted(self, user_id: str) -> list[FriendEdge]:
        """Requests this user sent that the other side has accepted."""
        return self._edges.list_accepted_requested_by(user_id)

    def has_any_edge(self, a: str, b: str) -> bool:
        if a == b:
            return False
        return self._edges.find_between(a, b) is not None

    def connected_ids(self, user_id: str) -> set[str]:
        return self._edges.connected_ids(user_id)

"""Unit tests for the friend edge entity and repository."""

import pytest
from pydantic import ValidationError

from src.lingomate.core.errors import DuplicateKey
from src.lingomate.entities.core.friend_edge import (
    AcceptedState,
    FriendEdge,
    FriendEdgeRepository,
    FriendEdgeStatus,
    PendingState,
)
from src.lingomate.entities.core.friend_edge.entity import pair_key


class TestFriendEdge:
    def test_pending_by_default(self):
        edge = FriendEdge(requester_id="a", recipient_id="b")

        assert edge.status is FriendEdgeStatus.PENDING
        assert edge.accepted_at is None
        assert edge.state == PendingState(requester="a", recipient="b")

    def test_requires_distinct_users(self):
        with pytest.raises(ValidationError):
            FriendEdge(requester_id="a", recipient_id="a")

    def test_pair_key_is_order_independent(self):
        assert pair_key("b", "a") == pair_key("a", "b") == ("a", "b")

        edge = FriendEdge(requester_id="z", recipient_id="m")
        assert (edge.user_low, edge.user_high) == ("m", "z")

    def test_accepted_state_is_unordered(self):
        forward = FriendEdge(requester_id="a", recipient_id="b", status="accepted")
        backward = FriendEdge(requester_id="b", recipient_id="a", status="accepted")

        assert forward.state == backward.state == AcceptedState(frozenset({"a", "b"}))


class TestFriendEdgeRepository:
    @pytest.fixture
    def repo(self, session):
        return FriendEdgeRepository(session)

    def test_insert_and_find_either_direction(self, repo, session, make_user):
        a, b = make_user("A"), make_user("B")

        edge = repo.insert_pending(a.id, b.id)
        session.commit()

        assert repo.find_between(a.id, b.id).id == edge.id
        assert repo.find_between(b.id, a.id).id == edge.id
        assert repo.get(edge.id).status is FriendEdgeStatus.PENDING

    def test_reverse_duplicate_rejected(self, repo, session, make_user):
        a, b = make_user("A"), make_user("B")
        repo.insert_pending(a.id, b.id)
        session.commit()

        with pytest.raises(DuplicateKey):
            repo.insert_pending(b.id, a.id)

    def test_mark_accepted_is_compare_and_set(self, repo, session, make_user):
        a, b = make_user("A"), make_user("B")
        edge = repo.insert_pending(a.id, b.id)
        session.commit()

        assert repo.mark_accepted(edge.id) is True
        assert repo.mark_accepted(edge.id) is False
        session.commit()

        stored = repo.get(edge.id)
        assert stored.status is FriendEdgeStatus.ACCEPTED
        assert stored.accepted_at is not None

    def test_peer_queries(self, repo, session, make_user):
        a, b, c, d = (make_user(n) for n in "ABCD")
        accepted = repo.insert_pending(a.id, b.id)
        repo.insert_pending(c.id, a.id)
        repo.insert_pending(b.id, d.id)
        session.commit()
        repo.mark_accepted(accepted.id)
        session.commit()

        assert repo.connected_ids(a.id) == {b.id, c.id}
        assert repo.accepted_peer_ids(a.id) == {b.id}
        assert repo.accepted_peer_ids(b.id) == {a.id}
        assert [e.requester_id for e in repo.list_pending_to(a.id)] == [c.id]
        assert [e.requester_id for e in repo.list_pending_to(d.id)] == [b.id]
        assert [e.recipient_id for e in repo.list_pending_from(c.id)] == [a.id]
        assert [e.id for e in repo.list_accepted_requested_by(a.id)] == [accepted.id]

    def test_get_missing(self, repo):
        assert repo.get("missing") is None

"""Racing friend requests against a file-backed SQLite database.

Every worker gets its own session and connection, so the outcome depends on
the database constraints rather than on a shared identity map.
"""

import threading
from collections.abc import Callable, Generator
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.lingomate.core.errors import AlreadyAccepted, EdgeExists
from src.lingomate.core.security import hash_password
from src.lingomate.core.services import DbSessionService, FriendGraphService
from src.lingomate.entities.core.friend_edge import FriendEdgeStatus
from src.lingomate.entities.core.user import User, UserRepository
from src.lingomate.runtime.config.config_data import DatabaseConfig


@pytest.fixture
def file_db(tmp_path) -> Generator[DbSessionService]:
    service = DbSessionService(DatabaseConfig(url=f"sqlite:///{tmp_path / 'race.db'}"))
    service.create_all()
    try:
        yield service
    finally:
        service.dispose()


@pytest.fixture
def alice_and_bob(file_db: DbSessionService) -> tuple[User, User]:
    with file_db.get_session() as db:
        users = UserRepository(db)
        created = tuple(
            users.create(
                User(
                    email=f"{name.lower()}@example.com",
                    full_name=name,
                    password_hash=hash_password("correct-horse", rounds=4),
                    onboarded=True,
                )
            )
            for name in ("Alice", "Bob")
        )
        db.commit()
    return created


def race(file_db: DbSessionService, workers: int, action: Callable) -> list[object]:
    """Run ``action(graph, index)`` on every worker at once; return results or errors."""
    barrier = threading.Barrier(workers)

    def run(index: int) -> object:
        with file_db.get_session() as db:
            graph = FriendGraphService(db)
            barrier.wait()
            try:
                return action(graph, index)
            except (EdgeExists, AlreadyAccepted) as e:
                return e

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(run, range(workers)))


class TestConcurrentRequests:
    def test_racing_sends_create_one_edge(self, file_db, alice_and_bob):
        alice, bob = alice_and_bob

        def send(graph: FriendGraphService, index: int):
            if index % 2:
                return graph.send_request(bob.id, alice.id)
            return graph.send_request(alice.id, bob.id)

        results = race(file_db, 8, send)

        sent = [r for r in results if not isinstance(r, EdgeExists)]
        assert len(sent) == 1
        assert sum(isinstance(r, EdgeExists) for r in results) == 7

        with file_db.get_session() as db:
            graph = FriendGraphService(db)
            outgoing = graph.list_outgoing_pending(alice.id) + graph.list_outgoing_pending(bob.id)
        assert [e.id for e in outgoing] == [sent[0].id]

    def test_racing_accepts_have_one_winner(self, file_db, alice_and_bob):
        alice, bob = alice_and_bob
        with file_db.get_session() as db:
            edge = FriendGraphService(db).send_request(alice.id, bob.id)

        results = race(file_db, 6, lambda graph, _: graph.accept_request(edge.id, bob.id))

        winners = [r for r in results if not isinstance(r, AlreadyAccepted)]
        assert len(winners) == 1
        assert winners[0].status is FriendEdgeStatus.ACCEPTED
        assert sum(isinstance(r, AlreadyAccepted) for r in results) == 5

        with file_db.get_session() as db:
            graph = FriendGraphService(db)
            assert [u.id for u in graph.list_friends(alice.id)] == [bob.id]
            assert graph.list_incoming_pending(bob.id) == []

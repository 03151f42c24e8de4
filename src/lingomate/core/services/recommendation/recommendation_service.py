"""Recommendation pool of learnable partners."""

from collections.abc import Iterator

from src.lingomate.core.services.graph.friend_graph import FriendGraphService
from src.lingomate.entities.core.user import PublicUser, UserRepository
from src.lingomate.runtime.config.config_data import RecommendationConfig


class RecommendationService:
    """Suggest onboarded users the requester has no relationship with yet.

    The exclusion set comes from the friend graph on every call, so two calls
    against an unchanged graph exclude exactly the same users.
    """

    def __init__(
        self,
        graph: FriendGraphService,
        users: UserRepository,
        config: RecommendationConfig | None = None,
    ):
        self._graph = graph
        self._users = users
        self._config = config or RecommendationConfig()

    def recommend(
        self, user_id: str, page_size: int, page: int = 0
    ) -> Iterator[PublicUser]:
        """Lazily yield at most ``page_size`` candidates, newest accounts first."""
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if page < 0:
            raise ValueError("page must not be negative")

        page_size = min(page_size, self._config.max_page_size)
        return self._candidates(user_id, page_size, page)

    def _candidates(
        self, user_id: str, page_size: int, page: int
    ) -> Iterator[PublicUser]:
        excluded = self._graph.connected_ids(user_id) | {user_id}
        for user in self._users.iter_onboarded(
            excluded, limit=page_size, offset=page * page_size
        ):
            yield user.to_public()

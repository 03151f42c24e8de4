"""Partner discovery and friend request endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlmodel import Session

from src.lingomate.api.http.deps import (
    get_account_service,
    get_app_config,
    get_current_user,
    get_db_session,
    get_friend_graph,
    get_recommendation_service,
)
from src.lingomate.core.services import (
    AccountService,
    FriendGraphService,
    RecommendationService,
)
from src.lingomate.entities.core.friend_edge import FriendEdge, FriendEdgeStatus
from src.lingomate.entities.core.user import PublicUser, UserRepository
from src.lingomate.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/users", tags=["users"])


class FriendRequestView(BaseModel):
    id: str
    status: FriendEdgeStatus
    created_at: datetime
    accepted_at: datetime | None = None
    requester: PublicUser | None = None
    recipient: PublicUser | None = None


class FriendRequestsResponse(BaseModel):
    incoming: list[FriendRequestView]
    accepted: list[FriendRequestView]


class ProfileUpdateRequest(BaseModel):
    full_name: str | None = None
    bio: str | None = None
    native_language: str | None = None
    learning_language: str | None = None
    location: str | None = None
    profile_pic: str | None = None


def _views(edges: list[FriendEdge], db: Session) -> list[FriendRequestView]:
    ids = {edge.requester_id for edge in edges} | {edge.recipient_id for edge in edges}
    people = {user.id: user.to_public() for user in UserRepository(db).list_by_ids(ids)}
    return [
        FriendRequestView(
            id=edge.id,
            status=edge.status,
            created_at=edge.created_at,
            accepted_at=edge.accepted_at,
            requester=people.get(edge.requester_id),
            recipient=people.get(edge.recipient_id),
        )
        for edge in edges
    ]


@router.get("", response_model=list[PublicUser])
def recommended_users(
    page_size: int | None = Query(default=None, ge=1),
    page: int = Query(default=0, ge=0),
    user: PublicUser = Depends(get_current_user),
    recommendations: RecommendationService = Depends(get_recommendation_service),
    config: ConfigData = Depends(get_app_config),
) -> list[PublicUser]:
    """Onboarded users with no edge to the caller; oversized pages are capped."""
    page_size = page_size or config.recommendations.default_page_size
    return list(recommendations.recommend(user.id, page_size, page))


@router.get("/friends", response_model=list[PublicUser])
def my_friends(
    user: PublicUser = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph),
) -> list[PublicUser]:
    return graph.list_friends(user.id)


@router.post(
    "/friend-request/{recipient_id}",
    response_model=FriendRequestView,
    status_code=status.HTTP_201_CREATED,
)
def send_friend_request(
    recipient_id: str,
    user: PublicUser = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph),
    db: Session = Depends(get_db_session),
) -> FriendRequestView:
    edge = graph.send_request(user.id, recipient_id)
    return _views([edge], db)[0]


@router.put("/friend-request/{edge_id}/accept", response_model=FriendRequestView)
def accept_friend_request(
    edge_id: str,
    user: PublicUser = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph),
    db: Session = Depends(get_db_session),
) -> FriendRequestView:
    edge = graph.accept_request(edge_id, user.id)
    return _views([edge], db)[0]


@router.get("/friend-requests", response_model=FriendRequestsResponse)
def friend_requests(
    user: PublicUser = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph),
    db: Session = Depends(get_db_session),
) -> FriendRequestsResponse:
    return FriendRequestsResponse(
        incoming=_views(graph.list_incoming_pending(user.id), db),
        accepted=_views(graph.list_recently_accepted(user.id), db),
    )


@router.get("/outgoing-friend-requests", response_model=list[FriendRequestView])
def outgoing_friend_requests(
    user: PublicUser = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph),
    db: Session = Depends(get_db_session),
) -> list[FriendRequestView]:
    return _views(graph.list_outgoing_pending(user.id), db)


@router.patch("/me", response_model=PublicUser)
async def update_me(
    payload: ProfileUpdateRequest,
    user: PublicUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> PublicUser:
    return await accounts.update_profile(user.id, payload.model_dump(exclude_none=True))

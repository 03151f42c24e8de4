"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.lingomate.api.http.app_data import ApplicationDependencies
from src.lingomate.core.services import (
    AccountService,
    ChatBridge,
    FriendGraphService,
    RecommendationService,
    SessionManager,
)
from src.lingomate.entities.core.user import PublicUser, UserRepository
from src.lingomate.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> ConfigData:
    return app_deps.config


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_chat_bridge(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> ChatBridge:
    return app_deps.chat_bridge


def get_session_manager(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db: Session = Depends(get_db_session),
) -> SessionManager:
    return SessionManager(app_deps.session_settings, UserRepository(db))


def get_account_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db: Session = Depends(get_db_session),
    session_manager: SessionManager = Depends(get_session_manager),
) -> AccountService:
    return AccountService(
        db, session_manager, app_deps.chat_bridge, app_deps.config.security
    )


def get_friend_graph(db: Session = Depends(get_db_session)) -> FriendGraphService:
    return FriendGraphService(db)


def get_recommendation_service(
    config: ConfigData = Depends(get_app_config),
    db: Session = Depends(get_db_session),
    graph: FriendGraphService = Depends(get_friend_graph),
) -> RecommendationService:
    return RecommendationService(graph, UserRepository(db), config.recommendations)


def extract_session_token(request: Request, cookie_name: str) -> str | None:
    """Read the session token from its cookie, or from a Bearer header."""
    token = request.cookies.get(cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def get_current_user(
    request: Request,
    config: ConfigData = Depends(get_app_config),
    session_manager: SessionManager = Depends(get_session_manager),
) -> PublicUser:
    """Authenticate the request; every protected route depends on this."""
    token = extract_session_token(request, config.security.session_cookie_name)
    user = session_manager.verify(token)
    request.state.user_id = user.id
    return user

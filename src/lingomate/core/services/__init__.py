"""Core services exports."""

from .chat.chat_bridge import ChatBridge, ChatCredential
from .chat.stream_client import ChatProvider, StreamChatClient
from .database.db_session import DbSessionService
from .graph.friend_graph import FriendGraphService
from .recommendation.recommendation_service import RecommendationService
from .session.session_manager import SessionManager, SessionSettings, SessionToken
from .user.account_service import AccountService

__all__ = [
    # Session
    "SessionManager",
    "SessionSettings",
    "SessionToken",
    # Social graph
    "FriendGraphService",
    "RecommendationService",
    # Chat
    "ChatBridge",
    "ChatCredential",
    "ChatProvider",
    "StreamChatClient",
    # Accounts
    "AccountService",
    # Database
    "DbSessionService",
]

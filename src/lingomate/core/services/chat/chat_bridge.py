"""Chat bridge: trade a verified identity for an external chat credential."""

import time
from collections.abc import Callable

from loguru import logger
from pydantic import BaseModel

from src.lingomate.core.errors import MisconfiguredBridge
from src.lingomate.core.services.chat.stream_client import ChatProvider, StreamChatClient
from src.lingomate.entities.core.user import PublicUser
from src.lingomate.runtime.config.config_data import ChatConfig


class ChatCredential(BaseModel):
    """Short-lived provider token scoped to one user; never stored here."""

    user_id: str
    token: str
    api_key: str
    expires_at: int


class ChatBridge:
    """Issue chat credentials and keep the provider's copy of profiles fresh.

    Calls are made once; a failed call surfaces as ProviderUnavailable and is
    never retried here, since provider-side effects are not idempotent.
    """

    def __init__(
        self,
        config: ChatConfig,
        provider: ChatProvider | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if not config.api_key or not config.api_secret:
            raise MisconfiguredBridge()

        self._config = config
        self._api_key: str = config.api_key
        self._clock = clock
        self._provider = provider or StreamChatClient(
            api_key=config.api_key,
            api_secret=config.api_secret,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    async def issue_chat_credential(self, identity: PublicUser) -> ChatCredential:
        expires_at = int(self._clock()) + self._config.token_ttl_seconds
        token = await self._provider.create_token(identity.id, expires_at)
        return ChatCredential(
            user_id=identity.id,
            token=token,
            api_key=self._api_key,
            expires_at=expires_at,
        )

    async def upsert_profile(self, identity: PublicUser) -> None:
        await self._provider.upsert_user(
            identity.id, identity.full_name, identity.profile_pic or None
        )
        logger.debug("Chat profile upserted", user_id=identity.id)

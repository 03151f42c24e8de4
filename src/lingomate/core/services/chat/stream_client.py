"""Client for the external real-time chat provider (Stream)."""

import time
from typing import Protocol

import httpx
from authlib.jose import JoseError, jwt
from loguru import logger

from src.lingomate.core.errors import ProviderUnavailable


class ChatProvider(Protocol):
    """The two upstream operations the chat bridge relies on."""

    async def create_token(self, user_id: str, expires_at: int) -> str: ...

    async def upsert_user(self, user_id: str, name: str, image: str | None) -> None: ...


class StreamChatClient:
    """Stream chat server-side client.

    User tokens are HS256 JWTs signed with the API secret, exactly what the
    provider's SDKs produce; profile upserts go over the REST API.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = "https://chat.stream-io-api.com",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    def _sign(self, payload: dict) -> str:
        token = jwt.encode({"alg": "HS256", "typ": "JWT"}, payload, self._api_secret)
        return token.decode() if isinstance(token, bytes) else token

    async def create_token(self, user_id: str, expires_at: int) -> str:
        payload = {"user_id": str(user_id), "iat": int(time.time()), "exp": expires_at}
        try:
            return self._sign(payload)
        except JoseError as e:
            logger.error(f"Error generating chat token: {e}")
            raise ProviderUnavailable("Could not create chat token") from e

    async def upsert_user(self, user_id: str, name: str, image: str | None) -> None:
        body = {"users": {user_id: {"id": user_id, "name": name, "image": image or ""}}}
        headers = {
            "Authorization": self._sign({"server": True}),
            "stream-auth-type": "jwt",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self._base_url}/users",
                    params={"api_key": self.api_key},
                    json=body,
                    headers=headers,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Chat provider rejected user upsert: {e.response.status_code}"
            )
            raise ProviderUnavailable("Chat provider rejected the profile update") from e
        except httpx.HTTPError as e:
            logger.error(f"Error upserting chat user: {e}")
            raise ProviderUnavailable() from e

"""Tests for the chat bridge and the Stream client behind it."""

import json

import httpx
import pytest
from authlib.jose import jwt

from src.lingomate.core.errors import MisconfiguredBridge, ProviderUnavailable
from src.lingomate.core.services import ChatBridge, StreamChatClient
from src.lingomate.entities.core.user import PublicUser
from src.lingomate.runtime.config.config_data import ChatConfig
from tests.utils import FakeChatProvider

API_KEY = "stream-key"
API_SECRET = "stream-secret-0123456789abcdef0123"


@pytest.fixture
def identity() -> PublicUser:
    return PublicUser(
        id="user-1",
        email="ana@example.com",
        full_name="Ana",
        profile_pic="https://avatar.test/1.png",
    )


def make_client(handler) -> StreamChatClient:
    return StreamChatClient(
        api_key=API_KEY,
        api_secret=API_SECRET,
        base_url="https://chat.test/",
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestStreamChatClient:
    async def test_create_token_is_scoped_to_user(self):
        client = make_client(lambda request: httpx.Response(200))

        token = await client.create_token("user-1", expires_at=2_000_000_000)

        claims = jwt.decode(token, API_SECRET)
        assert claims["user_id"] == "user-1"
        assert claims["exp"] == 2_000_000_000

    async def test_upsert_user_request(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"users": {}})

        await make_client(handler).upsert_user("user-1", "Ana", "https://avatar.test/1.png")

        (request,) = seen
        assert request.method == "POST"
        assert request.url.path == "/users"
        assert request.url.params["api_key"] == API_KEY
        assert request.headers["stream-auth-type"] == "jwt"
        assert jwt.decode(request.headers["Authorization"], API_SECRET)["server"] is True
        body = json.loads(request.content)
        assert body["users"]["user-1"] == {
            "id": "user-1",
            "name": "Ana",
            "image": "https://avatar.test/1.png",
        }

    async def test_server_error_is_not_retried(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503)

        with pytest.raises(ProviderUnavailable):
            await make_client(handler).upsert_user("user-1", "Ana", None)
        assert calls == 1

    async def test_timeout_maps_to_provider_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderUnavailable):
            await make_client(handler).upsert_user("user-1", "Ana", None)


class TestChatBridge:
    async def test_issue_chat_credential(self, chat_bridge, fake_chat, test_config, clock, identity):
        credential = await chat_bridge.issue_chat_credential(identity)

        expected_expiry = int(clock.now) + test_config.chat.token_ttl_seconds
        assert credential.user_id == identity.id
        assert credential.api_key == test_config.chat.api_key
        assert credential.token == f"chat-token-for-{identity.id}"
        assert credential.expires_at == expected_expiry
        assert fake_chat.token_calls == [(identity.id, expected_expiry)]

    async def test_provider_failure_surfaces(self, test_config, identity):
        bridge = ChatBridge(test_config.chat, provider=FakeChatProvider(fail=True))

        with pytest.raises(ProviderUnavailable):
            await bridge.issue_chat_credential(identity)

    async def test_upsert_profile(self, chat_bridge, fake_chat, identity):
        await chat_bridge.upsert_profile(identity)
        await chat_bridge.upsert_profile(identity.model_copy(update={"profile_pic": ""}))

        assert fake_chat.upserts == [
            ("user-1", "Ana", "https://avatar.test/1.png"),
            ("user-1", "Ana", None),
        ]

    @pytest.mark.parametrize(
        "config",
        [
            ChatConfig(api_key=None, api_secret="secret"),
            ChatConfig(api_key="key", api_secret=None),
            ChatConfig(api_key="", api_secret=""),
        ],
    )
    def test_missing_credentials_are_fatal(self, config):
        with pytest.raises(MisconfiguredBridge):
            ChatBridge(config)

    def test_default_provider_is_stream(self, test_config):
        bridge = ChatBridge(test_config.chat)

        assert isinstance(bridge._provider, StreamChatClient)

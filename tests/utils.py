import base64
import json

from src.lingomate.core.errors import ProviderUnavailable


def b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def unsigned_token(claims: dict, alg: str = "none") -> str:
    """Compact JWT with a bogus signature segment."""
    return f"{b64url({'alg': alg, 'typ': 'JWT'})}.{b64url(claims)}.c2lnbmF0dXJl"


class FakeClock:
    """Settable clock for services that take ``clock=``."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChatProvider:
    """In-memory ChatProvider that records every call."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.token_calls: list[tuple[str, int]] = []
        self.upserts: list[tuple[str, str, str | None]] = []

    async def create_token(self, user_id: str, expires_at: int) -> str:
        self.token_calls.append((user_id, expires_at))
        if self.fail:
            raise ProviderUnavailable()
        return f"chat-token-for-{user_id}"

    async def upsert_user(self, user_id: str, name: str, image: str | None) -> None:
        self.upserts.append((user_id, name, image))
        if self.fail:
            raise ProviderUnavailable()

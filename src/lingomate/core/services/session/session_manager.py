"""Stateless session tokens: issuance and verification."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from authlib.common.security import generate_token
from authlib.jose import JoseError, JsonWebToken
from authlib.jose.errors import BadSignatureError, ExpiredTokenError
from loguru import logger

from src.lingomate.core.errors import (
    Expired,
    IdentityNotFound,
    InvalidSignature,
    MisconfiguredSession,
    MissingCredential,
)
from src.lingomate.core.services.jwt.jwt_utils import preview_jwt
from src.lingomate.entities.core.user import PublicUser, User
from src.lingomate.runtime.config.config_data import ConfigData


class UserLookup(Protocol):
    def find_by_id(self, user_id: str) -> User | None: ...


@dataclass(frozen=True)
class SessionSettings:
    """Everything the session manager needs, passed in explicitly."""

    signing_secret: str | None
    max_age_seconds: int = 7 * 24 * 3600
    issuer: str = "lingomate"
    algorithm: str = "HS256"
    allowed_algorithms: tuple[str, ...] = ("HS256",)
    clock_skew: int = 0

    @classmethod
    def from_config(cls, config: ConfigData) -> "SessionSettings":
        return cls(
            signing_secret=config.app.session_signing_secret,
            max_age_seconds=config.app.session_max_age,
            issuer=config.jwt.gen_issuer,
            algorithm=config.jwt.algorithm,
            allowed_algorithms=tuple(config.jwt.allowed_algorithms),
            clock_skew=config.jwt.clock_skew,
        )


@dataclass(frozen=True)
class SessionToken:
    """A signed session token and the claims it encodes."""

    value: str
    user_id: str
    issued_at: int
    expires_at: int
    token_id: str

    def __str__(self) -> str:
        return self.value


class SessionManager:
    """Issue and verify signed session tokens bound to a user id.

    Tokens are never stored. A token is valid while its signature checks out,
    it has not expired, and its subject still resolves in the credential store.
    """

    def __init__(
        self,
        settings: SessionSettings,
        users: UserLookup,
        clock: Callable[[], float] = time.time,
    ):
        if not settings.signing_secret:
            raise MisconfiguredSession()
        if settings.algorithm not in settings.allowed_algorithms:
            raise MisconfiguredSession(
                f"Signing algorithm {settings.algorithm} is not in the allowed list"
            )
        self._settings = settings
        self._users = users
        self._clock = clock
        self._jwt = JsonWebToken(list(settings.allowed_algorithms))

    def issue(self, user_id: str) -> SessionToken:
        now = int(self._clock())
        token_id = generate_token(16)
        payload = {
            "iss": self._settings.issuer,
            "sub": user_id,
            "iat": now,
            "exp": now + self._settings.max_age_seconds,
            "jti": token_id,
        }
        header = {"alg": self._settings.algorithm, "typ": "JWT"}
        token = self._jwt.encode(header, payload, self._settings.signing_secret)

        return SessionToken(
            value=token.decode() if isinstance(token, bytes) else token,
            user_id=user_id,
            issued_at=payload["iat"],
            expires_at=payload["exp"],
            token_id=token_id,
        )

    def decode(self, token: str | None) -> dict:
        """Check signature, issuer and expiry; return the verified claims."""
        if not token:
            raise MissingCredential()

        preview = preview_jwt(token)
        if preview.alg not in self._settings.allowed_algorithms:
            raise InvalidSignature("Disallowed token algorithm")

        claims_options = {
            "iss": {"essential": True, "value": self._settings.issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = self._jwt.decode(
                token, self._settings.signing_secret, claims_options=claims_options
            )
            claims.validate(now=int(self._clock()), leeway=self._settings.clock_skew)
        except ExpiredTokenError as exc:
            raise Expired() from exc
        except BadSignatureError as exc:
            raise InvalidSignature() from exc
        except (JoseError, ValueError) as exc:
            logger.debug(f"Rejected session token: {exc}")
            raise InvalidSignature() from exc

        return dict(claims)

    def verify(self, token: str | None) -> PublicUser:
        """Resolve a session token to the identity it was issued for.

        Raises:
            MissingCredential: no token supplied
            InvalidSignature: token malformed or not signed by us
            Expired: token past its expiry
            IdentityNotFound: the user no longer exists
        """
        claims = self.decode(token)
        user = self._users.find_by_id(str(claims["sub"]))
        if user is None:
            raise IdentityNotFound()
        return user.to_public()

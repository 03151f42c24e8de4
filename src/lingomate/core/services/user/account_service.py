"""Signup, login, onboarding and profile edits."""

from typing import Any

from loguru import logger
from sqlmodel import Session

from src.lingomate.core.errors import (
    DuplicateKey,
    EmailTaken,
    InvalidCredentials,
    InvalidEmail,
    MissingFields,
    ProviderUnavailable,
    WeakPassword,
)
from src.lingomate.core.security import (
    hash_password,
    is_valid_email,
    random_avatar_url,
    verify_password,
)
from src.lingomate.core.services.chat.chat_bridge import ChatBridge
from src.lingomate.core.services.session.session_manager import (
    SessionManager,
    SessionToken,
)
from src.lingomate.entities.core.user import PublicUser, User, UserRepository
from src.lingomate.entities.core.user.entity import PROFILE_FIELDS
from src.lingomate.runtime.config.config_data import SecurityConfig

ONBOARDING_REQUIRED_FIELDS = (
    "full_name",
    "bio",
    "native_language",
    "learning_language",
    "location",
)


class AccountService:
    def __init__(
        self,
        db_session: Session,
        session_manager: SessionManager,
        chat_bridge: ChatBridge | None,
        security: SecurityConfig | None = None,
    ):
        self._db_session = db_session
        self._users = UserRepository(db_session)
        self._sessions = session_manager
        self._chat = chat_bridge
        self._security = security or SecurityConfig()

    async def signup(
        self, email: str, password: str, full_name: str
    ) -> tuple[PublicUser, SessionToken]:
        """Create an account and sign the new user in.

        Raises:
            MissingFields: a required field is blank
            WeakPassword: password shorter than the configured minimum
            InvalidEmail: email is not shaped like an address
            EmailTaken: an account already uses the email
        """
        missing = [
            name
            for name, value in (
                ("email", email),
                ("password", password),
                ("full_name", full_name),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise MissingFields(missing)

        min_length = self._security.min_password_length
        if len(password) < min_length:
            raise WeakPassword(f"Password must be at least {min_length} characters")
        if not is_valid_email(email):
            raise InvalidEmail()

        user = User(
            email=email,
            password_hash=hash_password(password, rounds=self._security.bcrypt_rounds),
            full_name=full_name.strip(),
            profile_pic=random_avatar_url(),
        )
        try:
            self._users.create(user)
            self._db_session.commit()
        except DuplicateKey as e:
            raise EmailTaken() from e
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("User signed up", user_id=user.id)
        public = user.to_public()
        await self._sync_chat_profile(public)
        return public, self._sessions.issue(user.id)

    def login(self, email: str, password: str) -> tuple[PublicUser, SessionToken]:
        if not email or not password:
            raise MissingFields([f for f, v in (("email", email), ("password", password)) if not v])

        user = self._users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            # Same answer for unknown email and wrong password
            raise InvalidCredentials()

        logger.info("User logged in", user_id=user.id)
        return user.to_public(), self._sessions.issue(user.id)

    async def complete_onboarding(
        self, user_id: str, profile: dict[str, Any]
    ) -> PublicUser:
        missing = [
            name
            for name in ONBOARDING_REQUIRED_FIELDS
            if not str(profile.get(name) or "").strip()
        ]
        if missing:
            raise MissingFields(missing)

        fields = self._profile_fields(profile)
        fields["onboarded"] = True
        user = self._apply(user_id, fields)

        logger.info("User onboarded", user_id=user_id)
        await self._sync_chat_profile(user)
        return user

    async def update_profile(self, user_id: str, profile: dict[str, Any]) -> PublicUser:
        fields = self._profile_fields(profile)
        if "full_name" in fields and not fields["full_name"]:
            raise MissingFields(["full_name"])
        if not fields:
            return self._users.get(user_id).to_public()

        user = self._apply(user_id, fields)
        await self._sync_chat_profile(user)
        return user

    def _apply(self, user_id: str, fields: dict[str, Any]) -> PublicUser:
        try:
            user = self._users.update(user_id, fields)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        return user.to_public()

    @staticmethod
    def _profile_fields(profile: dict[str, Any]) -> dict[str, Any]:
        return {
            name: str(value).strip()
            for name, value in profile.items()
            if name in PROFILE_FIELDS and value is not None
        }

    async def _sync_chat_profile(self, user: PublicUser) -> None:
        """Push the profile to the chat provider without blocking the caller."""
        if self._chat is None:
            return
        try:
            await self._chat.upsert_profile(user)
        except ProviderUnavailable as e:
            logger.warning(f"Chat profile sync failed for user {user.id}: {e}")

"""Credential store: data-access layer for users."""

from collections.abc import Collection, Iterator
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.lingomate.core.errors import DuplicateKey, NotFound
from src.lingomate.entities.core.user.entity import User, normalize_email
from src.lingomate.entities.core.user.table import UserTable

_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


class UserRepository:
    """Data-access layer for users.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_id(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: str) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def find_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == normalize_email(email))
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def exists(self, user_id: str) -> bool:
        return self._session.get(UserTable, user_id) is not None

    def create(self, user: User) -> User:
        """Persist a new user; the email must not already be registered."""
        if self.find_by_email(user.email) is not None:
            raise DuplicateKey("Email already registered", field="email")

        row = UserTable.model_validate(user, from_attributes=True)
        self._session.add(row)
        self._flush_unique()
        return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        row = self._session.get(UserTable, user_id)
        if row is None:
            raise NotFound(f"User {user_id} not found")

        for name, value in fields.items():
            if name in _IMMUTABLE_FIELDS or name not in UserTable.model_fields:
                raise ValueError(f"Field {name!r} cannot be updated")
            if name == "email":
                value = normalize_email(value)
            setattr(row, name, value)

        self._session.add(row)
        self._flush_unique()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def iter_onboarded(
        self,
        exclude_ids: Collection[str],
        limit: int,
        offset: int = 0,
    ) -> Iterator[User]:
        """Yield onboarded users outside ``exclude_ids``, newest first."""
        statement = select(UserTable).where(UserTable.onboarded == True)  # noqa: E712
        if exclude_ids:
            statement = statement.where(col(UserTable.id).not_in(list(exclude_ids)))
        statement = (
            statement.order_by(col(UserTable.created_at).desc(), col(UserTable.id))
            .offset(offset)
            .limit(limit)
        )
        for row in self._session.exec(statement):
            yield User.model_validate(row, from_attributes=True)

    def list_by_ids(self, user_ids: Collection[str]) -> list[User]:
        if not user_ids:
            return []
        statement = select(UserTable).where(col(UserTable.id).in_(list(user_ids)))
        return [
            User.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def _flush_unique(self) -> None:
        try:
            self._session.flush()
        except IntegrityError as e:
            self._session.rollback()
            raise DuplicateKey("Email already registered", field="email") from e

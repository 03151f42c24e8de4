"""User database table model."""

from sqlalchemy import Column, String
from sqlmodel import Field

from src.lingomate.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    The unique index on email backs the credential store's DuplicateKey check.
    """

    __tablename__ = "users"

    email: str = Field(sa_column=Column(String(320), nullable=False, unique=True, index=True))
    password_hash: str
    full_name: str
    bio: str = ""
    profile_pic: str = ""
    native_language: str = ""
    learning_language: str = ""
    location: str = ""
    onboarded: bool = Field(default=False, index=True)

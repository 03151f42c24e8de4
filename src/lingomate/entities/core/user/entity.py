"""User domain entities."""

from typing import Any

from pydantic import Field, field_validator

from src.lingomate.entities.core._base import Entity

# Fields a user may edit on their own profile
PROFILE_FIELDS = (
    "full_name",
    "bio",
    "profile_pic",
    "native_language",
    "learning_language",
    "location",
)


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address so lookups are case-insensitive."""
    return email.strip().lower()


class PublicUser(Entity):
    """User identity as exposed to other components.

    Carries the profile and onboarding state but never the password hash.
    """

    email: str = Field(description="Unique, normalised email address")
    full_name: str = Field(description="Display name")
    bio: str = Field(default="", description="Short self description")
    profile_pic: str = Field(default="", description="Avatar URL")
    native_language: str = Field(default="", description="Language the user speaks natively")
    learning_language: str = Field(default="", description="Language the user is learning")
    location: str = Field(default="", description="Free-form location")
    onboarded: bool = Field(default=False, description="Onboarding completed")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity and profile, ignoring timestamps."""
        if not isinstance(other, PublicUser):
            return False

        return (
            self.id == other.id
            and self.email == other.email
            and self.full_name == other.full_name
            and self.onboarded == other.onboarded
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email))


class User(PublicUser):
    """Full identity record owned by the credential store."""

    password_hash: str = Field(description="bcrypt hash of the user's password")

    def to_public(self) -> PublicUser:
        """Drop the credential before handing the identity to callers."""
        return PublicUser.model_validate(self.model_dump(exclude={"password_hash"}))

"""Authentication endpoints: signup, login, logout, onboarding."""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.lingomate.api.http.deps import (
    get_account_service,
    get_app_config,
    get_current_user,
)
from src.lingomate.core.services import AccountService, SessionToken
from src.lingomate.entities.core.user import PublicUser
from src.lingomate.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/auth", tags=["auth"])


class SignupRequest(BaseModel):
    email: str = ""
    password: str = ""
    full_name: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class OnboardingRequest(BaseModel):
    full_name: str | None = None
    bio: str | None = None
    native_language: str | None = None
    learning_language: str | None = None
    location: str | None = None
    profile_pic: str | None = None


class UserResponse(BaseModel):
    success: bool = True
    user: PublicUser


class MessageResponse(BaseModel):
    success: bool = True
    message: str = Field(default="")


def set_session_cookie(response: Response, token: SessionToken, config: ConfigData) -> None:
    """Attach the session token as an HttpOnly, same-site cookie."""
    security = config.security
    response.set_cookie(
        key=security.session_cookie_name,
        value=token.value,
        max_age=config.app.session_max_age,
        httponly=True,
        samesite=security.cookie_samesite,
        secure=security.secure_cookies and config.app.environment != "development",
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    config: ConfigData = Depends(get_app_config),
) -> UserResponse:
    user, token = await accounts.signup(payload.email, payload.password, payload.full_name)
    set_session_cookie(response, token, config)
    return UserResponse(user=user)


@router.post("/login", response_model=UserResponse)
def login(
    payload: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    config: ConfigData = Depends(get_app_config),
) -> UserResponse:
    user, token = accounts.login(payload.email, payload.password)
    set_session_cookie(response, token, config)
    return UserResponse(user=user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response, config: ConfigData = Depends(get_app_config)
) -> MessageResponse:
    """Tokens are stateless; logging out only drops the client's cookie."""
    response.delete_cookie(config.security.session_cookie_name)
    return MessageResponse(message="Logout successful")


@router.post("/onboarding", response_model=UserResponse)
async def onboard(
    payload: OnboardingRequest,
    user: PublicUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> UserResponse:
    updated = await accounts.complete_onboarding(
        user.id, payload.model_dump(exclude_none=True)
    )
    return UserResponse(user=updated)


@router.get("/me", response_model=UserResponse)
def me(user: PublicUser = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=user)

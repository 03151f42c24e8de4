"""Chat credential endpoint."""

from fastapi import APIRouter, Depends

from src.lingomate.api.http.deps import get_chat_bridge, get_current_user
from src.lingomate.core.services import ChatBridge, ChatCredential
from src.lingomate.entities.core.user import PublicUser

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/token", response_model=ChatCredential)
async def chat_token(
    user: PublicUser = Depends(get_current_user),
    chat: ChatBridge = Depends(get_chat_bridge),
) -> ChatCredential:
    """Issue a provider token for the signed-in user only.

    A provider outage answers 503 here; the session itself stays valid.
    """
    return await chat.issue_chat_credential(user)

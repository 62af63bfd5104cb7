"""
Chat endpoints (current user only):
- GET    /api/chat/conversations — list own conversations, most recent first
- POST   /api/chat/conversations — create conversation
- GET    /api/chat/conversations/{id} — conversation + messages (owner only)
- PATCH  /api/chat/conversations/{id} — rename / change response mode (owner only)
- DELETE /api/chat/conversations/{id} — delete conversation and its messages (owner only)
- POST   /api/chat/conversations/{id}/messages — send a user message (owner only; audited)
Errors from the service are mapped in app.main (ValidationError 400, NotAuthorized 403,
StoreUnavailable 503).
"""
from fastapi import APIRouter, Depends, Request, status

from app.auth import get_current_user
from app.models.user import User
from app.schemas.chat import (
    ConversationCreate,
    ConversationOut,
    ConversationUpdate,
    ConversationWithMessages,
    MessageOut,
    SendMessageRequest,
    SendMessageResponse,
    SuccessResponse,
)
from app.services.conversation_service import ConversationService

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_conversation_service(request: Request) -> ConversationService:
    """ConversationService built at startup (app.main lifespan) around the shared Database."""
    return request.app.state.conversation_service


@router.get("/conversations", response_model=list[ConversationOut])
def list_conversations(
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    return [ConversationOut.model_validate(c) for c in service.list_conversations(user.id)]


@router.post("/conversations", response_model=ConversationOut, status_code=status.HTTP_201_CREATED)
def create_conversation(
    body: ConversationCreate,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    mode = body.response_mode.value if body.response_mode else "concise"
    conv = service.create_conversation(user.id, body.title, mode)
    return ConversationOut.model_validate(conv)


@router.get("/conversations/{conversation_id}", response_model=ConversationWithMessages)
def get_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    result = service.get_conversation_with_messages(user.id, conversation_id)
    return ConversationWithMessages(
        conversation=ConversationOut.model_validate(result["conversation"]),
        messages=[MessageOut.model_validate(m) for m in result["messages"]],
    )


@router.patch("/conversations/{conversation_id}", response_model=SuccessResponse)
def update_conversation(
    conversation_id: str,
    body: ConversationUpdate,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    service.update_conversation(
        user.id,
        conversation_id,
        title=body.title,
        response_mode=body.response_mode.value if body.response_mode else None,
    )
    return SuccessResponse()


@router.delete("/conversations/{conversation_id}", response_model=SuccessResponse)
def delete_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    service.delete_conversation(user.id, conversation_id)
    return SuccessResponse()


@router.post("/conversations/{conversation_id}/messages", response_model=SendMessageResponse)
def send_message(
    conversation_id: str,
    body: SendMessageRequest,
    request: Request,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
):
    message = service.send_message(
        user.id,
        conversation_id,
        body.content,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return SendMessageResponse(user_message=MessageOut.model_validate(message))

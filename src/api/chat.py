"""Event-scoped chat endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.api.errors import error_response
from src.auth.session import require_access_token
from src.services.event_chat import ChatMessage, EventChatService, EventContext
from src.services.llm_client import LLMClientError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    message: str | None = None
    eventContext: EventContext | None = None
    history: list[ChatMessage] = Field(default_factory=list)


def get_chat_service(request: Request) -> EventChatService:
    """Get EventChatService from app state."""
    if not hasattr(request.app.state, "chat_service"):
        raise HTTPException(status_code=503, detail="Chat service not initialized")
    return request.app.state.chat_service


@router.post("/chat", dependencies=[Depends(require_access_token)])
async def chat(
    body: ChatRequest,
    service: Annotated[EventChatService, Depends(get_chat_service)],
):
    """Answer a question about the event in ``eventContext``."""
    if not body.message or body.eventContext is None:
        return error_response(400, "Missing required fields")

    try:
        reply = await service.reply(body.message, body.eventContext, body.history)
    except LLMClientError as e:
        logger.error(f"Error in chat endpoint: {e}")
        return error_response(500, "Failed to process chat request")

    return {"response": reply}

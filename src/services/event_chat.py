"""Event-scoped chat assistant."""

import structlog
from pydantic import BaseModel, Field

from src.config import settings
from src.services.llm_client import CompletionClient

logger = structlog.get_logger()

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 500
NO_RESPONSE = "Sorry, I could not generate a response."

SYSTEM_PROMPT = """You are an AI assistant helping users prepare for their events. You have access to the event details and should use this context to provide relevant, specific answers.

When responding:
1. Be concise and direct
2. Use the event details to provide context-specific answers
3. If asked about topics not in the event details, make reasonable assumptions based on the event type
4. If you're making assumptions, clearly state them
5. Focus on actionable advice and practical suggestions
6. If asked about sensitive topics, maintain professionalism and suggest consulting appropriate professionals

Remember to:
- Keep responses focused on event preparation
- Provide specific examples when possible
- Suggest follow-up questions when appropriate
- Acknowledge when certain information isn't available in the event details"""


class EventContext(BaseModel):
    title: str
    description: str = ""
    date: str = ""
    time: str = ""
    attendees: list[str] = Field(default_factory=list)
    location: str | None = None


class ChatMessage(BaseModel):
    role: str
    content: str


def build_chat_prompt(
    message: str, event: EventContext, history: list[ChatMessage]
) -> str:
    """Render the event context, prior turns and new message as one prompt."""
    lines = [
        "Event Context:",
        f"Title: {event.title}",
        f"Description: {event.description}",
        f"Date: {event.date}",
        f"Time: {event.time}",
        f"Attendees: {', '.join(event.attendees)}",
    ]
    if event.location:
        lines.append(f"Location: {event.location}")
    lines.append("")
    lines.append("Previous messages:")
    for turn in history:
        speaker = "Assistant" if turn.role == "assistant" else "User"
        lines.append(f"{speaker}: {turn.content}")
    lines.append("")
    lines.append(f"User: {message}")
    return "\n".join(lines)


class EventChatService:
    """Answers questions about a single event."""

    def __init__(self, llm_client: CompletionClient):
        self._llm = llm_client

    async def reply(
        self,
        message: str,
        event: EventContext,
        history: list[ChatMessage] | None = None,
    ) -> str:
        """Generate the assistant's reply.

        Raises:
            LLMClientError: If the completion call fails
        """
        prompt = build_chat_prompt(message, event, history or [])
        content = await self._llm.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=CHAT_TEMPERATURE,
            json_mode=False,
            max_tokens=CHAT_MAX_TOKENS,
            model=settings.chat_model,
        )
        logger.info("chat reply generated", event_title=event.title, turns=len(history or []))
        return content or NO_RESPONSE

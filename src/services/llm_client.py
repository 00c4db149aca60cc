"""LLM client wrappers for chat completions.

OpenRouter exposes an OpenAI-compatible API, so the default client is the
OpenAI SDK pointed at the OpenRouter base URL. Anthropic is used directly
as the low-latency primary for event classification when a key is set.
"""

from typing import Protocol

from anthropic import APIError as AnthropicAPIError
from anthropic import AsyncAnthropic
from openai import APIError, AsyncOpenAI

from src.config import settings


class LLMClientError(Exception):
    """Raised when an LLM completion fails."""

    pass


class CompletionClient(Protocol):
    """Anything that can turn chat messages into completion text."""

    model: str

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str: ...


class LLMClient:
    """OpenAI-compatible client wrapper (OpenRouter by default)."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        *,
        model: str | None = None,
    ):
        """Initialize LLM client.

        Args:
            client: Optional AsyncOpenAI client for dependency injection.
                   If not provided, creates one from settings.
            model: Default model for completions (OpenRouter model format)
        """
        self.model = model or settings.preparation_model
        if client is not None:
            self._client = client
        elif settings.openrouter_api_key:
            self._client = AsyncOpenAI(
                api_key=settings.openrouter_api_key,
                base_url=settings.openrouter_base_url,
                default_headers={
                    "HTTP-Referer": settings.openrouter_referer,
                    "X-Title": settings.openrouter_title,
                },
            )
        else:
            # Allow initialization without API key for testing
            self._client = None

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        """Run a single chat completion and return the message content.

        Args:
            messages: Chat messages with role and content
            temperature: Sampling temperature
            json_mode: Request JSON-object response format
            max_tokens: Optional completion length cap
            model: Override the default model for this call

        Returns:
            Completion text (never empty)

        Raises:
            LLMClientError: If the call fails or returns no content
        """
        if self._client is None:
            raise LLMClientError(
                "OpenRouter client not initialized. "
                "Set OPENROUTER_API_KEY environment variable."
            )

        kwargs: dict = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except APIError as e:
            raise LLMClientError(f"OpenRouter API error: {e}") from e
        except Exception as e:
            raise LLMClientError(f"Completion failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMClientError("Empty response from completion endpoint")
        return content


class AnthropicLLMClient:
    """Anthropic Messages API client with the same completion interface."""

    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        *,
        model: str | None = None,
    ):
        self.model = model or settings.anthropic_model
        if client is not None:
            self._client = client
        elif settings.anthropic_api_key:
            self._client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        else:
            self._client = None

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        """Run a single Messages API call and return the text content.

        System messages are lifted into the ``system`` parameter. The
        Messages API has no JSON response mode, so ``json_mode`` relies on
        the prompt's own instructions.
        """
        if self._client is None:
            raise LLMClientError(
                "Anthropic client not initialized. "
                "Set ANTHROPIC_API_KEY environment variable."
            )

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat = [m for m in messages if m["role"] != "system"]

        kwargs: dict = {
            "model": model or self.model,
            "max_tokens": max_tokens or 1024,
            "messages": chat,
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(**kwargs)
        except AnthropicAPIError as e:
            raise LLMClientError(f"Anthropic API error: {e}") from e
        except Exception as e:
            raise LLMClientError(f"Completion failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise LLMClientError("Empty response from Anthropic")
        return text


def select_classification_client() -> CompletionClient:
    """Pick the classification provider by API key presence.

    Anthropic is preferred when ANTHROPIC_API_KEY is configured; otherwise
    the OpenRouter classification model is used.
    """
    if settings.anthropic_api_key:
        return AnthropicLLMClient()
    return LLMClient(model=settings.classification_model)

"""Completion service clients.

The pipeline only needs ``await client.complete(prompt) -> str``; the
Anthropic Messages API is the production implementation.
"""

from typing import Any, Protocol

from anthropic import APIError, AsyncAnthropic
from loguru import logger

from project_master.core.config import DEFAULT_ANTHROPIC_MODEL, Settings
from project_master.core.exceptions import CompletionServiceError


class CompletionClient(Protocol):
    """Single-shot text completion."""

    model: str

    async def complete(self, prompt: str) -> str: ...


class AnthropicCompletionClient:
    """
    Completion client backed by the Anthropic Messages API.

    Exactly one HTTP attempt is made per call: SDK retries are disabled
    and any API failure surfaces as CompletionServiceError.

    Example:
        >>> client = AnthropicCompletionClient(api_key="sk-ant-...")
        >>> text = await client.complete("Return a JSON array")
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = 3000,
        base_url: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Anthropic API key.
            model: Model identifier.
            max_tokens: Token budget per request.
            base_url: Optional custom endpoint.
            client: Pre-built AsyncAnthropic (or compatible) instance.
        """
        self.model = model
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._base_url = base_url
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicCompletionClient | None":
        """Build a client from settings, or None when no API key is set."""
        if not settings.has_api_key:
            logger.info("No Anthropic API key configured; task generation will use fallback")
            return None
        assert settings.anthropic_api_key is not None
        return cls(
            api_key=settings.anthropic_api_key.get_secret_value(),
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            base_url=settings.anthropic_base_url,
        )

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = AsyncAnthropic(
                api_key=self._api_key,
                base_url=self._base_url,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        """
        Send one prompt and return the response text.

        Args:
            prompt: The single user message.

        Returns:
            Concatenated text blocks of the response.

        Raises:
            CompletionServiceError: On API errors or a response without text.
        """
        logger.debug(f"Calling {self.model} with a {len(prompt)} char prompt")

        try:
            response = await self._get_client().messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise CompletionServiceError(f"Anthropic API error: {e}") from e

        text = "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise CompletionServiceError("Anthropic API returned no text content")
        return text

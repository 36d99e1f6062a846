"""OpenAI-compatible chat completions client (DashScope/Qwen by default)."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from eat_what.domain.errors import UpstreamError, UpstreamTimeout

_logger = logging.getLogger(__name__)


class ChatCompletionClient(Protocol):
    """Interface for a single chat completion call."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        temperature: float,
        max_tokens: int,
        timeout_seconds: float,
    ) -> str:
        """Return the text content of the first choice."""

    async def close(self) -> None:
        """Release the underlying HTTP session."""


@dataclass
class OpenAIChatClient(ChatCompletionClient):
    """Chat client backed by the OpenAI SDK pointed at a compatible endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OpenAIChatClient":
        """Create a client with SDK retries disabled."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                http_client=http_client,
            )
        )

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        temperature: float,
        max_tokens: int,
        timeout_seconds: float,
    ) -> str:
        """Call ``/chat/completions`` once and map failures to domain errors."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=timeout_seconds,
            )
        except APIStatusError as exc:
            body = exc.response.text
            _logger.error(
                "Model API returned status %s: %s", exc.status_code, body
            )
            raise UpstreamError(exc.status_code, body) from exc
        except APIConnectionError as exc:
            # APITimeoutError is a subclass; both mean no usable reply in time.
            _logger.error("Model API request failed: %s", exc)
            raise UpstreamTimeout() from exc

        provider_error = getattr(response, "error", None)
        if provider_error:
            _logger.error("Model API returned an error payload: %s", provider_error)
            raise UpstreamError(
                200, str(provider_error), _provider_message(provider_error)
            )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            _logger.error("Model API returned empty content: %s", response)
            raise UpstreamError(None, "")
        return content

    async def close(self) -> None:
        """Close the SDK's HTTP session."""
        await self.client.close()


def _provider_message(error: object) -> str:
    """Extract the message from an error object in a 200 reply."""
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)

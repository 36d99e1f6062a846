"""Meal analysis pipeline: validate, prompt, call the model, normalize."""

import logging
from dataclasses import dataclass

from eat_what.adapters.openai_chat_client import ChatCompletionClient
from eat_what.domain.errors import ConfigurationError
from eat_what.domain.nutrition import NormalizedResult
from eat_what.services.normalizer import normalize_reply
from eat_what.services.prompts import PromptBuilder
from eat_what.services.validation import RequestValidator

_logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    """Run one analyze request end to end.

    ``client`` is ``None`` when no API credential is configured; requests then
    fail with ``ConfigurationError`` before the body is even inspected.
    """

    client: ChatCompletionClient | None
    validator: RequestValidator
    prompt_builder: PromptBuilder
    temperature: float = 0.2
    max_tokens: int = 1000
    timeout_seconds: float = 25.0

    async def analyze(self, body: bytes) -> NormalizedResult:
        """Analyze a raw request body and return the normalized result."""
        if self.client is None:
            _logger.error("Model API key is not configured")
            raise ConfigurationError()
        request = self.validator.parse(body)
        _logger.info(
            "Analyze request: text=%r has_image=%s mode=%s",
            (request.text or "")[:100],
            bool(request.image),
            request.mode,
        )
        plan = self.prompt_builder.build(request)
        _logger.info("Using model %s", plan.model)
        reply = await self.client.complete(
            model=plan.model,
            messages=plan.messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout_seconds=self.timeout_seconds,
        )
        result = normalize_reply(reply)
        _logger.info(
            "Normalized %s items, %s kcal", len(result.items), result.totals.kcal
        )
        return result

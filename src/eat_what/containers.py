"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from eat_what.adapters.openai_chat_client import OpenAIChatClient
from eat_what.config import Settings
from eat_what.services.analysis import AnalysisService
from eat_what.services.prompts import PromptBuilder
from eat_what.services.validation import RequestValidator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client = None
    if resolved_settings.qwen_api_key:
        chat_client = OpenAIChatClient.create(
            api_key=resolved_settings.qwen_api_key,
            base_url=resolved_settings.qwen_base_url,
        )
    analysis_service = AnalysisService(
        client=chat_client,
        validator=RequestValidator(
            max_body_bytes=resolved_settings.max_body_bytes,
            max_image_bytes=resolved_settings.max_image_bytes,
        ),
        prompt_builder=PromptBuilder(
            text_model=resolved_settings.qwen_text_model,
            vision_model=resolved_settings.qwen_vision_model,
        ),
        temperature=resolved_settings.temperature,
        max_tokens=resolved_settings.max_tokens,
        timeout_seconds=resolved_settings.upstream_timeout_seconds,
    )

    async def close_resources() -> None:
        if chat_client is not None:
            await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )

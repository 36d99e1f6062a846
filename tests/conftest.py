"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import pytest

from eat_what.adapters.openai_chat_client import ChatCompletionClient
from eat_what.config import Settings
from eat_what.containers import AppContainer
from eat_what.services.analysis import AnalysisService
from eat_what.services.prompts import PromptBuilder
from eat_what.services.validation import RequestValidator

RICE_REPLY = (
    'Sure! {"items":[{"name":"米饭","protein":2,"carbs":45,"fat":0.3}],'
    '"notes":"一碗"}'
)


@dataclass
class FakeChatClient(ChatCompletionClient):
    """Fake chat client returning a fixed reply and recording calls."""

    reply: str = RICE_REPLY
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)
    closed: bool = False

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        temperature: float,
        max_tokens: int,
        timeout_seconds: float,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "timeout_seconds": timeout_seconds,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self) -> None:
        self.closed = True


def json_body(payload: dict[str, object]) -> bytes:
    return json.dumps(payload, ensure_ascii=False).encode()


@pytest.fixture
def settings() -> Settings:
    return Settings(qwen_api_key="qwen-key", environment="test")


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def analysis_service(
    settings: Settings, chat_client: FakeChatClient
) -> AnalysisService:
    return AnalysisService(
        client=chat_client,
        validator=RequestValidator(
            max_body_bytes=settings.max_body_bytes,
            max_image_bytes=settings.max_image_bytes,
        ),
        prompt_builder=PromptBuilder(
            text_model=settings.qwen_text_model,
            vision_model=settings.qwen_vision_model,
        ),
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout_seconds=settings.upstream_timeout_seconds,
    )


@pytest.fixture
def container(
    settings: Settings,
    analysis_service: AnalysisService,
    chat_client: FakeChatClient,
) -> AppContainer:
    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )

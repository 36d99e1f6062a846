"""Tests for the HTTP surface."""

from fastapi.testclient import TestClient

from eat_what.api.app import ANALYZE_PATH, create_app
from eat_what.containers import AppContainer
from eat_what.domain.errors import UpstreamError, UpstreamTimeout
from eat_what.services.validation import MIB
from tests.conftest import FakeChatClient


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_post_returns_items_totals_and_notes(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "一碗米饭"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == {
        "items": [
            {"name": "米饭", "protein": 2.0, "fat": 0.3, "carbs": 45.0, "kcal": 191}
        ],
        "totals": {"kcal": 191, "protein": 2.0, "fat": 0.3, "carbs": 45.0},
        "notes": "一碗",
    }


def test_options_preflight(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.options(ANALYZE_PATH)

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_other_methods_are_not_allowed(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    for method in ("GET", "PUT", "DELETE"):
        response = client.request(method, ANALYZE_PATH)
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


def test_oversized_body_fails_before_model_call(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        ANALYZE_PATH,
        content=b'{"image": "' + b"a" * (6 * MIB) + b'"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "请求体过大，请使用较小的图片"}
    assert chat_client.calls == []


def test_unparseable_reply_returns_error(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    chat_client.reply = "not json at all"
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.status_code == 500
    assert response.json() == {"error": "无法解析API返回的JSON格式"}


def test_upstream_error_hides_body(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    chat_client.error = UpstreamError(502, "secret upstream detail")
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.status_code == 500
    assert response.json() == {"error": "API调用失败 (502)"}


def test_upstream_timeout_suggests_retry(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    chat_client.error = UpstreamTimeout()
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.status_code == 500
    assert "稍后再试" in response.json()["error"]


def test_unexpected_error_returns_generic_message(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    chat_client.error = RuntimeError("boom")
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.status_code == 500
    assert response.json() == {"error": "服务器内部错误"}


def test_missing_credential_returns_configuration_error(
    container: AppContainer,
) -> None:
    container.analysis_service.client = None
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.status_code == 500
    assert response.json() == {"error": "API密钥未配置"}


def test_local_environment_adds_debug_detail(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    container.settings.environment = "local"
    chat_client.error = RuntimeError("boom")
    client = TestClient(create_app(container))

    response = client.post(ANALYZE_PATH, json={"text": "面包"})

    assert response.json()["error"] == "服务器内部错误 (debug: RuntimeError: boom)"


def test_lifespan_closes_resources(
    container: AppContainer, chat_client: FakeChatClient
) -> None:
    with TestClient(create_app(container)):
        pass

    assert chat_client.closed

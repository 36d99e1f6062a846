"""Tests for the service worker script."""

from fastapi.testclient import TestClient

from eat_what.api.app import create_app
from eat_what.api.service_worker import render_service_worker
from eat_what.containers import AppContainer


def test_script_embeds_cache_name_and_precache_list() -> None:
    script = render_service_worker("eat-what-v7", ["/", "/app.js"])

    assert 'const CACHE_NAME = "eat-what-v7";' in script
    assert 'const PRECACHE = ["/", "/app.js"];' in script
    assert "caches.delete" in script


def test_served_with_configured_version(container: AppContainer) -> None:
    container.settings.cache_name = "eat-what-v2"
    client = TestClient(create_app(container))

    response = client.get("/sw.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert '"eat-what-v2"' in response.text
    assert '["/", "/index.html"]' in response.text

"""Offline cache script for the web app."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

if TYPE_CHECKING:
    from eat_what.containers import AppContainer

router = APIRouter(tags=["service-worker"])


@router.get("/sw.js")
async def service_worker(request: Request) -> Response:
    """Serve the service worker bound to the configured cache version."""
    container: AppContainer = request.app.state.container
    script = render_service_worker(
        container.settings.cache_name, container.settings.precache_paths
    )
    return Response(
        content=script,
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache"},
    )


def render_service_worker(cache_name: str, precache_paths: list[str]) -> str:
    """Return the worker script; bump ``cache_name`` whenever assets change."""
    return (
        _SERVICE_WORKER_JS.replace("__CACHE_NAME__", json.dumps(cache_name))
        .replace("__PRECACHE__", json.dumps(precache_paths))
    )


_SERVICE_WORKER_JS = """const CACHE_NAME = __CACHE_NAME__;
const PRECACHE = __PRECACHE__;

self.addEventListener('install', e => {
  e.waitUntil(caches.open(CACHE_NAME).then(c => c.addAll(PRECACHE)));
});
self.addEventListener('activate', e => {
  e.waitUntil(
    caches.keys().then(names =>
      Promise.all(names.filter(n => n !== CACHE_NAME).map(n => caches.delete(n)))
    )
  );
});
self.addEventListener('fetch', e => {
  e.respondWith(caches.match(e.request).then(r => r || fetch(e.request)));
});
"""

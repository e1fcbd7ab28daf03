"""Entry point for the codeanswer FastAPI application."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict

import httpx
from fastapi import FastAPI

from . import __version__
from .api import answer as answer_router
from .config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="codeanswer API",
    version=__version__,
    summary="Answer synthesis over semantic code search",
)


async def _check_dependency(client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
    started = time.perf_counter()
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        return {"ok": False, "url": url, "error": f"{type(exc).__name__}: {exc}"}

    latency_ms = round((time.perf_counter() - started) * 1000, 1)
    return {
        "ok": response.is_success,
        "url": url,
        "status_code": response.status_code,
        "latency_ms": latency_ms,
    }


@app.get("/", tags=["meta"])
def index() -> Dict[str, Any]:
    """Service descriptor with the answer route and its pipeline limits."""

    return {
        "service": "codeanswer-api",
        "version": __version__,
        "environment": settings.app_env,
        "answer": "/api/v1/answer?q=...&user_id=...",
        "shortlist_size": settings.snippet_count,
        "max_context_lines": settings.grow_max_lines,
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"])
async def healthz() -> Dict[str, Any]:
    """Reachability of every service an answer depends on."""

    targets = {
        "qdrant": f"{str(settings.qdrant_url).rstrip('/')}/healthz",
        "embedding_service": f"{str(settings.embeddings_base_url).rstrip('/')}/api/v1/health/simple",
        "file_index": f"{str(settings.file_index_base_url).rstrip('/')}/healthz",
        "answer_api": f"{str(settings.answer_api_base).rstrip('/')}/healthz",
    }

    async with httpx.AsyncClient(timeout=httpx.Timeout(3.0)) as client:
        checks = await asyncio.gather(*(_check_dependency(client, url) for url in targets.values()))

    dependencies = dict(zip(targets, checks))
    degraded = sorted(name for name, check in dependencies.items() if not check["ok"])
    if degraded:
        logger.warning("healthz: unreachable dependencies %s", ", ".join(degraded))
    return {
        "status": "degraded" if degraded else "ok",
        "environment": settings.app_env,
        "dependencies": dependencies,
    }


app.include_router(answer_router.router, prefix="/api/v1")

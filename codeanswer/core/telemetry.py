"""Best-effort telemetry for answer queries (LangFuse-ready)."""
from __future__ import annotations

import logging
import time
from dataclasses import asdict
from typing import Any, Dict, Optional

import httpx

from codeanswer.answer.models import QueryEvent
from codeanswer.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class AnswerTelemetry:
    """Publishes answer query events to LangFuse when configured."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        config = config or default_settings
        self.host = str(config.langfuse_host).rstrip("/") if config.langfuse_host else None
        self.public_key = config.langfuse_public_key
        self.secret_key = config.langfuse_secret_key
        self.dataset = config.langfuse_answer_dataset
        self.timeout = config.telemetry_timeout_seconds
        self.enabled = bool(self.host and self.public_key and self.secret_key and self.dataset)
        self._endpoint = f"{self.host}/api/public/ingestion/events" if self.host else None

    async def record_query(self, event: QueryEvent) -> None:
        if not self.enabled or not self._endpoint:
            return

        payload: Dict[str, Any] = {
            "traceId": None,
            "name": "answer_query",
            "timestamp": int(time.time() * 1000),
            "dataset": self.dataset,
            "userId": event.user_id,
            "metadata": asdict(event),
        }

        headers = {
            "Content-Type": "application/json",
            "X-Langfuse-Public-Key": self.public_key,
            "X-Langfuse-Secret-Key": self.secret_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self._endpoint, json=payload, headers=headers)
                response.raise_for_status()
        except Exception:
            # Telemetry must never break answers.
            logger.exception("Failed to record answer query for user=%s", event.user_id)


answer_telemetry = AnswerTelemetry()

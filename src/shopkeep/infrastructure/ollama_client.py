import logging
import time
from typing import Any

import httpx

from shopkeep.domain.errors import GenerationError
from shopkeep.domain.repositories import CuratorModel
from shopkeep.infrastructure.resilient_http import CircuitOpenError, post_json_with_retry


class OllamaCuratorClient(CuratorModel):
    """Single-shot chat completion against a local Ollama server."""

    BASE_URL = "http://localhost:11434"
    DEFAULT_MODEL = "llama3.1:8b"

    def __init__(
        self,
        base_url: str = BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 300.0,
        num_ctx: int | None = 8192,
        retries: int = 0,
        backoff_seconds: float = 0.5,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.model = model
        self._timeout = timeout
        self._num_ctx = num_ctx
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self._logger = logging.getLogger(__name__)
        self.client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def _options(self) -> dict[str, Any]:
        if self._num_ctx:
            return {"num_ctx": int(self._num_ctx)}
        return {}

    def complete(self, system_prompt: str, user_message: str) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_message})
        payload: dict[str, Any] = {"model": self.model, "messages": messages, "stream": False}
        options = self._options()
        if options:
            payload["options"] = options

        started = time.monotonic()
        try:
            body = post_json_with_retry(
                self.client,
                "/api/chat",
                payload=payload,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
                retries=self._retries,
                backoff_seconds=self._backoff_seconds,
            )
        except (httpx.HTTPError, CircuitOpenError, ValueError) as exc:
            raise GenerationError(f"ollama curator call failed: {exc}") from exc

        message = body.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise GenerationError("ollama curator reply had no message content")

        self._logger.info(
            "Ollama curator response received",
            extra={"model": self.model, "duration_s": round(time.monotonic() - started, 2)},
        )
        return content

    def close(self) -> None:
        self.client.close()

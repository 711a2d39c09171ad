import os
import time
from typing import Any

import httpx


_RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


class CircuitOpenError(RuntimeError):
    pass


def _env_flag(name: str, default: str) -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes"}


class CircuitBreaker:
    """Stops calling a model server that keeps timing out or failing.

    Settings are read from the environment when the breaker is created, so
    one breaker per server URL keeps a consistent threshold for its lifetime.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self.enabled = _env_flag("SHOPKEEP_HTTP_CIRCUIT_BREAKER_ENABLED", "1")
        self.threshold = max(1, int(os.getenv("SHOPKEEP_HTTP_CIRCUIT_FAILURE_THRESHOLD", "3")))
        self.reset_seconds = max(0.0, float(os.getenv("SHOPKEEP_HTTP_CIRCUIT_RESET_SECONDS", "120")))
        self.failures = 0
        self.open_until = 0.0

    def guard(self) -> None:
        if not self.enabled or not self.open_until:
            return
        if time.time() < self.open_until:
            raise CircuitOpenError(f"model server circuit open for {self.key} until {int(self.open_until)}")
        # Half-open: allow one attempt, the next failure reopens immediately.
        self.open_until = 0.0
        self.failures = self.threshold - 1

    def record_success(self) -> None:
        self.failures = 0
        self.open_until = 0.0

    def record_failure(self) -> None:
        if not self.enabled:
            return
        self.failures += 1
        if self.failures >= self.threshold:
            self.open_until = time.time() + self.reset_seconds


_BREAKERS: dict[str, CircuitBreaker] = {}


def breaker_for(client: httpx.Client) -> CircuitBreaker:
    key = str(getattr(client, "base_url", "") or "unknown")
    if key not in _BREAKERS:
        _BREAKERS[key] = CircuitBreaker(key)
    return _BREAKERS[key]


def reset_circuit_breakers() -> None:
    _BREAKERS.clear()


def _should_retry(exc: Exception) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError))


def _post_once(client: httpx.Client, path: str, request_kwargs: dict[str, Any]) -> dict[str, Any]:
    response = client.post(path, **request_kwargs)
    response.raise_for_status()
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object from {path}, got {type(body).__name__}")
    return body


def post_json_with_retry(
    client: httpx.Client,
    path: str,
    *,
    payload: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
    retries: int = 0,
    backoff_seconds: float = 0.5,
) -> dict[str, Any]:
    """POST ``payload`` and return the decoded JSON object.

    Timeouts, network errors and retryable statuses are retried with
    exponential backoff; anything else, or the last failure, is raised.
    """
    breaker = breaker_for(client)
    request_kwargs: dict[str, Any] = {"json": payload, "headers": headers}
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    attempt = 0
    while True:
        breaker.guard()
        try:
            body = _post_once(client, path, request_kwargs)
        except Exception as exc:
            if not _should_retry(exc):
                raise
            breaker.record_failure()
            if attempt >= max(0, int(retries)):
                raise
            delay = max(0.0, backoff_seconds) * (2 ** attempt)
            if delay > 0:
                time.sleep(delay)
            attempt += 1
            continue
        breaker.record_success()
        return body

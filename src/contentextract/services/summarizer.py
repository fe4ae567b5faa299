"""Client for the hosted summarization model."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import requests
from pydantic import SecretStr

from contentextract.config import ServiceConfig
from contentextract.errors import SummarizationError
from contentextract.models import SummaryResult

__all__ = ["SummarizationClient", "parse_summary", "SERVICE_UNAVAILABLE"]

logger = logging.getLogger(__name__)

# Returned by the inference API while a model is still loading.
SERVICE_UNAVAILABLE = 503


def parse_summary(payload: Any) -> SummaryResult:
    """Pull ``summary_text`` out of the first element of the provider's result array."""

    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        text = payload[0].get("summary_text")
        if isinstance(text, str) and text.strip():
            return SummaryResult(summary_text=text.strip())
    return SummaryResult(summary_text=None)


class SummarizationClient:
    """Submit text to an inference endpoint, retrying while the model warms up.

    A 503 response is retried after a fixed ``retry_backoff`` delay until
    ``max_attempts`` calls have been made. Every other failure is raised as
    :class:`~contentextract.errors.SummarizationError` straight away. Each
    call to :meth:`summarize` uses a session of its own.
    """

    def __init__(
        self,
        config: ServiceConfig,
        session_factory: Callable[[], requests.Session] = requests.Session,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._sleep = sleep

    def _headers(self) -> dict[str, str]:
        token: SecretStr | None = self._config.api_token
        headers = {"Content-Type": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token.get_secret_value()}"
        return headers

    def summarize(self, model: str, text: str) -> SummaryResult:
        with self._session_factory() as session:
            return self._summarize(session, model, text)

    def _summarize(self, session: requests.Session, model: str, text: str) -> SummaryResult:
        endpoint = self._config.model_endpoint(model)
        max_attempts = self._config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                response = session.post(
                    endpoint,
                    json={"inputs": text},
                    headers=self._headers(),
                    timeout=self._config.request_timeout,
                )
            except requests.RequestException as exc:
                raise SummarizationError(f"Request to {endpoint} failed: {exc}") from exc

            if response.status_code == SERVICE_UNAVAILABLE and attempt < max_attempts:
                logger.info(
                    "Model %s unavailable (attempt %d/%d); retrying in %.1fs",
                    model,
                    attempt,
                    max_attempts,
                    self._config.retry_backoff,
                )
                self._sleep(self._config.retry_backoff)
                continue

            if response.status_code >= 400:
                raise SummarizationError(
                    f"Model {model} returned HTTP {response.status_code} after {attempt} attempt(s)",
                    upstream_status=response.status_code,
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise SummarizationError(f"Model {model} returned a non-JSON body") from exc

            return parse_summary(payload)

        # Unreachable: the final attempt either returns or raises.
        raise SummarizationError(f"Model {model} did not respond after {max_attempts} attempts")

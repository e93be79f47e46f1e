"""
HTTP client for the text-generation API

One POST to {base_url}/v1/messages per analysis. Transport errors (connection
failures, timeouts) are retried with exponential backoff; HTTP error statuses
are not. Every request is bounded by the configured timeout.
"""

import json
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from public_works_ledger.advisory.config import AdvisorySettings
from public_works_ledger.kernel.logging import get_logger

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AdvisoryError(Exception):
    """The remote model could not produce a usable answer"""


def retry_on_transport_error(
    max_attempts: int = 2,
    min_wait_ms: int = 200,
    max_wait_ms: int = 2000,
):
    """
    Retry decorator for httpx transport errors (connect, read, timeout)

    Args:
        max_attempts: Maximum number of attempts
        min_wait_ms: Minimum wait between attempts in milliseconds
        max_wait_ms: Maximum wait between attempts in milliseconds
    """
    return retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=1,
            min=min_wait_ms / 1000.0,
            max=max_wait_ms / 1000.0,
        ),
        before_sleep=lambda retry_state: logger.warning(
            "Advisory transport error, retrying",
            attempt=retry_state.attempt_number,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        ),
        reraise=True,
    )


def extract_json(text: str) -> Any:
    """
    Parse a JSON document out of model text, tolerating ```json fences

    Raises:
        AdvisoryError: If no valid JSON remains after stripping fences
    """
    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AdvisoryError(f"Model returned invalid JSON: {e}") from e


class AdvisoryClient:
    """
    Thin wrapper over httpx.Client for the messages endpoint

    Args:
        settings: Endpoint, model, key and timeout
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        settings: AdvisorySettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._http = httpx.Client(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            transport=transport,
            headers={
                "x-api-key": settings.api_key or "",
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
        )
        self._post = retry_on_transport_error(max_attempts=settings.max_attempts)(
            self._post_once
        )

    def _post_once(self, body: dict) -> httpx.Response:
        response = self._http.post("/v1/messages", json=body)
        response.raise_for_status()
        return response

    def complete(self, prompt: str, max_tokens: int = 1500) -> str:
        """
        Send one user prompt and return the concatenated text blocks

        Raises:
            AdvisoryError: On transport failure after retries, an error status,
                or a response without text content
        """
        body = {
            "model": self.settings.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = self._post(body)
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AdvisoryError(f"API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AdvisoryError(f"API unreachable: {e}") from e
        except ValueError as e:
            raise AdvisoryError(f"API returned a non-JSON body: {e}") from e

        blocks = data.get("content") if isinstance(data, dict) else None
        texts = [
            block.get("text", "")
            for block in blocks or []
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        if not texts:
            raise AdvisoryError("API response contained no text content")
        return "\n".join(texts)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AdvisoryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

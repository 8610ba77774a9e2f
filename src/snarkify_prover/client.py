"""Authenticated HTTP helper for the Snarkify REST API."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .exceptions import SnarkifyPayloadError, SnarkifyStatusError, SnarkifyTransportError

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

API_KEY_HEADER = "X-Api-Key"
TRANSIENT_STATUS_CODES = frozenset({408, 429})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Bounded exponential backoff applied to transient failures."""

    max_retries: int = 3
    min_wait_seconds: float = 5.0
    max_wait_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.min_wait_seconds < 0 or self.max_wait_seconds < self.min_wait_seconds:
            raise ValueError("retry bounds must satisfy 0 <= min_wait <= max_wait")

    @classmethod
    def from_wait_time(cls, retry_count: int, wait_seconds: float) -> "RetryPolicy":
        """Build a policy bounded by ``[wait_seconds / 2, wait_seconds]``."""
        return cls(
            max_retries=retry_count,
            min_wait_seconds=wait_seconds / 2,
            max_wait_seconds=wait_seconds,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_index: int) -> float:
        """Return the wait before retry ``retry_index`` (0-based)."""
        upper = min(self.max_wait_seconds, self.min_wait_seconds * (2**retry_index))
        return random.uniform(self.min_wait_seconds, upper)


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code <= 202


def is_transient_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in TRANSIENT_STATUS_CODES


class SnarkifyClient:
    """Send GET/POST requests with API-key auth, timeouts and retries.

    One ``httpx.AsyncClient`` is shared by every call so concurrent
    operations reuse the same connection pool.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout_seconds: float,
        retry_policy: RetryPolicy | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.retry_policy = retry_policy or RetryPolicy()
        self.log = log or logger
        self._client = httpx.AsyncClient(timeout=timeout_seconds)

    def __repr__(self) -> str:
        return f"SnarkifyClient(base_url={self.base_url!r}, timeout_seconds={self.timeout_seconds})"

    async def __aenter__(self) -> "SnarkifyClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, response_model: type[ResponseModel]) -> ResponseModel:
        body = await self._send("GET", path)
        return self._decode(path, body, response_model)

    async def post(
        self, path: str, payload: BaseModel, response_model: type[ResponseModel]
    ) -> ResponseModel:
        request_body = payload.model_dump_json()
        self.log.debug("snarkify.request.body path=%s body=%s", path, request_body)
        body = await self._send("POST", path, content=request_body)
        return self._decode(path, body, response_model)

    def build_url(self, path: str) -> httpx.URL:
        full_url = f"{self.base_url}{path}"
        try:
            url = httpx.URL(full_url)
        except httpx.InvalidURL as exc:
            raise SnarkifyTransportError(f"Failed to parse URL '{full_url}': {exc}") from exc
        if not url.scheme or not url.host:
            raise SnarkifyTransportError(f"Failed to parse URL '{full_url}': missing scheme or host")
        return url

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self._api_key,
        }

    async def _send(self, verb: str, path: str, *, content: str | None = None) -> str:
        url = self.build_url(path)
        attempts = self.retry_policy.max_attempts
        for attempt in range(1, attempts + 1):
            self.log.info(
                "snarkify.request.sent method=%s path=%s attempt=%s",
                verb,
                path,
                attempt,
                extra={"method": verb, "path": path, "attempt": attempt},
            )
            try:
                response = await self._dispatch(verb, url, content=content)
            except httpx.TransportError as exc:
                if attempt >= attempts:
                    raise SnarkifyTransportError(
                        f"[Snarkify Client], {path}, request failed: {type(exc).__name__}: {exc}"
                    ) from exc
                await self._backoff(path, attempt, reason=type(exc).__name__)
                continue
            except httpx.HTTPError as exc:
                raise SnarkifyTransportError(
                    f"[Snarkify Client], {path}, request failed: {type(exc).__name__}: {exc}"
                ) from exc

            status_code = response.status_code
            if is_success_status(status_code):
                self.log.info(
                    "snarkify.response.received method=%s path=%s status=%s",
                    verb,
                    path,
                    status_code,
                    extra={"method": verb, "path": path, "status_code": status_code},
                )
                self.log.debug("snarkify.response.body path=%s body=%s", path, response.text)
                return response.text

            if not is_transient_status(status_code) or attempt >= attempts:
                self.log.warning(
                    "snarkify.response.status_not_ok path=%s status=%s",
                    path,
                    status_code,
                    extra={"method": verb, "path": path, "status_code": status_code},
                )
                raise SnarkifyStatusError(path, status_code, response.reason_phrase)
            await self._backoff(path, attempt, reason=f"status={status_code}")

        raise SnarkifyTransportError(f"[Snarkify Client], {path}, request failed after retries")

    async def _dispatch(self, verb: str, url: httpx.URL, *, content: str | None) -> httpx.Response:
        headers = self._headers()
        if verb == "GET":
            return await self._client.get(url, headers=headers, timeout=self.timeout_seconds)
        return await self._client.post(
            url, headers=headers, content=content, timeout=self.timeout_seconds
        )

    async def _backoff(self, path: str, attempt: int, *, reason: str) -> None:
        delay = self.retry_policy.delay_for(attempt - 1)
        self.log.info(
            "snarkify.request.retry path=%s attempt=%s reason=%s delay=%.2f",
            path,
            attempt,
            reason,
            delay,
        )
        await asyncio.sleep(delay)

    def _decode(self, path: str, body: str, response_model: type[ResponseModel]) -> ResponseModel:
        try:
            return response_model.model_validate_json(body)
        except ValidationError as exc:
            raise SnarkifyPayloadError(
                f"[Snarkify Client], {path}, malformed response: {exc}"
            ) from exc

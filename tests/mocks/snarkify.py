"""In-memory stand-ins for ``httpx.AsyncClient`` used by Snarkify tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

BASE_URL = "https://api.snarkify.test"
API_KEY = "sk-test-secret"
SERVICE_ID = "0b8e5a1c-1f5c-4a9e-9c55-7f5d1fb5e0e2"


class DummyHTTPResponse:
    def __init__(
        self,
        status_code: int,
        json_data: Any | None = None,
        text: str | None = None,
        reason_phrase: str = "",
    ) -> None:
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.reason_phrase = reason_phrase


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: dict[str, str]
    content: str | None
    timeout: float | None


@dataclass
class DummyAsyncClient:
    """Pop queued responses (or raise queued exceptions) in order."""

    responses: list[Any] = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    async def get(self, url, headers, timeout=None):
        return self._next("GET", url, headers, None, timeout)

    async def post(self, url, headers, content=None, timeout=None):
        return self._next("POST", url, headers, content, timeout)

    async def aclose(self) -> None:
        self.closed = True

    def _next(self, method, url, headers, content, timeout):
        self.calls.append(
            RecordedCall(
                method=method,
                url=str(url),
                headers=dict(headers),
                content=content,
                timeout=timeout,
            )
        )
        if not self.responses:
            raise RuntimeError("No responses queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def task_payload(
    *,
    task_id: str = "5c1f4f0a-9d7e-4a53-a1de-3d3f1b9b6a10",
    state: str = "PENDING",
    created: str | None = "2024-01-15T10:30:00",
    started: str | None = None,
    finished: str | None = None,
    task_input: str | None = None,
    proof: str | None = None,
    error: str | None = None,
    proof_type: str | None = "CHUNK",
) -> dict[str, Any]:
    if task_input is None:
        task_input = json.dumps(
            {
                "circuit_type": 1,
                "circuit_version": "v0.13.1",
                "hard_fork_name": "darwinV2",
                "task_data": '{"block_hashes": ["0xabc"]}',
            }
        )
    return {
        "task_id": task_id,
        "created": created,
        "started": started,
        "finished": finished,
        "state": state,
        "input": task_input,
        "proof": proof,
        "error": error,
        "proof_type": proof_type,
    }

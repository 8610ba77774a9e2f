from __future__ import annotations

import pytest

from src.snarkify_prover.client import RetryPolicy, SnarkifyClient
from src.snarkify_prover.prover import SnarkifyProver
from tests.mocks.snarkify import API_KEY, BASE_URL, SERVICE_ID, DummyAsyncClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("SNARKIFY_SERVICE_ID", raising=False)


@pytest.fixture
def http_client(monkeypatch) -> DummyAsyncClient:
    dummy = DummyAsyncClient()

    def factory(*args, **kwargs):
        return dummy

    monkeypatch.setattr("httpx.AsyncClient", factory)
    return dummy


@pytest.fixture
def snarkify_client(http_client: DummyAsyncClient) -> SnarkifyClient:
    return SnarkifyClient(
        BASE_URL,
        API_KEY,
        timeout_seconds=5,
        retry_policy=RetryPolicy(max_retries=2, min_wait_seconds=0, max_wait_seconds=0),
    )


@pytest.fixture
def prover(snarkify_client: SnarkifyClient) -> SnarkifyProver:
    return SnarkifyProver(client=snarkify_client, service_id=SERVICE_ID)

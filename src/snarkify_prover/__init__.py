"""Snarkify proving-service adapter.

Bridges the proving-service contract of the orchestration framework to the
Snarkify REST API: proof submission, task polling and verification key
lookup.
"""

from .client import RetryPolicy, SnarkifyClient
from .prover import SnarkifyProver
from .proving_service import (
    CircuitType,
    GetVkRequest,
    GetVkResponse,
    ProveRequest,
    ProveResponse,
    ProvingService,
    QueryTaskRequest,
    QueryTaskResponse,
    TaskStatus,
)

__all__ = [
    "CircuitType",
    "GetVkRequest",
    "GetVkResponse",
    "ProveRequest",
    "ProveResponse",
    "ProvingService",
    "QueryTaskRequest",
    "QueryTaskResponse",
    "RetryPolicy",
    "SnarkifyClient",
    "SnarkifyProver",
    "TaskStatus",
]

"""Proving-service contract consumed by the orchestration framework.

The framework drives a prover through three calls: fetch a verification
key, submit a proof request and poll the task status. Implementations must
never raise for remote failures; the ``error`` field of every response is
the only success/failure discriminator callers check.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum


class CircuitType(IntEnum):
    """Category of zero-knowledge circuit, encoded on the wire as ``u8``."""

    UNDEFINED = 0
    CHUNK = 1
    BATCH = 2
    BUNDLE = 3

    def to_u8(self) -> int:
        return int(self.value)

    @classmethod
    def from_u8(cls, value: int) -> "CircuitType":
        """Map unknown numeric values to ``UNDEFINED``."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNDEFINED


class TaskStatus(str, Enum):
    """Caller-facing task lifecycle.

    ``QUEUED`` is never reported by the remote platform; adapters use it to
    signal that the real status could not be determined.
    """

    QUEUED = "queued"
    PROVING = "proving"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class GetVkRequest:
    circuit_type: CircuitType
    circuit_version: str


@dataclass(slots=True)
class GetVkResponse:
    vk: str
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ProveRequest:
    circuit_type: CircuitType
    circuit_version: str
    hard_fork_name: str
    input: str


@dataclass(slots=True, frozen=True)
class QueryTaskRequest:
    task_id: str


@dataclass(slots=True)
class TaskResponse:
    """Task snapshot shared by ``prove`` and ``query_task`` responses.

    ``created_at`` is ``0.0`` when the platform did not report a creation
    time. Treat ``0.0`` as unknown, not as the Unix epoch.
    """

    task_id: str
    circuit_type: CircuitType
    circuit_version: str
    hard_fork_name: str
    status: TaskStatus
    created_at: float
    started_at: float | None = None
    finished_at: float | None = None
    compute_time_sec: float | None = None
    input: str | None = None
    proof: str | None = None
    vk: str | None = None
    error: str | None = None


@dataclass(slots=True)
class ProveResponse(TaskResponse):
    """Response to :meth:`ProvingService.prove`."""


@dataclass(slots=True)
class QueryTaskResponse(TaskResponse):
    """Response to :meth:`ProvingService.query_task`."""


class ProvingService(ABC):
    """Base interface for proving backends."""

    @abstractmethod
    def is_local(self) -> bool:
        """Return ``True`` when proofs are generated in-process."""

    @abstractmethod
    async def get_vk(self, req: GetVkRequest) -> GetVkResponse:
        """Return the verification key for a circuit type and version."""

    @abstractmethod
    async def prove(self, req: ProveRequest) -> ProveResponse:
        """Submit a proof request and return the freshly created task."""

    @abstractmethod
    async def query_task(self, req: QueryTaskRequest) -> QueryTaskResponse:
        """Return the current state of a previously submitted task."""

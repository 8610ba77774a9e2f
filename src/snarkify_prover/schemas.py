"""Pydantic models for the Snarkify REST API and their translations.

The platform reports timestamps as ``YYYY-MM-DDTHH:MM:SS`` without any
timezone suffix. They are assumed to be UTC and get reinterpreted as such
when a response is parsed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, assert_never

from pydantic import BaseModel, ValidationError, field_validator

from .exceptions import SnarkifyPayloadError, UndefinedCircuitTypeError
from .proving_service import CircuitType, ProveRequest, TaskStatus

SNARKIFY_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


class SnarkifyTaskState(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class SnarkifyProofType(str, Enum):
    CHUNK = "CHUNK"
    BATCH = "BATCH"
    BUNDLE = "BUNDLE"


def task_status_from_state(state: SnarkifyTaskState) -> TaskStatus:
    """Translate a platform task state into the caller's vocabulary.

    Never yields ``TaskStatus.QUEUED``.
    """
    if state is SnarkifyTaskState.PENDING:
        return TaskStatus.PROVING
    if state is SnarkifyTaskState.SUCCESS:
        return TaskStatus.SUCCESS
    if state is SnarkifyTaskState.FAILURE:
        return TaskStatus.FAILED
    assert_never(state)


def proof_type_from_circuit(circuit_type: CircuitType) -> SnarkifyProofType:
    """Translate a circuit type into the platform proof type tag."""
    if circuit_type is CircuitType.CHUNK:
        return SnarkifyProofType.CHUNK
    if circuit_type is CircuitType.BATCH:
        return SnarkifyProofType.BATCH
    if circuit_type is CircuitType.BUNDLE:
        return SnarkifyProofType.BUNDLE
    if circuit_type is CircuitType.UNDEFINED:
        raise UndefinedCircuitTypeError("CircuitType.UNDEFINED should not be used")
    assert_never(circuit_type)


def parse_naive_utc(value: str) -> datetime:
    """Parse a platform timestamp and attach UTC to it."""
    naive = datetime.strptime(value, SNARKIFY_DATETIME_FORMAT)
    return naive.replace(tzinfo=timezone.utc)


def to_epoch_seconds(value: datetime | None) -> float | None:
    if value is None:
        return None
    return value.timestamp()


def compute_time_seconds(started_at: float | None, finished_at: float | None) -> float | None:
    """Return ``finished_at - started_at`` or ``None`` when a bound is missing.

    Ordering is not validated; negative durations are passed through.
    """
    if started_at is None or finished_at is None:
        return None
    return finished_at - started_at


class SnarkifyGetVkResponse(BaseModel):
    # Base64 encoded verification key, used in the coordinator login request.
    vk: str


class SnarkifyCreateTaskInput(BaseModel):
    circuit_type: CircuitType
    circuit_version: str
    hard_fork_name: str
    task_data: str

    @field_validator("circuit_type", mode="before")
    @classmethod
    def _decode_circuit_type(cls, value: Any) -> Any:
        # Unknown numeric circuit types decode as UNDEFINED.
        if isinstance(value, int) and not isinstance(value, bool):
            return CircuitType.from_u8(value)
        return value


class SnarkifyCreateTaskRequest(BaseModel):
    input: SnarkifyCreateTaskInput
    proof_type: SnarkifyProofType

    @classmethod
    def from_prove_request(cls, request: ProveRequest) -> "SnarkifyCreateTaskRequest":
        return cls(
            input=SnarkifyCreateTaskInput(
                circuit_type=request.circuit_type,
                circuit_version=request.circuit_version,
                hard_fork_name=request.hard_fork_name,
                task_data=request.input,
            ),
            proof_type=proof_type_from_circuit(request.circuit_type),
        )


class SnarkifyGetTaskResponse(BaseModel):
    """Task representation returned by the create and lookup endpoints."""

    # UUID, or an empty string while the platform has not assigned one yet.
    task_id: str
    created: datetime | None = None
    started: datetime | None = None
    finished: datetime | None = None
    state: SnarkifyTaskState
    # JSON encoded copy of the ``SnarkifyCreateTaskInput`` the task was created with.
    input: str
    # JSON string with the base64 encoded proof and its metadata.
    proof: str | None = None
    error: str | None = None
    proof_type: SnarkifyProofType | None = None

    @field_validator("created", "started", "finished", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError(f"expected timestamp string, got {type(value).__name__}")
        return parse_naive_utc(value)

    @property
    def status(self) -> TaskStatus:
        return task_status_from_state(self.state)

    @property
    def created_at(self) -> float:
        created = to_epoch_seconds(self.created)
        return 0.0 if created is None else created

    @property
    def started_at(self) -> float | None:
        return to_epoch_seconds(self.started)

    @property
    def finished_at(self) -> float | None:
        return to_epoch_seconds(self.finished)

    def parse_input(self) -> SnarkifyCreateTaskInput:
        """Decode the embedded ``input`` JSON string."""
        try:
            return SnarkifyCreateTaskInput.model_validate_json(self.input)
        except ValidationError as exc:
            raise SnarkifyPayloadError(str(exc)) from exc


__all__ = [
    "SNARKIFY_DATETIME_FORMAT",
    "SnarkifyTaskState",
    "SnarkifyProofType",
    "SnarkifyGetVkResponse",
    "SnarkifyCreateTaskInput",
    "SnarkifyCreateTaskRequest",
    "SnarkifyGetTaskResponse",
    "task_status_from_state",
    "proof_type_from_circuit",
    "parse_naive_utc",
    "to_epoch_seconds",
    "compute_time_seconds",
]

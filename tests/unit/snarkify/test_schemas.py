from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.snarkify_prover.exceptions import SnarkifyPayloadError, UndefinedCircuitTypeError
from src.snarkify_prover.proving_service import CircuitType, ProveRequest, TaskStatus
from src.snarkify_prover.schemas import (
    SnarkifyCreateTaskRequest,
    SnarkifyGetTaskResponse,
    SnarkifyProofType,
    SnarkifyTaskState,
    compute_time_seconds,
    parse_naive_utc,
    proof_type_from_circuit,
    task_status_from_state,
)
from tests.mocks.snarkify import task_payload


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        (SnarkifyTaskState.PENDING, TaskStatus.PROVING),
        (SnarkifyTaskState.SUCCESS, TaskStatus.SUCCESS),
        (SnarkifyTaskState.FAILURE, TaskStatus.FAILED),
    ],
)
def test_task_state_translation(state, expected):
    assert task_status_from_state(state) is expected


def test_task_state_translation_never_yields_queued():
    assert TaskStatus.QUEUED not in {task_status_from_state(state) for state in SnarkifyTaskState}


@pytest.mark.parametrize(
    ("circuit_type", "expected"),
    [
        (CircuitType.CHUNK, SnarkifyProofType.CHUNK),
        (CircuitType.BATCH, SnarkifyProofType.BATCH),
        (CircuitType.BUNDLE, SnarkifyProofType.BUNDLE),
    ],
)
def test_proof_type_translation(circuit_type, expected):
    assert proof_type_from_circuit(circuit_type) is expected


def test_proof_type_translation_is_order_preserving():
    circuits = [CircuitType.CHUNK, CircuitType.BATCH, CircuitType.BUNDLE]
    assert [proof_type_from_circuit(c) for c in circuits] == list(SnarkifyProofType)


def test_undefined_circuit_type_is_rejected():
    with pytest.raises(UndefinedCircuitTypeError):
        proof_type_from_circuit(CircuitType.UNDEFINED)


def test_create_request_for_undefined_circuit_type_is_rejected():
    request = ProveRequest(
        circuit_type=CircuitType.UNDEFINED,
        circuit_version="v0.13.1",
        hard_fork_name="darwinV2",
        input="{}",
    )
    with pytest.raises(UndefinedCircuitTypeError):
        SnarkifyCreateTaskRequest.from_prove_request(request)


def test_create_request_wire_format():
    request = ProveRequest(
        circuit_type=CircuitType.BATCH,
        circuit_version="v0.13.1",
        hard_fork_name="darwinV2",
        input='{"chunk_proofs": []}',
    )

    body = json.loads(SnarkifyCreateTaskRequest.from_prove_request(request).model_dump_json())

    assert body == {
        "input": {
            "circuit_type": 2,
            "circuit_version": "v0.13.1",
            "hard_fork_name": "darwinV2",
            "task_data": '{"chunk_proofs": []}',
        },
        "proof_type": "BATCH",
    }


def test_parse_naive_utc():
    parsed = parse_naive_utc("2024-01-15T10:30:00")

    assert parsed == datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_parse_naive_utc_rejects_other_formats():
    with pytest.raises(ValueError):
        parse_naive_utc("2024-01-15 10:30:00")


def test_compute_time_seconds():
    started = parse_naive_utc("2024-01-15T10:30:00").timestamp()
    finished = parse_naive_utc("2024-01-15T10:32:05").timestamp()

    assert compute_time_seconds(started, finished) == 125.0
    assert compute_time_seconds(started, None) is None
    assert compute_time_seconds(None, finished) is None
    assert compute_time_seconds(finished, started) == -125.0


def test_task_response_derived_fields():
    resp = SnarkifyGetTaskResponse.model_validate(
        task_payload(
            state="SUCCESS",
            created="2024-01-15T10:29:00",
            started="2024-01-15T10:30:00",
            finished="2024-01-15T10:31:00",
        )
    )

    assert resp.status is TaskStatus.SUCCESS
    assert resp.created == datetime(2024, 1, 15, 10, 29, tzinfo=timezone.utc)
    assert resp.created_at == datetime(2024, 1, 15, 10, 29, tzinfo=timezone.utc).timestamp()
    assert resp.finished_at - resp.started_at == 60.0
    assert resp.proof_type is SnarkifyProofType.CHUNK


def test_task_response_missing_created_defaults_to_zero():
    resp = SnarkifyGetTaskResponse.model_validate(task_payload(created=None))

    assert resp.created_at == 0.0
    assert resp.started_at is None
    assert resp.finished_at is None


def test_task_response_rejects_timezone_suffix():
    with pytest.raises(ValueError):
        SnarkifyGetTaskResponse.model_validate(task_payload(created="2024-01-15T10:30:00Z"))


def test_parse_embedded_input():
    resp = SnarkifyGetTaskResponse.model_validate(task_payload())

    task_input = resp.parse_input()

    assert task_input.circuit_type is CircuitType.CHUNK
    assert task_input.circuit_version == "v0.13.1"
    assert task_input.hard_fork_name == "darwinV2"
    assert task_input.task_data == '{"block_hashes": ["0xabc"]}'


@pytest.mark.parametrize("raw_input", ["not-json", '{"circuit_type": 1}', ""])
def test_parse_embedded_input_failure(raw_input):
    resp = SnarkifyGetTaskResponse.model_validate(task_payload(task_input=raw_input))

    with pytest.raises(SnarkifyPayloadError):
        resp.parse_input()


def test_circuit_type_u8_encoding():
    assert [c.to_u8() for c in CircuitType] == [0, 1, 2, 3]
    assert CircuitType.from_u8(3) is CircuitType.BUNDLE
    assert CircuitType.from_u8(42) is CircuitType.UNDEFINED


@pytest.mark.parametrize(("raw", "expected"), [(2, CircuitType.BATCH), (7, CircuitType.UNDEFINED)])
def test_embedded_circuit_type_follows_u8_decoding(raw, expected):
    task_input = json.dumps(
        {"circuit_type": raw, "circuit_version": "v1", "hard_fork_name": "h", "task_data": ""}
    )
    resp = SnarkifyGetTaskResponse.model_validate(task_payload(task_input=task_input))

    assert resp.parse_input().circuit_type is expected

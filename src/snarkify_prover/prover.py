"""Snarkify implementation of the proving-service contract."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .client import RetryPolicy, SnarkifyClient
from .config import CloudProverConfig
from .exceptions import SnarkifyRequestError
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
from .schemas import (
    SnarkifyCreateTaskRequest,
    SnarkifyGetTaskResponse,
    SnarkifyGetVkResponse,
    compute_time_seconds,
)

logger = logging.getLogger(__name__)

API_VERSION = "v1"


def vk_path(circuit_version: str, circuit_type: CircuitType) -> str:
    return f"/{API_VERSION}/scroll/sdk/vks/versions/{circuit_version}/types/{circuit_type.to_u8()}"


def create_task_path(service_id: str) -> str:
    return f"/{API_VERSION}/services/{service_id}"


def task_path(task_id: str) -> str:
    return f"/{API_VERSION}/tasks/{task_id}"


@dataclass(slots=True)
class SnarkifyProver(ProvingService):
    """Submit proof tasks to the Snarkify platform and poll their state.

    Remote failures never escape the three operations; they are encoded in
    the ``error`` field of the returned response.
    """

    client: SnarkifyClient
    service_id: str
    log: logging.Logger = field(default_factory=lambda: logger)

    @classmethod
    def from_config(
        cls,
        cfg: CloudProverConfig,
        service_id: str,
        *,
        log: logging.Logger | None = None,
    ) -> "SnarkifyProver":
        retry_policy = RetryPolicy.from_wait_time(cfg.retry_count, cfg.retry_wait_time_sec)
        client = SnarkifyClient(
            cfg.base_url,
            cfg.api_key.get_secret_value(),
            timeout_seconds=cfg.connection_timeout_sec,
            retry_policy=retry_policy,
            log=log,
        )
        return cls(client=client, service_id=service_id, log=log or logger)

    async def aclose(self) -> None:
        await self.client.aclose()

    def is_local(self) -> bool:
        return False

    async def get_vk(self, req: GetVkRequest) -> GetVkResponse:
        path = vk_path(req.circuit_version, req.circuit_type)
        try:
            resp = await self.client.get(path, SnarkifyGetVkResponse)
        except SnarkifyRequestError as exc:
            self.log.error("snarkify.get_vk.failed error=%s", exc)
            return GetVkResponse(vk="", error=f"Failed to get vk: {exc}")
        return GetVkResponse(vk=resp.vk, error=None)

    async def prove(self, req: ProveRequest) -> ProveResponse:
        body = SnarkifyCreateTaskRequest.from_prove_request(req)
        path = create_task_path(self.service_id)
        try:
            resp = await self.client.post(path, body, SnarkifyGetTaskResponse)
        except SnarkifyRequestError as exc:
            self.log.error("snarkify.prove.failed error=%s", exc)
            return self.build_prove_error_response(req, f"Failed to request proof: {exc}")

        self.log.info(
            "snarkify.prove.created",
            extra={"task_id": resp.task_id, "state": resp.state.value},
        )
        # The platform cannot have finished a task it has just accepted.
        return ProveResponse(
            task_id=resp.task_id,
            circuit_type=req.circuit_type,
            circuit_version=req.circuit_version,
            hard_fork_name=req.hard_fork_name,
            status=resp.status,
            created_at=resp.created_at,
            started_at=resp.started_at,
            finished_at=None,
            compute_time_sec=None,
            input=req.input,
            proof=None,
            vk=None,
            error=None,
        )

    async def query_task(self, req: QueryTaskRequest) -> QueryTaskResponse:
        path = task_path(req.task_id)
        try:
            resp = await self.client.get(path, SnarkifyGetTaskResponse)
        except SnarkifyRequestError as exc:
            self.log.error("snarkify.query_task.failed task_id=%s error=%s", req.task_id, exc)
            return self.build_query_task_error_response(req, f"Failed to query proof: {exc}")

        try:
            task_input = resp.parse_input()
        except SnarkifyRequestError as exc:
            self.log.error("snarkify.query_task.bad_input task_id=%s error=%s", req.task_id, exc)
            return self.build_query_task_error_response(req, f"Failed to parse task input: {exc}")

        started_at = resp.started_at
        finished_at = resp.finished_at
        return QueryTaskResponse(
            task_id=resp.task_id,
            circuit_type=task_input.circuit_type,
            circuit_version=task_input.circuit_version,
            hard_fork_name=task_input.hard_fork_name,
            status=resp.status,
            created_at=resp.created_at,
            started_at=started_at,
            finished_at=finished_at,
            compute_time_sec=compute_time_seconds(started_at, finished_at),
            input=task_input.task_data,
            proof=resp.proof,
            vk=None,
            error=resp.error,
        )

    def build_prove_error_response(self, req: ProveRequest, error_msg: str) -> ProveResponse:
        return ProveResponse(
            task_id="",
            circuit_type=req.circuit_type,
            circuit_version=req.circuit_version,
            hard_fork_name=req.hard_fork_name,
            status=TaskStatus.FAILED,
            created_at=0.0,
            input=req.input,
            error=error_msg,
        )

    def build_query_task_error_response(
        self, req: QueryTaskRequest, error_msg: str
    ) -> QueryTaskResponse:
        """``QUEUED`` marks a status the adapter could not determine."""
        return QueryTaskResponse(
            task_id=req.task_id,
            circuit_type=CircuitType.UNDEFINED,
            circuit_version="",
            hard_fork_name="",
            status=TaskStatus.QUEUED,
            created_at=0.0,
            error=error_msg,
        )

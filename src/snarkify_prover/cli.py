"""Command-line entry point for operating the Snarkify prover by hand."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from .config import DEFAULT_CONFIG_FILE, Config, require_cloud_config, resolve_service_id
from .exceptions import ConfigurationError
from .logging import bind_service, configure_logging
from .prover import SnarkifyProver
from .proving_service import (
    CircuitType,
    GetVkRequest,
    GetVkResponse,
    ProveRequest,
    QueryTaskRequest,
    TaskResponse,
)

logger = structlog.get_logger(__name__)

CIRCUIT_TYPE_CHOICES = {
    "chunk": CircuitType.CHUNK,
    "batch": CircuitType.BATCH,
    "bundle": CircuitType.BUNDLE,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="snarkify-prover",
        description="Talk to the Snarkify proving platform through the proving-service adapter.",
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        default=DEFAULT_CONFIG_FILE,
        help="Path to the prover configuration file in JSON format.",
    )
    parser.add_argument("--service-id", help="Unique UUID of the service in the Snarkify platform.")
    parser.add_argument(
        "--service-config",
        help="JSON file with a service_id field, used when neither flag nor env var is set.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")

    commands = parser.add_subparsers(dest="command", required=True)

    get_vk = commands.add_parser("get-vk", help="Fetch the verification key of a circuit.")
    _add_circuit_arguments(get_vk)

    prove = commands.add_parser("prove", help="Submit a proof request.")
    _add_circuit_arguments(prove)
    prove.add_argument("--hard-fork-name", required=True)
    task_input = prove.add_mutually_exclusive_group(required=True)
    task_input.add_argument("--input", dest="task_input", help="Task input payload.")
    task_input.add_argument("--input-file", type=Path, help="File holding the task input payload.")

    query = commands.add_parser("query", help="Query the status of a task.")
    query.add_argument("task_id")

    return parser.parse_args(argv)


def _add_circuit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--circuit-type", required=True, choices=sorted(CIRCUIT_TYPE_CHOICES))
    parser.add_argument("--circuit-version", required=True)


def response_to_dict(response: GetVkResponse | TaskResponse) -> dict[str, Any]:
    data = asdict(response)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
    return data


def _read_task_input(args: argparse.Namespace) -> str:
    if args.task_input is not None:
        return args.task_input
    try:
        return args.input_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read task input '{args.input_file}': {exc}") from exc


def build_request(args: argparse.Namespace) -> GetVkRequest | ProveRequest | QueryTaskRequest:
    if args.command == "get-vk":
        return GetVkRequest(
            circuit_type=CIRCUIT_TYPE_CHOICES[args.circuit_type],
            circuit_version=args.circuit_version,
        )
    if args.command == "prove":
        return ProveRequest(
            circuit_type=CIRCUIT_TYPE_CHOICES[args.circuit_type],
            circuit_version=args.circuit_version,
            hard_fork_name=args.hard_fork_name,
            input=_read_task_input(args),
        )
    return QueryTaskRequest(task_id=args.task_id)


async def execute(
    prover: SnarkifyProver, request: GetVkRequest | ProveRequest | QueryTaskRequest
) -> GetVkResponse | TaskResponse:
    try:
        if isinstance(request, GetVkRequest):
            return await prover.get_vk(request)
        if isinstance(request, ProveRequest):
            return await prover.prove(request)
        return await prover.query_task(request)
    finally:
        await prover.aclose()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)

    try:
        config = Config.from_file(args.config_file)
        cloud = require_cloud_config(config)
        service_id = resolve_service_id(args.service_id, args.service_config)
        request = build_request(args)
    except ConfigurationError as exc:
        logger.error("snarkify.cli.config_error", error=str(exc))
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    bind_service(service_id, cloud.base_url)
    prover = SnarkifyProver.from_config(cloud, service_id)
    response = asyncio.run(execute(prover, request))
    if response.error:
        logger.warning("snarkify.cli.response_error", command=args.command, error=response.error)
    print(json.dumps(response_to_dict(response), ensure_ascii=False))
    return 1 if response.error else 0


if __name__ == "__main__":
    sys.exit(main())

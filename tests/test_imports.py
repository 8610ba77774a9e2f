"""Smoke-check imports for the adapter modules."""

from __future__ import annotations

from importlib import import_module
from types import ModuleType

import pytest

MODULES_AND_SYMBOLS = [
    ("src.snarkify_prover", "SnarkifyProver"),
    ("src.snarkify_prover", "ProvingService"),
    ("src.snarkify_prover.client", "SnarkifyClient"),
    ("src.snarkify_prover.client", "RetryPolicy"),
    ("src.snarkify_prover.config", "Config"),
    ("src.snarkify_prover.config", "resolve_service_id"),
    ("src.snarkify_prover.exceptions", "SnarkifyRequestError"),
    ("src.snarkify_prover.logging", "configure_logging"),
    ("src.snarkify_prover.proving_service", "TaskStatus"),
    ("src.snarkify_prover.schemas", "SnarkifyGetTaskResponse"),
    ("src.snarkify_prover.cli", "main"),
]


@pytest.mark.parametrize(("module_name", "symbol"), MODULES_AND_SYMBOLS)
def test_importable_symbols(module_name: str, symbol: str) -> None:
    module: ModuleType = import_module(module_name)
    assert hasattr(module, symbol), f"{module_name} missing {symbol}"

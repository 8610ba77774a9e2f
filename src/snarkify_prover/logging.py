"""Logging configuration for the Snarkify prover process."""

from __future__ import annotations

import logging

import structlog

COMPONENT = "snarkify-prover"


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog once at process start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(component=COMPONENT)


def bind_service(service_id: str, base_url: str) -> None:
    """Attach the Snarkify service identity to every structured log line."""
    structlog.contextvars.bind_contextvars(service_id=service_id, base_url=base_url)

"""Structured logging initialisation for the discovery engine."""
from __future__ import annotations

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml


def configure_logging(config_path: Path, *, level: int = logging.INFO) -> None:
    """Configure stdlib logging from YAML and route structlog through JSON output."""
    if not config_path.exists():
        logging.basicConfig(level=level)
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        )
        return

    with config_path.open("r", encoding="utf-8") as handle:
        config: Dict[str, Any] = yaml.safe_load(handle)
    logging.config.dictConfig(config)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

"""Logging setup and per-package log correlation."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "apkstats"


class PackageLoggerAdapter(logging.LoggerAdapter):
    """Prefix every message with the package's diagnostic marker."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['marker']}] {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the apkstats logger or one of its children."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_package_logger(
    logger: logging.Logger | logging.LoggerAdapter, marker: str
) -> PackageLoggerAdapter:
    """Wrap a logger so its output is tagged with a package marker."""
    return PackageLoggerAdapter(logger, {"marker": marker})


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Route apkstats log records to stderr through rich."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

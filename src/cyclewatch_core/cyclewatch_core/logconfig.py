# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup shared by the cyclewatch command line tools.

Two context variables carry the reference file being checked and the engine
operation in progress. :class:`ReferenceContextFilter` copies them onto every
record so both formats below can reference them.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(reference_file)s] [%(operation)s] %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"reference_file": "%(reference_file)s", "operation": "%(operation)s", '
    '"message": "%(message)s"}'
)

reference_file_var: ContextVar[str] = ContextVar("reference_file", default="")
operation_var: ContextVar[str] = ContextVar("operation", default="")


class ReferenceContext:
    """Set or clear the logging context for the current check."""

    @staticmethod
    def set(reference_file: str, operation: str = "") -> None:
        reference_file_var.set(reference_file)
        operation_var.set(operation)

    @staticmethod
    def set_operation(operation: str) -> None:
        """Name the engine operation (``find_cycles``, ``has_cycle``...) now running."""
        operation_var.set(operation)

    @staticmethod
    def clear() -> None:
        reference_file_var.set("")
        operation_var.set("")


class ReferenceContextFilter(logging.Filter):
    """Inject ``reference_file`` and ``operation`` into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.reference_file = reference_file_var.get()
        record.operation = operation_var.get()
        return True


def configure_logging(
    level: str = "WARNING",
    fmt: str = "text",
    stream: Optional[object] = None,
) -> logging.Handler:
    """Install a stream handler on the ``cyclewatch_*`` loggers and return it.

    Calling it again replaces the handler installed by the previous call.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(ReferenceContextFilter())
    handler.setFormatter(logging.Formatter(JSON_FORMAT if fmt == "json" else LOG_FORMAT))
    handler.set_name("cyclewatch")

    for name in ("cyclewatch_common", "cyclewatch_core"):
        logger = logging.getLogger(name)
        for old in [h for h in logger.handlers if h.get_name() == "cyclewatch"]:
            logger.removeHandler(old)
        logger.addHandler(handler)
        logger.setLevel(level)
    return handler

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Central cyclewatch configuration.

All values have sensible defaults and can be overridden via environment variables
using the ``CYCLEWATCH_`` prefix:

  CYCLEWATCH_LOG_LEVEL        Log level (default: WARNING)
  CYCLEWATCH_LOG_FORMAT       Log record format, ``text`` or ``json`` (default: text)
  CYCLEWATCH_MAX_REFERENCES   Largest reference file ``check`` accepts, in pairs
                              (default: 100000)
  CYCLEWATCH_OUTPUT_FORMAT    Report format, ``text`` or ``table`` (default: text)
"""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"})
_VALID_LOG_FORMATS = frozenset({"text", "json"})
_VALID_OUTPUT_FORMATS = frozenset({"text", "table"})


class CycleWatchConfig(BaseSettings):
    """Central cyclewatch configuration.

    Instantiate with ``CycleWatchConfig()`` to read defaults and any
    ``CYCLEWATCH_*`` environment variable overrides automatically.
    """

    model_config = SettingsConfigDict(env_prefix="CYCLEWATCH_")

    # ── Logging configuration ──────────────────────────────────────────────
    log_level: str = "WARNING"
    log_format: str = "text"

    # ── Check configuration ────────────────────────────────────────────────
    max_references: int = 100_000
    output_format: str = "text"

    # ── Validators ─────────────────────────────────────────────────────────

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level={v!r} is not a valid log level. "
                f"Valid values: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def _valid_log_format(cls, v: str) -> str:
        if v.lower() not in _VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format={v!r} is not a valid log format. "
                f"Valid values: {', '.join(sorted(_VALID_LOG_FORMATS))}"
            )
        return v.lower()

    @field_validator("output_format")
    @classmethod
    def _valid_output_format(cls, v: str) -> str:
        if v.lower() not in _VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format={v!r} is not a valid output format. "
                f"Valid values: {', '.join(sorted(_VALID_OUTPUT_FORMATS))}"
            )
        return v.lower()

    @field_validator("max_references")
    @classmethod
    def _valid_max_references(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_references={v} must be >= 1")
        return v


# ── Module-level singleton ─────────────────────────────────────────────────────

_config: Optional[CycleWatchConfig] = None


def get_config() -> CycleWatchConfig:
    """Return the process-wide config singleton.

    Creates a fresh ``CycleWatchConfig`` on first call (reading env vars).
    Subsequent calls return the cached instance.
    """
    global _config
    if _config is None:
        _config = CycleWatchConfig()
    return _config


def load_and_validate_config() -> CycleWatchConfig:
    """Build, validate, cache and return the config.

    Raises ``pydantic.ValidationError`` if any value is invalid. The CLI calls
    this once at startup so config errors surface before any file is read.
    """
    global _config
    cfg = CycleWatchConfig()
    _config = cfg
    return cfg

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cyclewatch_core import config as config_mod
from cyclewatch_core.config import CycleWatchConfig, get_config, load_and_validate_config


class TestDefaults:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = CycleWatchConfig()
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "text"
        assert cfg.max_references == 100_000
        assert cfg.output_format == "text"


class TestEnvOverrides:
    """The core contract: CYCLEWATCH_* env vars override config values."""

    @pytest.mark.parametrize(
        "env_var, field, value, expected",
        [
            ("CYCLEWATCH_LOG_LEVEL", "log_level", "INFO", "INFO"),
            ("CYCLEWATCH_LOG_LEVEL", "log_level", "debug", "DEBUG"),
            ("CYCLEWATCH_LOG_FORMAT", "log_format", "json", "json"),
            ("CYCLEWATCH_LOG_FORMAT", "log_format", "JSON", "json"),
            ("CYCLEWATCH_MAX_REFERENCES", "max_references", "50", 50),
            ("CYCLEWATCH_OUTPUT_FORMAT", "output_format", "table", "table"),
        ],
    )
    def test_env_var_overrides_field(self, env_var, field, value, expected):
        with patch.dict(os.environ, {env_var: value}):
            cfg = CycleWatchConfig()
            assert getattr(cfg, field) == expected


class TestValidation:
    @pytest.mark.parametrize(
        "env_var, value, error_match",
        [
            ("CYCLEWATCH_LOG_LEVEL", "TRACE", "not a valid log level"),
            ("CYCLEWATCH_LOG_FORMAT", "xml", "not a valid log format"),
            ("CYCLEWATCH_OUTPUT_FORMAT", "html", "not a valid output format"),
            ("CYCLEWATCH_MAX_REFERENCES", "0", "must be >= 1"),
            ("CYCLEWATCH_MAX_REFERENCES", "-5", "must be >= 1"),
        ],
    )
    def test_bad_value_rejected(self, env_var, value, error_match):
        with patch.dict(os.environ, {env_var: value}):
            with pytest.raises(ValidationError, match=error_match):
                CycleWatchConfig()

    def test_max_references_lower_bound_accepted(self):
        with patch.dict(os.environ, {"CYCLEWATCH_MAX_REFERENCES": "1"}):
            assert CycleWatchConfig().max_references == 1


class TestSingleton:
    def test_get_config_is_cached(self, monkeypatch):
        monkeypatch.setattr(config_mod, "_config", None)
        assert get_config() is get_config()

    def test_load_and_validate_replaces_cache(self, monkeypatch):
        monkeypatch.setattr(config_mod, "_config", None)
        first = get_config()
        with patch.dict(os.environ, {"CYCLEWATCH_MAX_REFERENCES": "7"}):
            fresh = load_and_validate_config()
        assert fresh is not first
        assert get_config() is fresh
        assert fresh.max_references == 7

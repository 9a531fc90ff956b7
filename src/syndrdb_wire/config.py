"""Configuration for the codec bridge server.

Wire constants (EOT, ENQ, protocol version) live in :mod:`.protocol` and
are not configurable.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_PARAMS = 1024


@dataclass
class BridgeConfig:
    """Settings for the MCP codec bridge."""

    log_level: str = DEFAULT_LOG_LEVEL
    max_param_count: int = DEFAULT_MAX_PARAMS

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    def validate(self) -> None:
        """Validate bridge configuration parameters."""
        if not isinstance(self.numeric_log_level, int):
            raise ValueError(f"Invalid log level: {self.log_level}")
        if self.max_param_count < 1:
            raise ValueError(
                f"max_param_count must be positive, got {self.max_param_count}"
            )


def load_config(env_file: str | None = None) -> BridgeConfig:
    """Load bridge configuration from the environment.

    A ``.env`` file is read first (from ``env_file`` or the current
    directory); variables already set in the environment win.

    Environment variables:
        SYNDRDB_WIRE_LOG_LEVEL: Logging level (default: INFO)
        SYNDRDB_WIRE_MAX_PARAMS: Parameters accepted per frame (default: 1024)

    Raises:
        ValueError: If a variable is present but invalid.
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    max_params_str = os.getenv("SYNDRDB_WIRE_MAX_PARAMS", str(DEFAULT_MAX_PARAMS))
    try:
        max_params = int(max_params_str)
    except ValueError:
        raise ValueError(
            f"SYNDRDB_WIRE_MAX_PARAMS must be a valid integer, got: {max_params_str}"
        ) from None

    config = BridgeConfig(
        log_level=os.getenv("SYNDRDB_WIRE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        max_param_count=max_params,
    )
    config.validate()
    return config

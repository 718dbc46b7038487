"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, stargate.toml only contains overrides.
A fresh roster needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- stargate.toml sections ---


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str | None = None  # defaults to {root}/.stargate/stargate.db
    echo: bool = False


class RulesConfig(BaseModel):
    """[rules] section."""

    model_config = {"frozen": True}

    # Reject assignments that start on or before the open duty's start date.
    require_start_after_open_duty: bool = False


class ProcessLogConfig(BaseModel):
    """[process_log] section."""

    model_config = {"frozen": True}

    enabled: bool = True

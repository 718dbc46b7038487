"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs:   CLI flags passed by Click
  2. Env vars:      ``STARGATE_*`` prefix
  3. TOML file:     ``stargate.toml`` discovered via walk-up (see :func:`find_config`)
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from stargate.config.models import DatabaseConfig, ProcessLogConfig, RulesConfig

CONFIG_FILENAME = "stargate.toml"
CONFIG_ENV_VAR = "STARGATE_CONFIG"
ROSTER_DIRNAME = ".stargate"


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for the roster containing *start* (default: cwd).

    ``STARGATE_CONFIG`` wins when set; a path that is not a file yields None.
    Otherwise each directory from *start* upward is checked for
    ``stargate.toml``, then for ``.stargate/stargate.toml`` beside the ledger.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        for candidate in (
            directory / CONFIG_FILENAME,
            directory / ROSTER_DIRNAME / CONFIG_FILENAME,
        ):
            if candidate.is_file():
                return candidate
    return None


def roster_root(config_file: Path) -> Path:
    """The roster directory a config file belongs to."""
    parent = config_file.parent
    return parent.parent if parent.name == ROSTER_DIRNAME else parent


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``stargate.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class StargateSettings(BaseSettings):
    """Unified settings for the stargate CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        root: Resolved roster directory (parent of ``stargate.toml``,
            or CWD if no config found).
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STARGATE_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    process_log: ProcessLogConfig = Field(default_factory=ProcessLogConfig)

    @property
    def db_path(self) -> Path:
        """Database file location; relative ``database.path`` resolves against root."""
        if self.database.path:
            p = Path(self.database.path)
            return p if p.is_absolute() else self.root / p
        return self.root / ROSTER_DIRNAME / "stargate.db"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> StargateSettings:
        """Construct settings from CLI invocation.

        Discovers ``stargate.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory, and merges
        CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = roster_root(toml_path) if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

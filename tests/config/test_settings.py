"""Tests for StargateSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from stargate.config.settings import StargateSettings, find_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "STARGATE_CONFIG",
        "STARGATE_ROOT",
        "STARGATE_QUIET",
        "STARGATE_RULES__REQUIRE_START_AFTER_OPEN_DUTY",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = StargateSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.database.path is None
        assert settings.database.echo is False
        assert settings.rules.require_start_after_open_duty is False
        assert settings.process_log.enabled is True
        assert settings.db_path == tmp_path / ".stargate" / "stargate.db"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = StargateSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = StargateSettings.from_cli(root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_loads_sections(self, tmp_path: Path) -> None:
        (tmp_path / "stargate.toml").write_text(
            '[database]\npath = "roster.db"\n[rules]\nrequire_start_after_open_duty = true\n'
        )
        settings = StargateSettings.from_cli(root=tmp_path)
        assert settings.config_path == tmp_path / "stargate.toml"
        assert settings.db_path == tmp_path / "roster.db"
        assert settings.rules.require_start_after_open_duty is True
        assert settings.process_log.enabled is True

    def test_absolute_db_path(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "x.db"
        (tmp_path / "stargate.toml").write_text(f'[database]\npath = "{target.as_posix()}"\n')
        settings = StargateSettings.from_cli(root=tmp_path)
        assert settings.db_path == target

    def test_root_from_config_parent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "stargate.toml").write_text("[process_log]\nenabled = false\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = StargateSettings.from_cli()
        assert settings.root == tmp_path
        assert settings.process_log.enabled is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[database]\necho = true\n")
        settings = StargateSettings.from_cli(config_path=str(cfg))
        assert settings.database.echo is True
        assert settings.root == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "stargate.toml").write_text("[database\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            StargateSettings.from_cli(root=tmp_path)


class TestEnvOverrides:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "stargate.toml").write_text("[rules]\nrequire_start_after_open_duty = false\n")
        monkeypatch.setenv("STARGATE_RULES__REQUIRE_START_AFTER_OPEN_DUTY", "true")
        settings = StargateSettings.from_cli(root=tmp_path)
        assert settings.rules.require_start_after_open_duty is True

    def test_cli_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STARGATE_QUIET", "true")
        settings = StargateSettings.from_cli(root=tmp_path, quiet=False)
        assert settings.quiet is False


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "stargate.toml").write_text("")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / "stargate.toml"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "elsewhere.toml"
        cfg.write_text("")
        monkeypatch.setenv("STARGATE_CONFIG", str(cfg))
        assert find_config(tmp_path) == cfg

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STARGATE_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None

    def test_config_inside_roster_directory(self, tmp_path: Path) -> None:
        cfg = tmp_path / ".stargate" / "stargate.toml"
        cfg.parent.mkdir()
        cfg.write_text("")
        assert find_config(tmp_path / ".stargate") == cfg
        assert find_config(tmp_path) == cfg

    def test_top_level_file_preferred(self, tmp_path: Path) -> None:
        (tmp_path / ".stargate").mkdir()
        (tmp_path / ".stargate" / "stargate.toml").write_text("")
        (tmp_path / "stargate.toml").write_text("")
        assert find_config(tmp_path) == tmp_path / "stargate.toml"

    def test_roster_directory_config_sets_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cfg = tmp_path / ".stargate" / "stargate.toml"
        cfg.parent.mkdir()
        cfg.write_text("[process_log]\nenabled = false\n")
        monkeypatch.chdir(tmp_path)
        settings = StargateSettings.from_cli()
        assert settings.root == tmp_path
        assert settings.config_path == cfg
        assert settings.db_path == tmp_path / ".stargate" / "stargate.db"
        assert settings.process_log.enabled is False

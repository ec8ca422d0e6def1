"""Tests for RegistrySettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from jobreg.config.settings import RegistrySettings


class TestRegistrySettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = RegistrySettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.database.path == ".jobreg/registry.db"
        assert settings.query.default_page_size == 64

    def test_frozen(self, tmp_path: Path) -> None:
        settings = RegistrySettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "jobreg.toml").write_text("[query]\ndefault_page_size = 10\n")
        settings = RegistrySettings.from_cli(root=tmp_path)
        assert settings.query.default_page_size == 10
        assert settings.database.path == ".jobreg/registry.db"
        assert settings.config_path == tmp_path / "jobreg.toml"

    def test_root_from_config_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "jobreg.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = RegistrySettings.from_cli()
        assert settings.root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[database]\npath = "other.db"\n')
        settings = RegistrySettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.database.path == "other.db"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "jobreg.toml").write_text("[query\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            RegistrySettings.from_cli(root=tmp_path)


class TestPriority:
    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = RegistrySettings.from_cli(
            root=tmp_path, json_output=True, quiet=True, verbose=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "jobreg.toml").write_text('[database]\npath = "toml.db"\n')
        monkeypatch.setenv("JOBREG_DATABASE__PATH", "env.db")
        settings = RegistrySettings.from_cli(root=tmp_path)
        assert settings.database.path == "env.db"

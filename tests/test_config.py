"""Tests for settings loading from ``.hexprove.yaml``."""

from __future__ import annotations

from pathlib import Path

import pytest

from hexprove.config import CONFIG_FILENAME, Settings, load_settings
from hexprove.exceptions import ConfigError


class TestDefaults:
    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.deps_path == Path("deps")
        assert settings.main_branch == "master"
        assert settings.max_concurrency == 4
        assert settings.lockfile_path == Path("hexprove-lock.json")

    def test_home_paths_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert "~" not in str(settings.git_parent_directory)
        assert settings.git_parent_directory.parts[-2:] == (".hexprove", "repos")


class TestLoadFile:
    def test_values_applied(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("main_branch: main\nmax_concurrency: 8\ndeps_path: vendor/deps\n")
        settings = load_settings(path)
        assert settings.main_branch == "main"
        assert settings.max_concurrency == 8
        assert settings.deps_path == Path("vendor/deps")

    def test_picked_up_from_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("main_branch: trunk\n")
        monkeypatch.chdir(tmp_path)
        assert load_settings().main_branch == "trunk"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")
        assert load_settings(path).main_branch == "master"

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "absent.yaml")

    @pytest.mark.parametrize(
        "content,message",
        [
            ("- a\n- b\n", "mapping"),
            ("colour: blue\n", "Unknown config keys: colour"),
            ("max_concurrency: 0\n", "positive integer"),
            ("max_concurrency: true\n", "positive integer"),
            ("main_branch: ''\n", "non-empty string"),
            ("deps_path: 12\n", "must be a path"),
            ("main_branch: [unclosed\n", "Cannot read config"),
        ],
    )
    def test_invalid(self, tmp_path: Path, content: str, message: str) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(content)
        with pytest.raises(ConfigError, match=message):
            load_settings(path)


class TestOverride:
    def test_none_values_ignored(self) -> None:
        base = Settings(main_branch="main")
        assert base.override(main_branch=None, max_concurrency=2) == Settings(
            main_branch="main", max_concurrency=2
        )

    def test_path_strings_converted(self) -> None:
        settings = Settings().override(lockfile_path="locks/hp.json")
        assert settings.lockfile_path == Path("locks/hp.json")

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(ConfigError):
            Settings().override(colour="blue")

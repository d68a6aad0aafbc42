"""Tests for GitHub URL parsing and local clone paths."""

from __future__ import annotations

import pytest

from hexprove.registry.github import parse_github_url, repo_subpath


class TestParseGithubUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/michalmuskala/jason",
            "https://github.com/michalmuskala/jason/",
            "https://github.com/michalmuskala/jason.git",
            "http://www.github.com/michalmuskala/jason",
            "git@github.com:michalmuskala/jason.git",
            "  https://GitHub.com/michalmuskala/jason  ",
            "https://github.com/michalmuskala/jason#readme",
        ],
    )
    def test_accepted_forms(self, url: str) -> None:
        assert parse_github_url(url) == ("michalmuskala", "jason")

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/michalmuskala/jason",
            "https://github.com/michalmuskala",
            "https://github.com/michalmuskala/jason/tree/master",
            "not a url",
        ],
    )
    def test_rejected_forms(self, url: str) -> None:
        with pytest.raises(ValueError):
            parse_github_url(url)


class TestRepoSubpath:
    def test_plain(self) -> None:
        assert repo_subpath("https://github.com/elixir-ecto/ecto") == "elixir-ecto/ecto"

    def test_unsafe_characters_replaced(self) -> None:
        assert repo_subpath("https://github.com/phoenixframework/phoenix.html") == (
            "phoenixframework/phoenix_html"
        )

    def test_same_repository_same_path(self) -> None:
        assert repo_subpath("https://github.com/a/b.git") == repo_subpath("git@github.com:a/b")

    def test_traversal_is_neutralised(self) -> None:
        assert ".." not in repo_subpath("https://github.com/../..x")

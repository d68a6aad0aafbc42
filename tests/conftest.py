"""Shared fixtures for hexprove tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from hexprove.core.audit import Audit, Package, Present, Verdict


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small checked-out repository tree (without git metadata)."""
    root = tmp_path / "repo"
    (root / "lib").mkdir(parents=True)
    (root / "lib" / "jason.ex").write_text("defmodule Jason do\nend\n")
    (root / "mix.exs").write_text('defmodule Jason.MixProject do\n  @version "1.4.1"\nend\n')
    return root


@pytest.fixture
def package_tree(tmp_path: Path, source_tree: Path) -> Path:
    """An unpacked package identical to ``source_tree`` plus Hex bookkeeping."""
    root = tmp_path / "deps" / "jason"
    (root / "lib").mkdir(parents=True)
    (root / "lib" / "jason.ex").write_text((source_tree / "lib" / "jason.ex").read_text())
    (root / "mix.exs").write_text((source_tree / "mix.exs").read_text())
    (root / ".hex").write_text("hex bookkeeping")
    (root / "hex_metadata.config").write_text("{<<\"name\">>,<<\"jason\">>}.\n")
    return root


@pytest.fixture
def sample_audit() -> Audit:
    """A fully populated audit of jason 1.4.1."""
    return Audit(
        package=Package(name="jason", version="1.4.1"),
        public_key_fingerprint="sha256:" + "ab" * 32,
        created_at=1_700_000_000,
        audited_by_author=False,
        verdict=Present(Verdict.LGTM),
        message=Present("read every line"),
    )

"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from linkcanvas.models import LayoutConfig
from linkcanvas.vault.index import VaultLinkIndex
from linkcanvas.vault.loader import Vault, load_vault


def write_note(vault: Path, rel: str, body: str = "", *, frontmatter: list[str] | None = None) -> Path:
    """Write a markdown note under `vault`, creating folders as needed."""
    path = vault / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    if frontmatter:
        lines += ["---", *frontmatter, "---", ""]
    lines += [f"# {path.stem}", "", body, ""]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def config() -> LayoutConfig:
    """Default canvas geometry: 800x600 canvas, 300x200 nodes, 450/280 spacing."""
    return LayoutConfig()


@pytest.fixture
def sample_vault_path(tmp_path: Path) -> Path:
    """A small vault: Delta -> Alpha -> Beta -> Gamma, plus an attachment link."""
    vault = tmp_path / "vault"
    (vault / ".obsidian").mkdir(parents=True)
    write_note(vault, "Alpha.md", "Links to [[Beta]] and ![[diagram.png]].")
    write_note(vault, "Beta.md", "See [[Gamma|the third]].")
    write_note(vault, "Gamma.md", "Leaf note.")
    write_note(vault, "Delta.md", "Points at [[Alpha#Intro]].")
    (vault / "diagram.png").write_bytes(b"\x89PNG")
    return vault


@pytest.fixture
def sample_vault(sample_vault_path: Path) -> Vault:
    return load_vault(sample_vault_path)


@pytest.fixture
def sample_index(sample_vault: Vault) -> VaultLinkIndex:
    return VaultLinkIndex(sample_vault)

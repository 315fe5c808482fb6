from pathlib import Path

from linkcanvas.vault.index import DictLinkIndex, VaultLinkIndex
from linkcanvas.vault.loader import load_vault

from conftest import write_note


def test_sample_vault_links_resolve_to_notes_only(sample_index: VaultLinkIndex) -> None:
    # The embedded image is not a note and is dropped
    assert sample_index.forward_links("Alpha.md") == ["Beta.md"]
    assert sample_index.forward_links("Beta.md") == ["Gamma.md"]
    assert sample_index.backlinks("Alpha.md") == ["Delta.md"]
    assert sample_index.backlinks("Gamma.md") == ["Beta.md"]
    assert sample_index.backlinks("Delta.md") == []


def test_unknown_document_has_no_links(sample_index: VaultLinkIndex) -> None:
    assert sample_index.forward_links("missing.md") == []
    assert sample_index.backlinks("missing.md") == []


def test_hidden_folders_are_not_loaded(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault, "Visible.md", "[[Secret]]")
    write_note(vault, ".trash/Secret.md")

    loaded = load_vault(vault)
    assert [n.document for n in loaded.all_notes] == ["Visible.md"]
    assert VaultLinkIndex(loaded).forward_links("Visible.md") == []


def test_resolution_prefers_path_then_same_folder_then_shortest(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault, "Topic.md")
    write_note(vault, "projects/Topic.md")
    write_note(vault, "projects/Plan.md", "[[Topic]]")
    write_note(vault, "archive/deep/Topic.md")
    write_note(vault, "Index.md", "[[Topic]] [[archive/deep/Topic]] [[deep/Topic]]")

    index = VaultLinkIndex(load_vault(vault))

    assert index.forward_links("projects/Plan.md") == ["projects/Topic.md"]
    assert index.forward_links("Index.md") == ["Topic.md", "archive/deep/Topic.md"]


def test_markdown_links_resolve_relative_to_source_folder(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault, "docs/guide/Setup.md", "[next](../Reference.md)")
    write_note(vault, "docs/Reference.md")

    index = VaultLinkIndex(load_vault(vault))
    assert index.forward_links("docs/guide/Setup.md") == ["docs/Reference.md"]
    assert index.backlinks("docs/Reference.md") == ["docs/guide/Setup.md"]


def test_links_resolve_through_frontmatter_aliases(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault, "Photosynthesis.md", frontmatter=["aliases:", "  - light reactions"])
    write_note(vault, "Use.md", "Covers the [[light reactions]].")

    loaded = load_vault(vault)
    assert loaded.find("light reactions").document == "Photosynthesis.md"
    assert VaultLinkIndex(loaded).forward_links("Use.md") == ["Photosynthesis.md"]


def test_name_lookup_is_case_insensitive(sample_vault) -> None:
    assert sample_vault.find("alpha").document == "Alpha.md"
    assert sample_vault.find("BETA.md").document == "Beta.md"
    assert sample_vault.find("nothing") is None


def test_backlinks_are_sorted_and_unique(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault, "Hub.md")
    write_note(vault, "z.md", "[[Hub]] and again [[Hub]]")
    write_note(vault, "a.md", "[[Hub]]")

    index = VaultLinkIndex(load_vault(vault))
    assert index.backlinks("Hub.md") == ["a.md", "z.md"]


def test_dict_link_index_derives_backlinks() -> None:
    index = DictLinkIndex({"A": ["B", "C", "B"], "C": ["B"]})
    assert index.forward_links("A") == ["B", "C"]
    assert index.backlinks("B") == ["A", "C"]
    assert index.backlinks("A") == []

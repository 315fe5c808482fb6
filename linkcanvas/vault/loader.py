"""Vault loading and link-target resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import frontmatter

from ..models import DocumentRef
from .parser import extract_aliases, extract_links

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


@dataclass
class Note:
    """A markdown note in the vault."""

    path: Path
    document: DocumentRef  # vault-relative POSIX path
    name: str  # filename without extension
    content: str  # raw markdown after frontmatter
    frontmatter: dict  # parsed YAML
    aliases: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)  # raw link targets, first appearance order

    @property
    def folder(self) -> str:
        parent = PurePosixPath(self.document).parent
        return "" if str(parent) == "." else str(parent)


@dataclass
class Vault:
    """Container for all loaded vault notes."""

    path: Path
    notes: list[Note] = field(default_factory=list)

    # Lookup tables built after loading
    _by_document: dict[str, Note] = field(default_factory=dict)  # lower-case path -> note
    _by_name: dict[str, list[Note]] = field(default_factory=dict)  # lower-case stem -> notes
    _aliases: dict[str, str] = field(default_factory=dict)  # lower-case alias -> document

    def __post_init__(self):
        self._build_lookups()

    def _build_lookups(self):
        """Build path, name and alias lookups."""
        self._by_document = {}
        self._by_name = {}
        self._aliases = {}

        for note in sorted(self.notes, key=lambda n: n.document):
            self._by_document[note.document.lower()] = note
            self._by_name.setdefault(note.name.lower(), []).append(note)

        for note in sorted(self.notes, key=lambda n: n.document):
            for alias in note.aliases:
                self._aliases.setdefault(alias.lower(), note.document)

    def get(self, document: DocumentRef) -> Note | None:
        """Get note by its exact vault-relative path."""
        return self._by_document.get(document.lower())

    def find(self, name: str) -> Note | None:
        """Find a note from user input: a path, a note name, or an alias."""
        return self.resolve(name)

    def resolve(self, target: str, source: Note | None = None) -> Note | None:
        """Resolve a link target the way the editor does.

        Order: path relative to the source's folder, vault-relative path,
        note name (case-insensitive), frontmatter alias.
        """
        target = target.strip().replace("\\", "/").lstrip("/")
        if not target:
            return None

        candidates = [target]
        if not target.lower().endswith(NOTE_SUFFIX):
            candidates.append(target + NOTE_SUFFIX)

        for candidate in candidates:
            if source and source.folder:
                note = self._by_document.get(_normalize_path(f"{source.folder}/{candidate}").lower())
                if note:
                    return note
            note = self._by_document.get(_normalize_path(candidate).lower())
            if note:
                return note

        name = PurePosixPath(target).name
        if name.lower().endswith(NOTE_SUFFIX):
            name = name[: -len(NOTE_SUFFIX)]
        matches = self._by_name.get(name.lower(), [])
        if "/" in target:
            # Partial path: "folder/Note" matches "any/folder/Note.md"
            suffix = "/" + _normalize_path(candidates[-1]).lower()
            matches = [n for n in matches if ("/" + n.document.lower()).endswith(suffix)]
        if matches:
            return _pick_closest(matches, source)

        alias_doc = self._aliases.get(target.lower())
        if alias_doc:
            return self._by_document.get(alias_doc.lower())
        return None

    @property
    def all_notes(self) -> list[Note]:
        """All notes in the vault, ordered by path."""
        return sorted(self.notes, key=lambda n: n.document)


def _normalize_path(path: str) -> str:
    """Collapse `.` and `..` segments of a vault-relative path."""
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)


def _pick_closest(matches: list[Note], source: Note | None) -> Note:
    """Prefer a note in the source's folder, then the shortest path, then alphabetical."""
    if source:
        for note in matches:
            if note.folder == source.folder:
                return note
    return min(matches, key=lambda n: (len(PurePosixPath(n.document).parts), n.document))


def load_note(path: Path, vault_path: Path) -> Note:
    """Load a single markdown file and parse its frontmatter."""
    post = frontmatter.load(path)

    content = post.content
    fm = post.metadata

    return Note(
        path=path,
        document=path.relative_to(vault_path).as_posix(),
        name=path.stem,
        content=content,
        frontmatter=fm,
        aliases=extract_aliases(fm),
        links=extract_links(content),
    )


def load_vault(vault_path: Path) -> Vault:
    """Load all markdown files from the vault.

    Args:
        vault_path: Path to the vault root directory

    Returns:
        Vault object with all notes and lookups built
    """
    vault_path = vault_path.resolve()
    vault = Vault(path=vault_path)

    for md_file in sorted(vault_path.rglob(f"*{NOTE_SUFFIX}")):
        # Skip hidden files and directories
        rel_parts = md_file.relative_to(vault_path).parts
        if any(part.startswith(".") for part in rel_parts):
            continue

        try:
            vault.notes.append(load_note(md_file, vault_path))
        except Exception as e:
            # Log error but continue loading
            logger.warning("Failed to load %s: %s", md_file, e)

    # Build lookups after loading
    vault._build_lookups()
    logger.debug("Loaded %d notes from %s", len(vault.notes), vault_path)

    return vault

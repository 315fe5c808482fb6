"""Forward-link and backlink queries over a loaded vault."""

from __future__ import annotations

from typing import Protocol

from ..models import DocumentRef
from .loader import Vault


class LinkIndex(Protocol):
    """Source of link sets for a document. Pure query, no mutation."""

    def forward_links(self, document: DocumentRef) -> list[DocumentRef]: ...

    def backlinks(self, document: DocumentRef) -> list[DocumentRef]: ...


class VaultLinkIndex:
    """Resolved link graph of a vault.

    Only links that resolve to an existing markdown note are kept; attachments
    and dangling links are dropped here so the traversal never sees them.
    """

    def __init__(self, vault: Vault):
        self.vault = vault
        self._forward: dict[str, list[DocumentRef]] = {}
        self._backward: dict[str, set[DocumentRef]] = {}
        self._build()

    def _build(self) -> None:
        for note in self.vault.all_notes:
            targets: list[DocumentRef] = []
            for link in note.links:
                resolved = self.vault.resolve(link, source=note)
                if resolved is None or resolved.document in targets:
                    continue
                targets.append(resolved.document)
                self._backward.setdefault(resolved.document, set()).add(note.document)
            self._forward[note.document] = targets

    def forward_links(self, document: DocumentRef) -> list[DocumentRef]:
        """Documents `document` links to, in order of first appearance."""
        return list(self._forward.get(document, []))

    def backlinks(self, document: DocumentRef) -> list[DocumentRef]:
        """Documents linking to `document`, sorted by path."""
        return sorted(self._backward.get(document, set()))


class DictLinkIndex:
    """In-memory link index from a plain adjacency mapping."""

    def __init__(self, links: dict[DocumentRef, list[DocumentRef]]):
        self._forward = {src: list(dict.fromkeys(dsts)) for src, dsts in links.items()}
        self._backward: dict[DocumentRef, list[DocumentRef]] = {}
        for src, dsts in self._forward.items():
            for dst in dsts:
                self._backward.setdefault(dst, []).append(src)

    def forward_links(self, document: DocumentRef) -> list[DocumentRef]:
        return list(self._forward.get(document, []))

    def backlinks(self, document: DocumentRef) -> list[DocumentRef]:
        return list(self._backward.get(document, []))

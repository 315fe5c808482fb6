"""Expand command - grow an existing canvas by one level of links."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..canvas import DiagramExpander, DiagramStore
from ..config import Settings
from ..errors import LinkCanvasError, NoteNotFoundError
from ..models import Diagram, ExpansionResult
from ..vault import LinkIndex, VaultLinkIndex, load_vault


def run_expand(
    vault_path: Path,
    canvas: Path,
    *,
    settings: Settings,
    direction: str = "both",
    focus: str | None = None,
) -> int:
    """Expand a canvas in place.

    Without `focus`, every node on the canvas is expanded once in `direction`
    ("left" = backlinks, "right" = forward links, "both" = right then left).
    With `focus`, only that note is expanded.

    The canvas is read once, grown in memory and written once; callers must
    not run two expansions of the same canvas concurrently.

    Returns:
        Exit code (0 = expanded or nothing to add, 1 = error)
    """
    console = Console(stderr=True)

    try:
        vault = load_vault(vault_path)
        index = VaultLinkIndex(vault)
        store = DiagramStore(vault.path)
        diagram = store.read(canvas)
        expander = DiagramExpander(settings.layout())

        if focus is None:
            results = expander.saturate(diagram, index, direction)
        else:
            note = vault.find(focus)
            if note is None:
                raise NoteNotFoundError(focus)
            if diagram.node_for(note.document) is None:
                console.print(f"'{note.document}' is not on this canvas", style="yellow")
                return 0
            results = _expand_focus(expander, diagram, index, note.document, direction)

        if not results:
            console.print("No new connections found to expand the canvas.", style="yellow")
            return 0

        store.write(canvas, diagram)
    except LinkCanvasError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    for result in results:
        console.print(f"  {result.focus} -> {result.direction}: +{len(result.added_nodes)}")
    added = sum(len(r.added_nodes) for r in results)
    console.print(f"Canvas expanded: {added} new notes", style="green")
    return 0


def _expand_focus(
    expander: DiagramExpander,
    diagram: Diagram,
    index: LinkIndex,
    document: str,
    direction: str,
) -> list[ExpansionResult]:
    results = []
    for d in (["right", "left"] if direction == "both" else [direction]):
        links = index.backlinks(document) if d == "left" else index.forward_links(document)
        result = expander.expand(diagram, document, d, links)
        if not result.is_noop:
            diagram.merge(result)
            results.append(result)
    return results

"""Generate command - build a link-neighborhood canvas for a note."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..canvas import DiagramStore, build_diagram, canvas_path_for
from ..config import Settings
from ..errors import LinkCanvasError, NoteNotFoundError
from ..vault import VaultLinkIndex, load_vault


def run_generate(
    vault_path: Path,
    note: str,
    *,
    settings: Settings,
    out: Path | None = None,
) -> int:
    """Generate a canvas for a note.

    Args:
        vault_path: Path to the vault root
        note: Note path or name
        settings: Layout settings and link depth
        out: Canvas path; defaults to `<name>_canvas.canvas` next to the note

    Returns:
        Exit code (0 = written or already present, 1 = error)
    """
    console = Console(stderr=True)

    try:
        vault = load_vault(vault_path)
        target = vault.find(note)
        if target is None:
            raise NoteNotFoundError(note)

        store = DiagramStore(vault.path)
        canvas_path = out if out is not None else Path(canvas_path_for(target.document))

        if store.exists(canvas_path):
            console.print(f"Canvas already exists: {canvas_path}", style="yellow")
            return 0

        diagram = build_diagram(VaultLinkIndex(vault), target.document, settings.link_depth, settings.layout())
        written = store.write(canvas_path, diagram)
    except LinkCanvasError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    console.print(
        f"Canvas generated: {written} ({len(diagram.nodes)} notes, {len(diagram.edges)} links)",
        style="green",
    )
    return 0

"""Reading and writing canvas files."""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath

from ..errors import DiagramNotFoundError, DiagramParseError
from ..models import CENTER_NODE_ID, Diagram, DocumentRef
from ..vault.loader import Vault

logger = logging.getLogger(__name__)

CANVAS_SUFFIX = ".canvas"
CANVAS_NAME_SUFFIX = "_canvas"


class DiagramStore:
    """Canvas files under a vault root.

    Paths may be absolute or relative to the root.
    """

    def __init__(self, root: Path):
        self.root = root.resolve()

    def resolve_path(self, path: Path | str) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def exists(self, path: Path | str) -> bool:
        return self.resolve_path(path).is_file()

    def read(self, path: Path | str) -> Diagram:
        """Load a canvas.

        Raises:
            DiagramNotFoundError: the file does not exist
            DiagramParseError: the file is not valid JSON or not a canvas
        """
        full = self.resolve_path(path)
        if not full.is_file():
            raise DiagramNotFoundError(full)

        try:
            data = json.loads(full.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DiagramParseError(full, str(e)) from e

        try:
            return Diagram.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DiagramParseError(full, str(e)) from e

    def write(self, path: Path | str, diagram: Diagram) -> Path:
        """Write a canvas with stable 2-space indentation; returns the written path."""
        full = self.resolve_path(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(dumps(diagram), encoding="utf-8")
        logger.debug("Wrote %d nodes and %d edges to %s", len(diagram.nodes), len(diagram.edges), full)
        return full


def dumps(diagram: Diagram) -> str:
    return json.dumps(diagram.to_dict(), indent=2, ensure_ascii=False) + "\n"


def canvas_path_for(document: DocumentRef) -> str:
    """Conventional canvas location for a note: `<dir>/<name>_canvas.canvas`."""
    doc = PurePosixPath(document)
    name = f"{doc.stem}{CANVAS_NAME_SUFFIX}{CANVAS_SUFFIX}"
    return name if str(doc.parent) == "." else str(doc.parent / name)


def focus_document_for(canvas_path: Path, vault: Vault, diagram: Diagram | None = None) -> DocumentRef | None:
    """Find the note a canvas was generated for.

    `<name>_canvas.canvas` belongs to `<name>.md`, looked up in the canvas's
    folder first and then by name anywhere in the vault. Without a match the
    document of the canvas's center node is used.
    """
    stem = canvas_path.stem
    if stem.endswith(CANVAS_NAME_SUFFIX):
        name = stem[: -len(CANVAS_NAME_SUFFIX)]
        try:
            folder = canvas_path.resolve().parent.relative_to(vault.path).as_posix()
        except ValueError:
            folder = "."
        sibling = f"{name}.md" if folder == "." else f"{folder}/{name}.md"
        note = vault.get(sibling) or vault.resolve(name)
        if note:
            return note.document

    if diagram is not None:
        center = diagram.node_by_id(CENTER_NODE_ID)
        if center and vault.get(center.document):
            return center.document

    logger.info("No focus note found for canvas %s", canvas_path)
    return None

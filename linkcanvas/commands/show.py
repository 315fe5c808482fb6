"""Show command - summarize a canvas."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..canvas import DiagramStore, focus_document_for
from ..errors import LinkCanvasError
from ..models import Diagram, display_name
from ..vault import load_vault


def run_show(vault_path: Path, canvas: Path, *, fmt: str = "rich") -> int:
    """Print the focus note, counts and columns of a canvas."""
    console = Console(stderr=True)

    try:
        vault = load_vault(vault_path)
        store = DiagramStore(vault.path)
        diagram = store.read(canvas)
    except LinkCanvasError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    focus = focus_document_for(store.resolve_path(canvas), vault, diagram)
    payload = summarize(diagram, title=str(canvas), focus=focus)

    if fmt == "json":
        print(json.dumps(payload, indent=2, sort_keys=True))
    elif fmt == "md":
        print(_to_markdown(payload), end="")
    else:
        _print_rich(payload, console=Console())
    return 0


def summarize(diagram: Diagram, *, title: str, focus: str | None) -> dict:
    """Group canvas nodes into columns by x, left to right."""
    columns: dict[float, list[str]] = {}
    for node in diagram.nodes:
        columns.setdefault(node.x, []).append(node.document)

    return {
        "title": title,
        "focus": focus,
        "node_count": len(diagram.nodes),
        "edge_count": len(diagram.edges),
        "created": diagram.meta.created,
        "modified": diagram.meta.modified,
        "columns": [
            {"x": x, "notes": sorted(docs, key=lambda d: display_name(d).casefold())}
            for x, docs in sorted(columns.items())
        ],
    }


def _to_markdown(payload: dict) -> str:
    lines = [f"# {payload['title']}", ""]
    lines.append(f"- Focus: {payload['focus'] or '(unknown)'}")
    lines.append(f"- Notes: {payload['node_count']}")
    lines.append(f"- Links: {payload['edge_count']}")
    lines.append(f"- Modified: {payload['modified']}")
    lines.append("")
    lines.append("| Column x | Notes |")
    lines.append("|---:|---|")
    for column in payload["columns"]:
        notes = ", ".join(f"[[{display_name(d)}]]" for d in column["notes"])
        lines.append(f"| {column['x']:g} | {notes} |")
    lines.append("")
    return "\n".join(lines)


def _print_rich(payload: dict, *, console: Console) -> None:
    console.print(f"[bold]{payload['title']}[/bold]")
    console.print(f"Focus: {payload['focus'] or '(unknown)'}")
    console.print(f"Notes: {payload['node_count']}  Links: {payload['edge_count']}")
    console.print()

    t = Table(title="Columns")
    t.add_column("x", justify="right")
    t.add_column("Notes")
    for column in payload["columns"]:
        t.add_row(f"{column['x']:g}", "\n".join(column["notes"]))
    console.print(t)

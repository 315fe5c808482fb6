"""Links command - list the resolved forward links and backlinks of a note."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..errors import NoteNotFoundError
from ..vault import VaultLinkIndex, load_vault


def run_links(vault_path: Path, note: str, *, fmt: str = "rich") -> int:
    console = Console(stderr=True)

    vault = load_vault(vault_path)
    target = vault.find(note)
    if target is None:
        console.print(f"Error: {NoteNotFoundError(note)}", style="bold red")
        return 1

    index = VaultLinkIndex(vault)
    payload = {
        "note": target.document,
        "forward_links": index.forward_links(target.document),
        "backlinks": index.backlinks(target.document),
    }

    if fmt == "json":
        print(json.dumps(payload, indent=2))
        return 0

    t = Table(title=target.document)
    t.add_column("Backlinks")
    t.add_column("Forward links")
    back, forward = payload["backlinks"], payload["forward_links"]
    for i in range(max(len(back), len(forward))):
        t.add_row(back[i] if i < len(back) else "", forward[i] if i < len(forward) else "")
    Console().print(t)
    return 0

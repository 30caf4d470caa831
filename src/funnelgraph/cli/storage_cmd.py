"""Storage CLI commands: show, export, import, clear.

Operate on the on-disk editor state (the same slots an editing session
autosaves to).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from funnelgraph.cli._config import load_config
from funnelgraph.cli._format import print_json, print_lines
from funnelgraph.exceptions import DocumentError
from funnelgraph.panel import issue_panel_lines

if TYPE_CHECKING:
    from funnelgraph.session import EditorSession

app = typer.Typer(help="Manage the saved editor state.")

DirOpt = Annotated[
    str | None,
    typer.Option("--dir", help="Storage directory (default: [tool.funnelgraph] storage_dir)"),
]


@contextmanager
def open_session(directory: str | None) -> Iterator[EditorSession]:
    """Open an EditorSession over DiskStorage, closing both on exit."""
    from funnelgraph.persistence.storage import DiskStorage
    from funnelgraph.session import EditorSession

    try:
        storage = DiskStorage(directory or load_config().storage_dir)
    except ImportError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e
    try:
        session = EditorSession(storage)
        try:
            yield session
        finally:
            session.close()
    finally:
        storage.close()


@app.command("show")
def storage_show(
    directory: DirOpt = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
):
    """Summarize the saved funnel and label counters."""
    with open_session(directory) as session:
        state = session.snapshot()
        counters = session.graph.counters.to_dict()

    if as_json:
        data = {
            "node_count": len(state.nodes),
            "edge_count": len(state.edges),
            "counters": counters,
            "status": state.report.status.value,
        }
        print_json("storage.show", data)
        return

    print(f"\nSaved funnel: {len(state.nodes)} nodes | {len(state.edges)} edges")
    print("Counters: " + ", ".join(f"{k}={v}" for k, v in counters.items()) + "\n")
    print_lines([f"  {line}" for line in issue_panel_lines(state.report, load_config().max_issues)])


@app.command("export")
def storage_export(
    directory: DirOpt = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write to file")] = None,
):
    """Export the saved funnel as JSON."""
    with open_session(directory) as session:
        text = session.export_document()
        node_count = len(session.graph.nodes)

    if output is None:
        print(text)
        return
    output.write_text(text, encoding="utf-8")
    print(f"Exported {node_count} nodes to {output}")


@app.command("import")
def storage_import(
    path: Annotated[Path, typer.Argument(help="Funnel JSON file", exists=True, dir_okay=False)],
    directory: DirOpt = None,
):
    """Replace the saved funnel with a document. The saved state is kept if the file is invalid."""
    with open_session(directory) as session:
        try:
            state = session.import_document(path.read_bytes())
        except DocumentError as e:
            print("Error: Invalid JSON file, saved funnel left unchanged")
            print(f"  -> {e.reason}" + (f" (at {e.path})" if e.path else ""))
            raise typer.Exit(1) from e
    print(f"Imported {len(state.nodes)} nodes and {len(state.edges)} edges from {path}")


@app.command("clear")
def storage_clear(directory: DirOpt = None):
    """Delete every node and edge. Label numbering continues afterwards."""
    with open_session(directory) as session:
        removed = len(session.graph.nodes)
        session.clear()
    print(f"Cleared {removed} nodes")

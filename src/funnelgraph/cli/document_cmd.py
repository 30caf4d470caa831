"""Document CLI commands: check, inspect, templates."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from funnelgraph.cli._config import load_config
from funnelgraph.cli._format import format_position, print_json, print_lines, print_table, truncate
from funnelgraph.exceptions import DocumentError
from funnelgraph.graph.validation import ValidationReport, summarize, validate
from funnelgraph.panel import issue_panel_lines
from funnelgraph.persistence.document import FunnelDocument, loads, serialize
from funnelgraph.templates import NODE_TEMPLATES

FileArg = Annotated[
    Path,
    typer.Argument(help="Exported funnel JSON file", exists=True, dir_okay=False, readable=True),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON")]
OutputOpt = Annotated[str | None, typer.Option("--output", help="Write JSON to file")]


def read_document(path: Path) -> FunnelDocument:
    """Load a funnel document from disk, exiting with status 1 if it is invalid."""
    try:
        return loads(path.read_bytes())
    except DocumentError as e:
        print(f"Error: {path} is not a valid funnel document")
        print(f"  -> {e.reason}" + (f" (at {e.path})" if e.path else ""))
        raise typer.Exit(1) from e


def report_to_dict(document: FunnelDocument, report: ValidationReport) -> dict[str, Any]:
    """Validation result for ``document`` as JSON-friendly data."""
    return {
        "status": report.status.value,
        "node_count": len(document.nodes),
        "edge_count": len(document.edges),
        "issues": [
            {"severity": i.severity.value, "message": i.message, "node_id": i.node_id}
            for i in report.issues
        ],
    }


def check(
    path: FileArg,
    as_json: JsonOpt = False,
    output: OutputOpt = None,
    max_issues: Annotated[
        int | None, typer.Option("--max-issues", min=1, help="Issues shown before '+N more'")
    ] = None,
):
    """Validate an exported funnel. Exits with status 1 on structural errors."""
    document = read_document(path)
    report = summarize(document.nodes, validate(document.nodes, document.edges))

    if as_json:
        print_json("check", report_to_dict(document, report), output)
    else:
        limit = max_issues or load_config().max_issues
        print()
        print_lines([f"  {line}" for line in issue_panel_lines(report, limit)])

    if report.has_errors:
        raise typer.Exit(1)


def inspect(
    path: FileArg,
    as_json: JsonOpt = False,
    output: OutputOpt = None,
):
    """Show the nodes and edges of an exported funnel."""
    document = read_document(path)

    if as_json:
        print_json("inspect", serialize(document.nodes, document.edges), output)
        return

    print(f"\nFunnel: {path.name} | {len(document.nodes)} nodes | {len(document.edges)} edges\n")
    if not document.nodes:
        print("  (empty)")
        return

    node_rows = [
        [
            node.id,
            node.type.value,
            truncate(node.label, 30),
            format_position(node.position.x, node.position.y),
        ]
        for node in document.nodes
    ]
    print_lines(print_table(["Id", "Type", "Label", "Position"], node_rows))

    if document.edges:
        labels = {node.id: node.label for node in document.nodes}
        edge_rows = [
            [edge.id, truncate(labels[edge.source], 30), truncate(labels[edge.target], 30)]
            for edge in document.edges
        ]
        print()
        print_lines(print_table(["Edge", "From", "To"], edge_rows))

    print(f"\n  For validation: funnelgraph check {path}")


def templates(
    as_json: JsonOpt = False,
    output: OutputOpt = None,
):
    """List the node types available in the palette."""
    if as_json:
        data = [
            {
                "type": t.type.value,
                "label": t.label,
                "buttonLabel": t.button_label,
                "icon": t.icon,
                "color": t.color,
                "description": t.description,
            }
            for t in NODE_TEMPLATES.values()
        ]
        print_json("templates", data, output)
        return

    rows = [
        [t.type.value, t.label, t.button_label, t.color, t.description]
        for t in NODE_TEMPLATES.values()
    ]
    print(f"\n  Node types ({len(rows)}):\n")
    print_lines(print_table(["Type", "Label", "Button", "Color", "Description"], rows))


def register_commands(app: typer.Typer) -> None:
    """Register check, inspect and templates as top-level commands."""
    app.command("check")(check)
    app.command("inspect")(inspect)
    app.command("templates")(templates)

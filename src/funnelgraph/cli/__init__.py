"""Funnelgraph CLI - validate and inspect funnels, manage saved state.

Entry point for the `funnelgraph` command. Requires ``pip install funnelgraph[cli]``.

Commands:
    check           Validate an exported funnel document
    inspect         Show nodes and edges of a funnel document
    templates       List palette node types
    storage show    Summarize the saved editor state
    storage export  Export the saved funnel as JSON
    storage import  Replace the saved funnel with a document
    storage clear   Delete every saved node and edge
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install funnelgraph[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all subcommands."""
    _require_typer()

    import typer

    from funnelgraph.cli.document_cmd import register_commands
    from funnelgraph.cli.storage_cmd import app as storage_app

    app = typer.Typer(
        name="funnelgraph",
        help="Funnel graph validation and storage CLI.",
        no_args_is_help=True,
    )
    app.add_typer(storage_app, name="storage")
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()

"""Tests for the storage subcommands against an on-disk state directory."""

import json

import pytest

typer = pytest.importorskip("typer")
pytest.importorskip("diskcache")

from typer.testing import CliRunner  # noqa: E402

from funnelgraph.cli import create_app  # noqa: E402

runner_cli = CliRunner()

DOCUMENT = {
    "nodes": [
        {"id": "s", "position": {"x": 0, "y": 0}, "data": {"type": "salesPage", "label": "Sales Page"}},
        {"id": "u", "position": {"x": 200, "y": 0}, "data": {"type": "upsell", "label": "Upsell 4"}},
    ],
    "edges": [{"id": "e1", "source": "s", "target": "u"}],
}


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def state_dir(tmp_path):
    return str(tmp_path / "state")


@pytest.fixture
def funnel_file(tmp_path):
    path = tmp_path / "funnel.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    return path


class TestStorageCommands:
    def test_show_empty(self, app, state_dir):
        result = runner_cli.invoke(app, ["storage", "show", "--dir", state_dir])
        assert result.exit_code == 0
        assert "0 nodes | 0 edges" in result.output
        assert "Drag nodes from the palette" in result.output

    def test_import_then_show(self, app, state_dir, funnel_file):
        result = runner_cli.invoke(app, ["storage", "import", str(funnel_file), "--dir", state_dir])
        assert result.exit_code == 0
        assert "Imported 2 nodes and 1 edges" in result.output

        result = runner_cli.invoke(app, ["storage", "show", "--dir", state_dir, "--json"])
        data = json.loads(result.output)["data"]
        assert data["node_count"] == 2
        assert data["edge_count"] == 1
        assert data["counters"] == {"upsell": 4, "downsell": 0}

    def test_invalid_import_keeps_state(self, app, state_dir, funnel_file, tmp_path):
        runner_cli.invoke(app, ["storage", "import", str(funnel_file), "--dir", state_dir])
        before = runner_cli.invoke(app, ["storage", "export", "--dir", state_dir]).output
        bad = tmp_path / "bad.json"
        bad.write_text("{nope", encoding="utf-8")

        result = runner_cli.invoke(app, ["storage", "import", str(bad), "--dir", state_dir])
        assert result.exit_code == 1
        assert "Invalid JSON file" in result.output

        after = runner_cli.invoke(app, ["storage", "export", "--dir", state_dir]).output
        assert after == before
        assert [n["id"] for n in json.loads(after)["nodes"]] == ["s", "u"]

    def test_export_to_file(self, app, state_dir, funnel_file, tmp_path):
        runner_cli.invoke(app, ["storage", "import", str(funnel_file), "--dir", state_dir])
        out = tmp_path / "out.json"

        result = runner_cli.invoke(app, ["storage", "export", "--dir", state_dir, "-o", str(out)])
        assert result.exit_code == 0
        assert [n["id"] for n in json.loads(out.read_text(encoding="utf-8"))["nodes"]] == ["s", "u"]

    def test_clear_keeps_counters(self, app, state_dir, funnel_file):
        runner_cli.invoke(app, ["storage", "import", str(funnel_file), "--dir", state_dir])

        result = runner_cli.invoke(app, ["storage", "clear", "--dir", state_dir])
        assert "Cleared 2 nodes" in result.output

        data = json.loads(runner_cli.invoke(app, ["storage", "show", "--dir", state_dir, "--json"]).output)["data"]
        assert data["node_count"] == 0
        assert data["counters"]["upsell"] == 4

    def test_storage_closed_after_each_command(self, app, state_dir, funnel_file, tmp_path, monkeypatch):
        from funnelgraph.persistence.storage import DiskStorage

        closed = []
        original_close = DiskStorage.close

        def tracking_close(self):
            closed.append(self.directory)
            original_close(self)

        monkeypatch.setattr(DiskStorage, "close", tracking_close)
        bad = tmp_path / "bad.json"
        bad.write_text("{nope", encoding="utf-8")

        runner_cli.invoke(app, ["storage", "import", str(funnel_file), "--dir", state_dir])
        result = runner_cli.invoke(app, ["storage", "import", str(bad), "--dir", state_dir])

        assert result.exit_code == 1
        assert closed == [state_dir, state_dir]

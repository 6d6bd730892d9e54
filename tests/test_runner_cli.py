import json
import os

from conftest import FakeSource, block, child_page, page

from notion_mirror.services.snapshot_store import SnapshotStore
from notion_mirror.services.sync.base import ListingTarget
from notion_mirror.services.sync.runner import main, run_fetch


def _source():
    return (
        FakeSource()
        .add_rows("root", [page("top"), page("second")])
        .add_children("top", [child_page("sub")])
        .add_children("sub", [block("text")])
    )


def test_run_fetch_persists_and_summarises(tmp_path):
    store = SnapshotStore(str(tmp_path / "out.json"))
    summary = run_fetch(_source(), "root", store, max_depth=5, overall_depth_limit=7)
    assert summary["path"] == store.path
    assert summary["top_level"] == 2
    assert summary["nodes"] == 4
    assert [n.id for n in store.load()] == ["top", "second"]


def test_show_prints_node_json(tmp_path, capsys):
    path = str(tmp_path / "out.json")
    run_fetch(_source(), "root", SnapshotStore(path), max_depth=5, overall_depth_limit=7)

    assert main(["show", "sub", "--snapshot", path]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["id"] == "sub"
    assert out["children"][0]["id"] == "text"


def test_show_missing_node_exits_nonzero(tmp_path, capsys):
    path = str(tmp_path / "out.json")
    run_fetch(_source(), "root", SnapshotStore(path), max_depth=5, overall_depth_limit=7)

    assert main(["show", "nope", "--snapshot", path]) == 1
    assert "Article not found" in capsys.readouterr().err


def test_fetch_command_writes_snapshot(tmp_path, monkeypatch, capsys):
    from notion_mirror.services.sync import runner

    source = _source()
    monkeypatch.setattr(runner, "build_source", lambda settings: source)
    path = str(tmp_path / "out.json")

    assert main(["fetch", "--database-id", "root", "--out", path]) == 0
    assert capsys.readouterr().out.strip() == os.path.abspath(path)
    assert [n.id for n in SnapshotStore(path).load()] == ["top", "second"]


def test_fetch_command_reports_root_failure(tmp_path, monkeypatch, capsys):
    from notion_mirror.services.sync import runner

    source = _source().fail_on(ListingTarget.database("root"))
    monkeypatch.setattr(runner, "build_source", lambda settings: source)
    path = tmp_path / "out.json"

    assert main(["fetch", "--database-id", "root", "--out", str(path)]) == 1
    assert "error:" in capsys.readouterr().err
    assert not path.exists()


def test_fetch_command_without_api_key(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("NOTION_API_KEY", raising=False)
    assert main(["fetch", "--database-id", "root", "--out", str(tmp_path / "out.json")]) == 1
    assert "NOTION_API_KEY" in capsys.readouterr().err


def test_show_without_snapshot(tmp_path, capsys):
    assert main(["show", "x", "--snapshot", str(tmp_path / "missing.json")]) == 1
    assert "not available" in capsys.readouterr().err

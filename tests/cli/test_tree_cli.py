"""Tests for 'trellis tree' commands."""

import json

import pytest

from trellis.cli.tree import (
    node_add,
    node_move,
    node_remove,
    node_rename,
    tree_collapse,
    tree_expand,
    tree_export,
    tree_import,
    tree_reset,
    tree_show,
)


def _saved(path):
    return json.loads(path.read_text())


def _find(data, node_id):
    if data["id"] == node_id:
        return data
    for kid in data.get("children", []):
        found = _find(kid, node_id)
        if found is not None:
            return found
    return None


def _kids(data, node_id):
    return [k["id"] for k in _find(data, node_id).get("children", [])]


def test_show_default_tree(make_args, capsys):
    assert tree_show(make_args()) == 0
    out = capsys.readouterr().out
    assert "▸ [A] Level A  (root)" in out


def test_show_outline(make_args, tree_file, capsys):
    assert tree_show(make_args()) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("▾ [A] Level A")
    assert lines[1].startswith("  ▾ [B] Alpha")
    assert lines[2].startswith("    ▸ [C] Alpha child")
    assert lines[3].startswith("  ▸ [B] Beta")


def test_show_json(make_args, tree_file, capsys):
    assert tree_show(make_args(json=True)) == 0
    data = json.loads(capsys.readouterr().out)
    assert _kids(data, "root") == ["root-1", "root-2"]


def test_export(make_args, tree_file, capsys):
    assert tree_export(make_args(output=None)) == 0
    data = json.loads(capsys.readouterr().out)
    assert _kids(data, "root-1") == ["root-1-1"]
    beta = _find(data, "root-2")
    assert beta == {
        "id": "root-2",
        "label": "Beta",
        "level": "B",
        "isExpanded": False,
        "isLoading": False,
        "hasChildren": True,
    }


def test_import_and_reset(make_args, tree_file, tmp_path, capsys):
    doc = tmp_path / "other.json"
    doc.write_text(json.dumps({"id": "top", "label": "Top", "level": "A", "isLoading": True}))
    assert tree_import(make_args(source=str(doc))) == 0
    assert "Imported 1 nodes" in capsys.readouterr().out
    saved = _saved(tree_file)
    assert saved["id"] == "top"
    assert saved["isLoading"] is False

    assert tree_reset(make_args()) == 0
    assert _saved(tree_file)["id"] == "root"


def test_import_unknown_level(make_args, tree_file, tmp_path, capsys):
    doc = tmp_path / "bad.json"
    doc.write_text(json.dumps({"id": "r", "label": "R", "level": "Q"}))
    with pytest.raises(SystemExit, match="1"):
        tree_import(make_args(source=str(doc)))
    assert "unknown level" in capsys.readouterr().err


def test_expand_fetches_children(make_args, tree_file, capsys):
    assert tree_expand(make_args(id="root-2")) == 0
    assert "Expanded root-2" in capsys.readouterr().out
    beta = _find(_saved(tree_file), "root-2")
    assert beta["isExpanded"] is True
    assert beta["isLoading"] is False
    assert 2 <= len(beta["children"]) <= 4
    assert all(kid["level"] == "C" for kid in beta["children"])


def test_expand_already_loaded_leaf_branch(make_args, tree_file):
    """A node with loaded children expands without fetching."""
    assert tree_collapse(make_args(id="root-1")) == 0
    assert tree_expand(make_args(id="root-1")) == 0
    assert _kids(_saved(tree_file), "root-1") == ["root-1-1"]


def test_expand_timeout(make_args, tree_file, capsys):
    with pytest.raises(SystemExit, match="1"):
        tree_expand(make_args(id="root-2", fetch_delay=1.0, fetch_timeout=0.01))
    assert "Failed to load children of 'root-2'" in capsys.readouterr().err


def test_expand_unknown(make_args, tree_file):
    with pytest.raises(SystemExit, match="1"):
        tree_expand(make_args(id="nope"))


def test_collapse(make_args, tree_file):
    assert tree_collapse(make_args(id="root-1")) == 0
    alpha = _find(_saved(tree_file), "root-1")
    assert alpha["isExpanded"] is False
    assert [k["id"] for k in alpha["children"]] == ["root-1-1"]


def test_add(make_args, tree_file, capsys):
    assert node_add(make_args(json=True, parent="root-1", label="Another")) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"id": "root-1-2", "label": "Another", "level": "C", "parent": "root-1"}
    assert _kids(_saved(tree_file), "root-1") == ["root-1-1", "root-1-2"]


def test_add_unknown_parent(make_args, tree_file):
    with pytest.raises(SystemExit, match="1"):
        node_add(make_args(parent="nope", label="X"))


def test_remove(make_args, tree_file, capsys):
    assert node_remove(make_args(id="root-1")) == 0
    assert "Removed root-1 (2 nodes)" in capsys.readouterr().out
    assert _kids(_saved(tree_file), "root") == ["root-2"]


def test_remove_root(make_args, tree_file, capsys):
    with pytest.raises(SystemExit, match="1"):
        node_remove(make_args(id="root"))
    assert "Cannot delete root node" in capsys.readouterr().err


def test_rename(make_args, tree_file):
    assert node_rename(make_args(id="root-2", label="Gamma")) == 0
    assert _find(_saved(tree_file), "root-2")["label"] == "Gamma"


def test_move(make_args, tree_file):
    assert node_move(make_args(id="root-2", parent="root", position=1)) == 0
    assert _kids(_saved(tree_file), "root") == ["root-2", "root-1"]


def test_move_reparent_to_end(make_args, tree_file):
    assert node_move(make_args(id="root-2", parent="root-1", position=None)) == 0
    data = _saved(tree_file)
    assert _kids(data, "root-1") == ["root-1-1", "root-2"]
    assert _find(data, "root-2")["level"] == "B"


def test_move_into_descendant(make_args, tree_file, capsys):
    with pytest.raises(SystemExit, match="1"):
        node_move(make_args(id="root-1", parent="root-1-1", position=None))
    assert "Cannot move" in capsys.readouterr().err
    assert _kids(_saved(tree_file), "root-1") == ["root-1-1"]

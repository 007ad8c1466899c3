"""Handlers for 'trellis tree' commands."""

import asyncio
import sys

from trellis.cli._common import (
    error,
    guarded,
    load_tree_or_die,
    output_json,
    output_result,
    read_document,
    save_tree,
)
from trellis.model.serialize import tree_to_data
from trellis.model.tree import children_of, find_node_by_id, visible_rows


def _marker(node) -> str:
    if not node.has_children:
        return " "
    if node.is_loading:
        return "…"
    return "▾" if node.is_expanded else "▸"


def tree_show(args) -> int:
    """Print expanded nodes as an indented outline."""
    editor = load_tree_or_die(args)
    if args.json:
        output_json(tree_to_data(editor.tree))
        return 0
    for row in visible_rows(editor.tree):
        node = row.node
        print(f"{'  ' * row.depth}{_marker(node)} [{node.level.value}] {node.label}  ({node.id})")
    return 0


def tree_export(args) -> int:
    """Write the tree document to stdout or --output."""
    editor = load_tree_or_die(args)
    text = editor.export_json()
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        print(f"Exported tree to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def tree_import(args) -> int:
    """Replace the tree with a document read from a file or stdin."""
    editor = load_tree_or_die(args)
    try:
        text = read_document(args.source)
    except OSError as e:
        error(str(e), args.json)
    with guarded(args.json):
        editor.import_json(text)
    save_tree(editor)
    output_result({"nodes": len(editor.tree)}, f"Imported {len(editor.tree)} nodes", args.json)
    return 0


def tree_reset(args) -> int:
    editor = load_tree_or_die(args)
    editor.reset()
    save_tree(editor)
    output_result({"nodes": len(editor.tree)}, "Tree reset", args.json)
    return 0


async def _expand(editor, node_id: str) -> None:
    editor.toggle_expand(node_id)
    await editor.expander.wait()


def tree_expand(args) -> int:
    """Expand a node, fetching its children first if they were never loaded."""
    editor = load_tree_or_die(args)
    node = find_node_by_id(editor.tree, args.id)
    if node is None:
        error(f"Node '{args.id}' not found.", args.json)

    failures = []
    editor.expander.on_error = lambda node_id, exc: failures.append(exc)
    if not node.is_expanded:
        asyncio.run(_expand(editor, args.id))
    if failures:
        error(f"Failed to load children of '{args.id}': {failures[0]!r}", args.json)

    save_tree(editor)
    kids = children_of(editor.tree, args.id) or ()
    output_result(
        {"id": args.id, "children": [k.id for k in kids]},
        f"Expanded {args.id} ({len(kids)} children)",
        args.json,
    )
    return 0


def tree_collapse(args) -> int:
    editor = load_tree_or_die(args)
    node = find_node_by_id(editor.tree, args.id)
    if node is None:
        error(f"Node '{args.id}' not found.", args.json)
    if node.is_expanded:
        editor.toggle_expand(args.id)
    save_tree(editor)
    output_result({"id": args.id}, f"Collapsed {args.id}", args.json)
    return 0


def node_add(args) -> int:
    """Add a child node under a parent."""
    editor = load_tree_or_die(args)
    if find_node_by_id(editor.tree, args.parent) is None:
        error(f"Node '{args.parent}' not found.", args.json)
    with guarded(args.json):
        node_id = editor.add_child(args.parent, args.label)
    save_tree(editor)
    node = find_node_by_id(editor.tree, node_id)
    output_result(
        {"id": node_id, "label": node.label, "level": node.level.value, "parent": args.parent},
        f"Created node {node_id} under {args.parent}",
        args.json,
    )
    return 0


def node_remove(args) -> int:
    """Remove a node and its subtree."""
    editor = load_tree_or_die(args)
    if find_node_by_id(editor.tree, args.id) is None:
        error(f"Node '{args.id}' not found.", args.json)
    before = len(editor.tree)
    with guarded(args.json):
        editor.remove_node(args.id)
    save_tree(editor)
    removed = before - len(editor.tree)
    output_result({"id": args.id, "removed": removed}, f"Removed {args.id} ({removed} nodes)", args.json)
    return 0


def node_rename(args) -> int:
    editor = load_tree_or_die(args)
    if find_node_by_id(editor.tree, args.id) is None:
        error(f"Node '{args.id}' not found.", args.json)
    with guarded(args.json):
        editor.rename_node(args.id, args.label)
    save_tree(editor)
    label = find_node_by_id(editor.tree, args.id).label
    output_result({"id": args.id, "label": label}, f"Renamed {args.id} to {label}", args.json)
    return 0


def node_move(args) -> int:
    """Move a node under a new parent, at a 1-indexed position or the end."""
    editor = load_tree_or_die(args)
    for node_id in (args.id, args.parent):
        if find_node_by_id(editor.tree, node_id) is None:
            error(f"Node '{node_id}' not found.", args.json)
    kids = children_of(editor.tree, args.parent) or ()
    index = args.position - 1 if args.position is not None else len(kids)
    with guarded(args.json):
        editor.move_node(args.id, args.parent, index)
    save_tree(editor)
    output_result({"id": args.id, "parent": args.parent}, f"Moved {args.id} under {args.parent}", args.json)
    return 0

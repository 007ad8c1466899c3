"""CLI argument parser and dispatch for trellis."""

import argparse

from trellis.cli.board import (
    board_export,
    board_import,
    board_reset,
    board_show,
    card_add,
    card_delete,
    card_move,
    card_rename,
    column_add,
    column_delete,
    column_rename,
)
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
from trellis.cli.web import web


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    common.add_argument("--board-file", default="board.json", help="Board document (default: board.json)")
    common.add_argument("--tree-file", default="tree.json", help="Tree document (default: tree.json)")
    common.add_argument("--fetch-timeout", type=float, default=10.0, help="Child fetch timeout in seconds")
    common.add_argument("--fetch-delay", type=float, default=0.5, help="Simulated child fetch latency in seconds")

    parser = argparse.ArgumentParser(
        prog="trellis",
        description="Kanban board and lazy tree editor",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- board ---
    board_p = nouns.add_parser("board", help="Board operations", parents=[common])
    board_verbs = board_p.add_subparsers(dest="verb")

    board_show_p = board_verbs.add_parser("show", help="Show columns and cards", parents=[common])
    board_show_p.set_defaults(func=board_show)

    board_export_p = board_verbs.add_parser("export", help="Export board JSON", parents=[common])
    board_export_p.add_argument("-o", "--output", help="Write to a file instead of stdout")
    board_export_p.set_defaults(func=board_export)

    board_import_p = board_verbs.add_parser("import", help="Import board JSON", parents=[common])
    board_import_p.add_argument("source", nargs="?", default="-", help="File to read (default: stdin)")
    board_import_p.set_defaults(func=board_import)

    board_reset_p = board_verbs.add_parser("reset", help="Restore the default columns", parents=[common])
    board_reset_p.set_defaults(func=board_reset)

    card_add_p = board_verbs.add_parser("add-card", help="Create a card", parents=[common])
    card_add_p.add_argument("title", help="Card title")
    card_add_p.add_argument("--column", default="todo", help="Target column ID (default: todo)")
    card_add_p.set_defaults(func=card_add)

    card_delete_p = board_verbs.add_parser("delete-card", help="Delete a card", parents=[common])
    card_delete_p.add_argument("id", help="Card ID")
    card_delete_p.set_defaults(func=card_delete)

    card_rename_p = board_verbs.add_parser("rename-card", help="Rename a card", parents=[common])
    card_rename_p.add_argument("id", help="Card ID")
    card_rename_p.add_argument("title", help="New title")
    card_rename_p.set_defaults(func=card_rename)

    card_move_p = board_verbs.add_parser("move-card", help="Move a card", parents=[common])
    card_move_p.add_argument("id", help="Card ID")
    card_move_p.add_argument("--column", required=True, help="Target column ID")
    card_move_p.add_argument("--position", type=int, help="Position in column (1-indexed)")
    card_move_p.set_defaults(func=card_move)

    col_add_p = board_verbs.add_parser("add-column", help="Create a column", parents=[common])
    col_add_p.add_argument("title", help="Column title")
    col_add_p.set_defaults(func=column_add)

    col_delete_p = board_verbs.add_parser("delete-column", help="Delete a column and its cards", parents=[common])
    col_delete_p.add_argument("id", help="Column ID")
    col_delete_p.set_defaults(func=column_delete)

    col_rename_p = board_verbs.add_parser("rename-column", help="Rename a column", parents=[common])
    col_rename_p.add_argument("id", help="Column ID")
    col_rename_p.add_argument("title", help="New title")
    col_rename_p.set_defaults(func=column_rename)

    # board with no verb = show
    board_p.set_defaults(func=board_show)

    # --- tree ---
    tree_p = nouns.add_parser("tree", help="Tree operations", parents=[common])
    tree_verbs = tree_p.add_subparsers(dest="verb")

    tree_show_p = tree_verbs.add_parser("show", help="Show expanded nodes", parents=[common])
    tree_show_p.set_defaults(func=tree_show)

    tree_export_p = tree_verbs.add_parser("export", help="Export tree JSON", parents=[common])
    tree_export_p.add_argument("-o", "--output", help="Write to a file instead of stdout")
    tree_export_p.set_defaults(func=tree_export)

    tree_import_p = tree_verbs.add_parser("import", help="Import tree JSON", parents=[common])
    tree_import_p.add_argument("source", nargs="?", default="-", help="File to read (default: stdin)")
    tree_import_p.set_defaults(func=tree_import)

    tree_reset_p = tree_verbs.add_parser("reset", help="Restore the default tree", parents=[common])
    tree_reset_p.set_defaults(func=tree_reset)

    expand_p = tree_verbs.add_parser("expand", help="Expand a node, loading children", parents=[common])
    expand_p.add_argument("id", help="Node ID")
    expand_p.set_defaults(func=tree_expand)

    collapse_p = tree_verbs.add_parser("collapse", help="Collapse a node", parents=[common])
    collapse_p.add_argument("id", help="Node ID")
    collapse_p.set_defaults(func=tree_collapse)

    add_p = tree_verbs.add_parser("add", help="Add a child node", parents=[common])
    add_p.add_argument("parent", help="Parent node ID")
    add_p.add_argument("label", help="Node label")
    add_p.set_defaults(func=node_add)

    remove_p = tree_verbs.add_parser("remove", help="Remove a node and its subtree", parents=[common])
    remove_p.add_argument("id", help="Node ID")
    remove_p.set_defaults(func=node_remove)

    rename_p = tree_verbs.add_parser("rename", help="Rename a node", parents=[common])
    rename_p.add_argument("id", help="Node ID")
    rename_p.add_argument("label", help="New label")
    rename_p.set_defaults(func=node_rename)

    move_p = tree_verbs.add_parser("move", help="Move a node under a new parent", parents=[common])
    move_p.add_argument("id", help="Node ID")
    move_p.add_argument("--parent", required=True, help="New parent node ID")
    move_p.add_argument("--position", type=int, help="Position among siblings (1-indexed)")
    move_p.set_defaults(func=node_move)

    # tree with no verb = show
    tree_p.set_defaults(func=tree_show)

    # --- web ---
    web_p = nouns.add_parser("web", help="Serve the editor in a browser", parents=[common])
    web_p.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    web_p.add_argument("--port", type=int, default=8617, help="Port (default: 8617)")
    web_p.set_defaults(func=web)

    return parser

"""Immutable board and tree snapshots."""

from trellis.model.board import (
    Board,
    Card,
    Column,
    add_card,
    add_column,
    default_board,
    delete_card,
    delete_column,
    find_card,
    find_card_column,
    find_column,
    move_card,
    rename_card,
    rename_column,
)
from trellis.model.serialize import export_board, export_tree, import_board, import_tree
from trellis.model.tree import (
    Level,
    Tree,
    TreeNode,
    add_child_node,
    default_tree,
    find_node_by_id,
    find_parent_node,
    move_node,
    remove_node,
    update_node,
)

__all__ = [
    "Board",
    "Card",
    "Column",
    "Level",
    "Tree",
    "TreeNode",
    "add_card",
    "add_child_node",
    "add_column",
    "default_board",
    "default_tree",
    "delete_card",
    "delete_column",
    "export_board",
    "export_tree",
    "find_card",
    "find_card_column",
    "find_column",
    "find_node_by_id",
    "find_parent_node",
    "import_board",
    "import_tree",
    "move_card",
    "move_node",
    "remove_node",
    "rename_card",
    "rename_column",
    "update_node",
]

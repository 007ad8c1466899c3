"""JSON interchange for boards and trees.

Documents mirror the in-memory shape with camelCase field names, so an
exported board is a list of columns and an exported tree is a nested
object. Import requires that shape, unique ids, and no ``hasChildren``
flag on terminal-level nodes; anything else raises InvalidDocument and
the caller keeps its current snapshot.

A child's level is not checked against its parent's. Moves keep a
node's level, so an exported tree can legitimately nest, say, a C node
directly under another C node.
"""

from __future__ import annotations

import json
from typing import Any

from trellis.errors import InvalidDocument
from trellis.model.board import Board, Card, Column
from trellis.model.tree import Level, Tree, TreeNode, child_ids, find_node_by_id, is_materialized

# --- Export ---


def board_to_data(board: Board) -> list[dict]:
    return [
        {
            "id": col.id,
            "title": col.title,
            "cards": [{"id": c.id, "title": c.title, "columnId": c.column_id} for c in col.cards],
            "color": col.color,
        }
        for col in board
    ]


def tree_to_data(tree: Tree, node_id: str | None = None) -> dict:
    node = find_node_by_id(tree, node_id or tree.root_id)
    data: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "level": node.level.value,
        "isExpanded": node.is_expanded,
        "isLoading": node.is_loading,
        "hasChildren": node.has_children,
    }
    if is_materialized(tree, node.id):
        data["children"] = [tree_to_data(tree, kid) for kid in child_ids(tree, node.id)]
    return data


def dumps(data: Any) -> str:
    return json.dumps(data, indent=2)


def export_board(board: Board) -> str:
    return dumps(board_to_data(board))


def export_tree(tree: Tree) -> str:
    return dumps(tree_to_data(tree))


# --- Import ---


def loads(text: str) -> Any:
    """Parse JSON, turning syntax errors into InvalidDocument."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidDocument(f"Invalid file format: {e}") from e


def _field(data: Any, key: str, kind: type, path: str, default: Any = ...) -> Any:
    if not isinstance(data, dict):
        raise InvalidDocument("expected an object", path)
    if key not in data:
        if default is ...:
            raise InvalidDocument(f"missing '{key}'", path)
        return default
    value = data[key]
    if not isinstance(value, kind):
        raise InvalidDocument(f"'{key}' must be {kind.__name__}", path)
    return value


def board_from_data(data: Any) -> Board:
    if not isinstance(data, list):
        raise InvalidDocument("board must be a list of columns")
    seen_columns: set[str] = set()
    seen_cards: set[str] = set()
    columns = []
    for i, raw in enumerate(data):
        path = f"[{i}]"
        col_id = _field(raw, "id", str, path)
        if col_id in seen_columns:
            raise InvalidDocument(f"duplicate column id '{col_id}'", path)
        seen_columns.add(col_id)
        cards = []
        for j, raw_card in enumerate(_field(raw, "cards", list, path, [])):
            card_path = f"{path}.cards[{j}]"
            card_id = _field(raw_card, "id", str, card_path)
            if card_id in seen_cards:
                raise InvalidDocument(f"duplicate card id '{card_id}'", card_path)
            seen_cards.add(card_id)
            cards.append(
                Card(
                    id=card_id,
                    title=_field(raw_card, "title", str, card_path),
                    column_id=_field(raw_card, "columnId", str, card_path, col_id),
                )
            )
        columns.append(
            Column(
                id=col_id,
                title=_field(raw, "title", str, path),
                cards=tuple(cards),
                color=_field(raw, "color", str, path, "gray"),
            )
        )
    return tuple(columns)


def tree_from_data(data: Any) -> Tree:
    """Build a Tree from a nested document. Loading flags are cleared."""
    children: dict[str, list[TreeNode]] = {}
    seen: set[str] = set()

    def parse(raw: Any, path: str) -> TreeNode:
        node_id = _field(raw, "id", str, path)
        if node_id in seen:
            raise InvalidDocument(f"duplicate node id '{node_id}'", path)
        seen.add(node_id)
        level_value = _field(raw, "level", str, path)
        try:
            level = Level(level_value)
        except ValueError as e:
            raise InvalidDocument(f"unknown level '{level_value}'", path) from e
        has_children = _field(raw, "hasChildren", bool, path, False)
        if has_children and level.is_terminal:
            raise InvalidDocument(f"level {level.value} node '{node_id}' cannot have children", path)
        node = TreeNode(
            id=node_id,
            label=_field(raw, "label", str, path),
            level=level,
            is_expanded=_field(raw, "isExpanded", bool, path, False),
            has_children=has_children,
        )
        kids = _field(raw, "children", list, path, None)
        if kids is not None:
            children[node_id] = [parse(kid, f"{path}.children[{i}]") for i, kid in enumerate(kids)]
        return node

    root = parse(data, "$")
    return Tree.build(root, children)


def import_board(text: str) -> Board:
    return board_from_data(loads(text))


def import_tree(text: str) -> Tree:
    return tree_from_data(loads(text))

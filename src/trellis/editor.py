"""Board and tree editors: current snapshot, policy checks, listeners.

The model functions are permissive and pure. Editors sit in front of
them, refuse intents the user must not perform (raising Rejected), apply
the rest, and tell subscribers about every new snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from trellis import intents
from trellis.config import Settings
from trellis.drag import CardDragController, NodeDragController, can_drop
from trellis.errors import Rejected
from trellis.fetch import Fetch, mock_fetch
from trellis.ids import new_id
from trellis.lazy import ErrorCallback, ExpansionCoordinator
from trellis.model.board import (
    Board,
    add_card,
    add_column,
    card_ids,
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
    Tree,
    add_child_node,
    child_ids,
    default_tree,
    find_node_by_id,
    find_parent_node,
    make_child,
    move_node,
    node_ids,
    remove_node,
    update_node,
)

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


def _reject(code: str, message: str) -> Rejected:
    logger.info("rejected %s: %s", code, message)
    return Rejected(code, message)


def _required(text: str, what: str) -> str:
    text = text.strip()
    if not text:
        raise _reject("blank", f"{what} cannot be empty")
    return text


class _Editor:
    """Snapshot holder with change listeners."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Call back with every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(callback)
        return lambda: callback in self._listeners and self._listeners.remove(callback)

    def _notify(self, snapshot: Any) -> None:
        for cb in list(self._listeners):
            cb(snapshot)


class BoardEditor(_Editor):
    """Edits a board snapshot."""

    def __init__(self, board: Board | None = None, settings: Settings | None = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.board: Board = default_board() if board is None else board

    def commit(self, board: Board) -> bool:
        """Adopt a new snapshot. Returns False if nothing changed."""
        if board is self.board:
            return False
        self.board = board
        self._notify(board)
        return True

    def add_card(self, column_id: str, title: str) -> str | None:
        """Add a card, returning its id (None if the column is unknown)."""
        title = _required(title, "Card title")
        card_id = new_id("card", card_ids(self.board))
        self.commit(add_card(self.board, column_id, title, card_id))
        return card_id if find_card(self.board, card_id) else None

    def delete_card(self, card_id: str) -> None:
        self.commit(delete_card(self.board, card_id))

    def rename_card(self, card_id: str, title: str) -> None:
        self.commit(rename_card(self.board, card_id, _required(title, "Card title")))

    def move_card(self, source_column_id: str, dest_column_id: str, source_index: int, dest_index: int) -> None:
        source = find_column(self.board, source_column_id)
        if source is not None and not 0 <= source_index < len(source.cards):
            raise _reject("index", f"No card at position {source_index} in '{source.title}'")
        self.commit(move_card(self.board, source_column_id, dest_column_id, source_index, dest_index))

    def add_column(self, title: str) -> str:
        column_id = new_id("column", [c.id for c in self.board])
        self.commit(add_column(self.board, _required(title, "Column title"), column_id))
        return column_id

    def delete_column(self, column_id: str) -> None:
        if column_id in self.settings.reserved_columns:
            raise _reject("protected", f"Column '{column_id}' cannot be deleted")
        self.commit(delete_column(self.board, column_id))

    def rename_column(self, column_id: str, title: str) -> None:
        self.commit(rename_column(self.board, column_id, _required(title, "Column title")))

    def dispatch(self, intent: intents.BoardIntent) -> Any:
        match intent:
            case intents.AddCard(column_id, title):
                return self.add_card(column_id, title)
            case intents.DeleteCard(card_id):
                return self.delete_card(card_id)
            case intents.RenameCard(card_id, title):
                return self.rename_card(card_id, title)
            case intents.MoveCard(source, dest, source_index, dest_index):
                return self.move_card(source, dest, source_index, dest_index)
            case intents.AddColumn(title):
                return self.add_column(title)
            case intents.DeleteColumn(column_id):
                return self.delete_column(column_id)
            case intents.RenameColumn(column_id, title):
                return self.rename_column(column_id, title)
        raise TypeError(f"not a board intent: {intent!r}")

    def start_drag(self, card_id: str) -> CardDragController | None:
        """Pick up a card. Cancelling the drag puts the card back where it was."""
        column = find_card_column(self.board, card_id)
        if column is None:
            return None
        index = next(i for i, c in enumerate(column.cards) if c.id == card_id)
        controller = CardDragController(
            on_move=self.dispatch, on_cancel=lambda: self._put_back(card_id, column.id, index)
        )
        controller.begin(card_id, column.id, index)
        return controller

    def _put_back(self, card_id: str, column_id: str, index: int) -> None:
        current = find_card_column(self.board, card_id)
        if current is None or find_column(self.board, column_id) is None:
            return
        at = next(i for i, c in enumerate(current.cards) if c.id == card_id)
        self.commit(move_card(self.board, current.id, column_id, at, index))

    def reset(self) -> None:
        self.commit(default_board())

    def export_json(self) -> str:
        return export_board(self.board)

    def import_json(self, text: str) -> None:
        """Replace the board from a JSON document, or raise InvalidDocument."""
        board = import_board(text)
        logger.info("imported board with %d columns", len(board))
        self.commit(board)


class TreeEditor(_Editor):
    """Edits a tree snapshot and drives lazy expansion."""

    def __init__(
        self,
        tree: Tree | None = None,
        fetch: Fetch | None = None,
        settings: Settings | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.tree: Tree = default_tree() if tree is None else tree
        self.expander = ExpansionCoordinator(
            self,
            fetch or mock_fetch(self.settings.fetch_delay),
            timeout=self.settings.fetch_timeout,
            on_error=on_error,
        )

    def commit(self, tree: Tree) -> bool:
        """Adopt a new snapshot. Returns False if nothing changed."""
        if tree is self.tree:
            return False
        self.tree = tree
        self._notify(tree)
        return True

    def toggle_expand(self, node_id: str) -> asyncio.Task | None:
        return self.expander.toggle(node_id)

    def add_child(self, parent_id: str, label: str) -> str | None:
        """Add a child one level below its parent, returning its id."""
        label = _required(label, "Label")
        parent = find_node_by_id(self.tree, parent_id)
        if parent is None:
            return None
        if parent.level.is_terminal:
            raise _reject("terminal", f"Level {parent.level.value} nodes cannot have children")
        node = make_child(parent, new_id(parent_id, node_ids(self.tree)), label)
        self.commit(add_child_node(self.tree, parent_id, node))
        return node.id

    def remove_node(self, node_id: str) -> None:
        if node_id == self.tree.root_id:
            raise _reject("root", "Cannot delete root node")
        self.commit(remove_node(self.tree, node_id))

    def rename_node(self, node_id: str, label: str) -> None:
        self.commit(update_node(self.tree, node_id, label=_required(label, "Label")))

    def move_node(self, source_id: str, target_parent_id: str, target_index: int) -> None:
        tree = self.tree
        if source_id == tree.root_id:
            raise _reject("root", "Cannot move root node")
        if source_id in tree and target_parent_id in tree and not can_drop(tree, source_id, target_parent_id):
            raise _reject("cycle", f"Cannot move '{source_id}' under '{target_parent_id}'")
        self.commit(move_node(tree, source_id, target_parent_id, target_index))

    def dispatch(self, intent: intents.TreeIntent) -> Any:
        match intent:
            case intents.ToggleExpand(node_id):
                return self.toggle_expand(node_id)
            case intents.AddChild(parent_id, label):
                return self.add_child(parent_id, label)
            case intents.RemoveNode(node_id):
                return self.remove_node(node_id)
            case intents.RenameNode(node_id, label):
                return self.rename_node(node_id, label)
            case intents.MoveNode(source_id, target_parent_id, target_index):
                return self.move_node(source_id, target_parent_id, target_index)
        raise TypeError(f"not a tree intent: {intent!r}")

    def start_drag(self, node_id: str) -> NodeDragController | None:
        """Pick up a node. Cancelling the drag puts the node back where it was.

        Only the dragged node moves back; anything else that changed
        meanwhile, such as children arriving from a fetch, is kept.
        """
        tree = self.tree
        if node_id == tree.root_id or node_id not in tree:
            return None
        parent = find_parent_node(tree, node_id)
        index = child_ids(tree, parent.id).index(node_id)
        was_expanded = parent.is_expanded
        controller = NodeDragController(
            lambda: self.tree,
            on_move=self.dispatch,
            on_cancel=lambda: self._put_back(node_id, parent.id, index, was_expanded),
        )
        controller.begin(node_id, parent.id, index)
        return controller

    def _put_back(self, node_id: str, parent_id: str, index: int, was_expanded: bool) -> None:
        tree = move_node(self.tree, node_id, parent_id, index)
        if tree is not self.tree and not was_expanded:
            tree = update_node(tree, parent_id, is_expanded=False)
        self.commit(tree)

    def reset(self) -> None:
        self.expander.cancel_all()
        self.commit(default_tree())

    def export_json(self) -> str:
        return export_tree(self.tree)

    def import_json(self, text: str) -> None:
        """Replace the tree from a JSON document, or raise InvalidDocument."""
        tree = import_tree(text)
        self.expander.cancel_all()
        logger.info("imported tree with %d nodes", len(tree))
        self.commit(tree)

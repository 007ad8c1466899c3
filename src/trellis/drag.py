"""Drag-reorder controllers.

A controller follows one drag gesture. Hover events over candidate items
become move intents when the pointer crosses the hovered item's vertical
midpoint in the direction of travel; the controller then tracks the
dragged item at its new position so later hovers compare against it.

- CardDragController: reorders cards within and across board columns
- NodeDragController: reorders tree nodes among siblings, re-parents on
  drop, and refuses any move that would put a node under itself
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from trellis.intents import MoveCard, MoveNode
from trellis.model.tree import Tree, child_ids, is_descendant


@dataclass
class DragItem:
    """The dragged item and where it currently sits."""

    item_id: str
    container_id: str
    index: int


def crosses_midpoint(drag_index: int, hover_index: int, top: float, height: float, pointer_y: float) -> bool:
    """Directional midpoint rule.

    Moving down only counts once the pointer is below the hovered item's
    middle, moving up only once it is above it. Equal indices (hovering
    another container at the same position) always count.
    """
    middle = height / 2
    offset = pointer_y - top
    if drag_index < hover_index and offset < middle:
        return False
    if drag_index > hover_index and offset > middle:
        return False
    return True


class DragReorderController:
    """Turns one drag gesture into discrete move intents."""

    def __init__(self, on_move: Callable | None = None, on_cancel: Callable[[], None] | None = None) -> None:
        self.on_move = on_move
        self.on_cancel = on_cancel
        self.item: DragItem | None = None

    @property
    def active(self) -> bool:
        return self.item is not None

    def begin(self, item_id: str, container_id: str, index: int) -> DragItem:
        self.item = DragItem(item_id, container_id, index)
        return self.item

    def can_move(self, container_id: str) -> bool:
        """Whether the dragged item may enter container_id."""
        return True

    def make_intent(self, item: DragItem, container_id: str, index: int):
        raise NotImplementedError

    def _emit(self, intent) -> None:
        if self.on_move is not None:
            self.on_move(intent)

    def hover(self, container_id: str, hover_index: int, top: float, height: float, pointer_y: float):
        """Pointer is over the item at hover_index in container_id.

        Returns the emitted intent, or None.
        """
        item = self.item
        if item is None:
            return None
        if item.index == hover_index and item.container_id == container_id:
            return None
        if not crosses_midpoint(item.index, hover_index, top, height, pointer_y):
            return None
        if not self.can_move(container_id):
            return None
        intent = self.make_intent(item, container_id, hover_index)
        self._emit(intent)
        item.index = hover_index
        item.container_id = container_id
        return intent

    def drop_on_empty(self, container_id: str, is_empty: bool, handled: bool = False):
        """Release over a container with no items to hover.

        Skipped when a nested target already handled the drop.
        """
        item = self.item
        if item is None or handled or not is_empty or not self.can_move(container_id):
            return None
        intent = self.make_intent(item, container_id, 0)
        self._emit(intent)
        self.end()
        return intent

    def drop(self) -> None:
        """Release over an item; hovers already applied the moves."""
        self.end()

    def cancel(self) -> None:
        """Abandon the gesture without emitting."""
        if self.item is None:
            return
        self.end()
        if self.on_cancel is not None:
            self.on_cancel()

    def end(self) -> None:
        self.item = None


class CardDragController(DragReorderController):
    """Drag controller for board cards. Containers are column ids."""

    def make_intent(self, item: DragItem, container_id: str, index: int) -> MoveCard:
        return MoveCard(item.container_id, container_id, item.index, index)


class NodeDragController(DragReorderController):
    """Drag controller for tree nodes. Containers are parent node ids."""

    def __init__(
        self,
        get_tree: Callable[[], Tree],
        on_move: Callable | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(on_move, on_cancel)
        self._get_tree = get_tree

    def can_move(self, container_id: str) -> bool:
        return self.item is not None and can_drop(self._get_tree(), self.item.item_id, container_id)

    def make_intent(self, item: DragItem, container_id: str, index: int) -> MoveNode:
        return MoveNode(item.item_id, container_id, index)

    def drop_onto(self, target_id: str, handled: bool = False) -> MoveNode | None:
        """Release directly on a node: append the dragged node to its children."""
        item = self.item
        if item is None or handled or not self.can_move(target_id):
            return None
        tree = self._get_tree()
        intent = MoveNode(item.item_id, target_id, len(child_ids(tree, target_id)))
        self._emit(intent)
        self.end()
        return intent


def can_drop(tree: Tree, source_id: str, target_parent_id: str) -> bool:
    """A node may go under any node except itself and its descendants."""
    if source_id == tree.root_id or source_id not in tree or target_parent_id not in tree:
        return False
    return source_id != target_parent_id and not is_descendant(tree, source_id, target_parent_id)

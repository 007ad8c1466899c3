"""Tree screen: an indented outline with lazy expansion and drag re-parenting."""

from __future__ import annotations

from collections.abc import Callable

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Static

from trellis.drag import DragReorderController, NodeDragController
from trellis.editor import TreeEditor
from trellis.errors import Rejected
from trellis.model.tree import Row, Tree, default_tree, find_node_by_id, visible_rows
from trellis.ui.dialogs import ConfirmScreen, PromptScreen
from trellis.ui.drag import DraggableMixin, DragManager, DropTarget


def _marker(row: Row) -> str:
    node = row.node
    if node.is_loading:
        return "…"
    if not node.has_children:
        return "·"
    return "▾" if node.is_expanded else "▸"


class TreeRow(DraggableMixin, DropTarget, Static, can_focus=True):
    """One visible node. Click toggles, drag re-orders, release onto another row nests."""

    DEFAULT_CSS = """
    TreeRow {
        width: 100%;
        height: 1;
    }
    TreeRow:focus {
        background: $primary;
    }
    TreeRow.loading {
        color: $text-muted;
    }
    TreeRow.dragging {
        opacity: 40%;
    }
    """

    BINDINGS = [
        ("enter", "toggle"),
        ("space", "toggle"),
    ]

    def __init__(self, row: Row, focus: bool = False, **kwargs):
        node = row.node
        text = f"{'  ' * row.depth}{_marker(row)} {node.label}"
        super().__init__(text, markup=False, **kwargs)
        self._init_draggable()
        self.row = row
        self.focus_key = node.id
        self.drag_item_id = node.id
        self.drag_label = node.label
        self._want_focus = focus
        self.set_class(node.is_loading, "loading")

    def on_mount(self) -> None:
        if self._want_focus:
            self.focus()

    def draggable_clicked(self) -> None:
        self.focus()
        self.action_toggle()

    def action_toggle(self) -> None:
        self.screen.editor.toggle_expand(self.row.node.id)

    def drag_over(self, controller: DragReorderController, x: int, y: int) -> bool:
        if self.row.parent_id is None:
            return True
        region = self.region
        controller.hover(self.row.parent_id, self.row.index, region.y, region.height, y)
        return True

    def try_drop(self, controller: DragReorderController, handled: bool) -> bool:
        if not isinstance(controller, NodeDragController) or controller.item is None:
            return False
        if controller.item.item_id == self.row.node.id:
            return False
        return controller.drop_onto(self.row.node.id, handled) is not None


class TreeView(VerticalScroll):
    """Rows for one tree snapshot. Rebuilt whenever the snapshot changes."""

    snapshot: reactive[Tree] = reactive(default_tree, recompose=True)

    def __init__(self, tree: Tree, dragging: Callable[[], str | None], **kwargs):
        super().__init__(**kwargs)
        self.set_reactive(TreeView.snapshot, tree)
        self._dragging = dragging
        self.focus_key: str | None = None

    def compose(self) -> ComposeResult:
        dragging = self._dragging()
        for row in visible_rows(self.snapshot):
            yield TreeRow(
                row,
                focus=self.focus_key == row.node.id,
                classes="dragging" if row.node.id == dragging else "",
            )


class TreeScreen(Screen):
    """Lazily loaded tree with node editing and drag re-parenting."""

    CSS = """
    TreeScreen {
        layers: base overlay;
    }
    #rows {
        height: 1fr;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("n", "new_child", "New child"),
        ("r", "rename", "Rename"),
        ("delete", "delete", "Delete"),
    ]

    def __init__(self, editor: TreeEditor):
        super().__init__()
        self.editor = editor
        self.drag = DragManager(self, editor.start_drag)
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield TreeView(self.editor.tree, lambda: self.drag.item_id, id="rows")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.editor.subscribe(self._on_tree_changed)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    def _on_tree_changed(self, tree: Tree) -> None:
        view = self.query_one(TreeView)
        view.focus_key = getattr(self.focused, "focus_key", None)
        view.snapshot = tree

    def _apply(self, fn, *args):
        """Run an editor operation, showing a rejection instead of raising it."""
        try:
            return fn(*args)
        except Rejected as e:
            self.notify(str(e), severity="error")
            return None

    def _focused_id(self) -> str:
        focused = self.focused
        if isinstance(focused, TreeRow):
            return focused.row.node.id
        return self.editor.tree.root_id

    # -- Thin delegation: screen routes mouse events to the drag manager --

    def on_mouse_move(self, event) -> None:
        if self.drag.active:
            self.drag.move(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self.drag.active:
            self.drag.finish(event.screen_x, event.screen_y)

    def action_cancel_drag(self) -> None:
        if self.drag.active:
            self.drag.cancel()

    # -- Editing --

    def action_new_child(self) -> None:
        parent_id = self._focused_id()
        parent = find_node_by_id(self.editor.tree, parent_id)
        if parent.level.is_terminal:
            self.notify(f"Level {parent.level.value} nodes cannot have children", severity="error")
            return

        def done(label: str | None) -> None:
            if label is not None:
                self._apply(self.editor.add_child, parent_id, label)

        self.app.push_screen(PromptScreen(f"New child of '{parent.label}'"), done)

    def action_rename(self) -> None:
        node = find_node_by_id(self.editor.tree, self._focused_id())

        def done(label: str | None) -> None:
            if label is not None:
                self._apply(self.editor.rename_node, node.id, label)

        self.app.push_screen(PromptScreen("Label", node.label), done)

    def action_delete(self) -> None:
        node = find_node_by_id(self.editor.tree, self._focused_id())
        if node.id == self.editor.tree.root_id:
            self.notify("Cannot delete root node", severity="error")
            return

        def done(ok: bool) -> None:
            if ok:
                self._apply(self.editor.remove_node, node.id)

        self.app.push_screen(ConfirmScreen(f"Delete '{node.label}' and everything under it?"), done)

"""Board screen showing kanban columns and cards."""

from __future__ import annotations

from collections.abc import Callable

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Static

from trellis.drag import DragReorderController
from trellis.editor import BoardEditor
from trellis.errors import Rejected
from trellis.model.board import Board, Card, Column, find_card_column, find_column
from trellis.ui.dialogs import ConfirmScreen, PromptScreen
from trellis.ui.drag import DraggableMixin, DragManager, DropTarget


class CardWidget(DraggableMixin, DropTarget, Static, can_focus=True):
    """A single card in a column."""

    DEFAULT_CSS = """
    CardWidget {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    CardWidget:focus {
        background: $primary;
    }
    CardWidget.dragging {
        opacity: 40%;
    }
    """

    def __init__(self, card: Card, index: int, focus: bool = False, **kwargs):
        super().__init__(card.title, markup=False, **kwargs)
        self._init_draggable()
        self.card = card
        self.index = index
        self.focus_key = card.id
        self.drag_item_id = card.id
        self.drag_label = card.title
        self._want_focus = focus

    def on_mount(self) -> None:
        if self._want_focus:
            self.focus()

    def draggable_clicked(self) -> None:
        self.focus()

    def drag_over(self, controller: DragReorderController, x: int, y: int) -> bool:
        region = self.region
        controller.hover(self.card.column_id, self.index, region.y, region.height, y)
        return True


class ColumnHeader(Static, can_focus=True):
    """Column title; focus it to act on the column itself."""

    DEFAULT_CSS = """
    ColumnHeader {
        width: 100%;
        text-style: bold;
        padding: 0 1;
        margin-bottom: 1;
    }
    ColumnHeader:focus {
        background: $primary;
    }
    """

    def __init__(self, column: Column, focus: bool = False):
        super().__init__(f"{column.title} ({len(column.cards)})", markup=False)
        self.column_id = column.id
        self.focus_key = f"column:{column.id}"
        self._want_focus = focus

    def on_mount(self) -> None:
        if self._want_focus:
            self.focus()


class ColumnWidget(DropTarget, Vertical):
    """A vertical column of cards. Accepts drops when it has no cards."""

    DEFAULT_CSS = """
    ColumnWidget {
        width: 1fr;
        min-width: 25;
        height: 100%;
        padding: 0 1;
        border-top: heavy $secondary;
    }
    """

    def __init__(self, column: Column, focus_key: str | None = None, dragging: str | None = None):
        super().__init__()
        self.column = column
        self._focus_key = focus_key
        self._dragging = dragging
        self.styles.border_top = ("heavy", column.color)

    def compose(self) -> ComposeResult:
        yield ColumnHeader(self.column, focus=self._focus_key == f"column:{self.column.id}")
        for i, card in enumerate(self.column.cards):
            yield CardWidget(
                card,
                i,
                focus=self._focus_key == card.id,
                classes="dragging" if card.id == self._dragging else "",
            )

    def try_drop(self, controller: DragReorderController, handled: bool) -> bool:
        return controller.drop_on_empty(self.column.id, not self.column.cards, handled) is not None


class BoardView(Horizontal):
    """Columns for one board snapshot. Rebuilt whenever the snapshot changes."""

    snapshot: reactive[Board] = reactive((), recompose=True)

    def __init__(self, board: Board, dragging: Callable[[], str | None], **kwargs):
        super().__init__(**kwargs)
        self.set_reactive(BoardView.snapshot, board)
        self._dragging = dragging
        self.focus_key: str | None = None

    def compose(self) -> ComposeResult:
        for column in self.snapshot:
            yield ColumnWidget(column, self.focus_key, self._dragging())


class BoardScreen(Screen):
    """Board of columns with card editing and drag reordering."""

    CSS = """
    BoardScreen {
        layers: base overlay;
    }
    #columns {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("n", "new_card", "New card"),
        ("c", "new_column", "New column"),
        ("r", "rename", "Rename"),
        ("delete", "delete", "Delete"),
        Binding("shift+left", "move_card(-1, 0)", "Move left", show=False),
        Binding("shift+right", "move_card(1, 0)", "Move right", show=False),
        Binding("shift+up", "move_card(0, -1)", "Move up", show=False),
        Binding("shift+down", "move_card(0, 1)", "Move down", show=False),
    ]

    def __init__(self, editor: BoardEditor):
        super().__init__()
        self.editor = editor
        self.drag = DragManager(self, editor.start_drag)
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield BoardView(self.editor.board, lambda: self.drag.item_id, id="columns")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.editor.subscribe(self._on_board_changed)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    def _on_board_changed(self, board: Board) -> None:
        view = self.query_one(BoardView)
        view.focus_key = getattr(self.focused, "focus_key", None)
        view.snapshot = board

    def _apply(self, fn, *args):
        """Run an editor operation, showing a rejection instead of raising it."""
        try:
            return fn(*args)
        except Rejected as e:
            self.notify(str(e), severity="error")
            return None

    def _focused_card(self) -> CardWidget | None:
        return self.focused if isinstance(self.focused, CardWidget) else None

    def _focused_column_id(self) -> str | None:
        focused = self.focused
        if isinstance(focused, CardWidget):
            return focused.card.column_id
        if isinstance(focused, ColumnHeader):
            return focused.column_id
        return self.editor.board[0].id if self.editor.board else None

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

    def action_new_card(self) -> None:
        column_id = self._focused_column_id()
        if column_id is None:
            return

        def done(title: str | None) -> None:
            if title is not None:
                self._apply(self.editor.add_card, column_id, title)

        self.app.push_screen(PromptScreen("New card title"), done)

    def action_new_column(self) -> None:
        def done(title: str | None) -> None:
            if title is not None:
                self._apply(self.editor.add_column, title)

        self.app.push_screen(PromptScreen("New column title"), done)

    def action_rename(self) -> None:
        focused = self.focused
        if isinstance(focused, CardWidget):
            card_id = focused.card.id

            def done(title: str | None) -> None:
                if title is not None:
                    self._apply(self.editor.rename_card, card_id, title)

            self.app.push_screen(PromptScreen("Card title", focused.card.title), done)
        elif isinstance(focused, ColumnHeader):
            column = find_column(self.editor.board, focused.column_id)

            def done(title: str | None) -> None:
                if title is not None:
                    self._apply(self.editor.rename_column, column.id, title)

            self.app.push_screen(PromptScreen("Column title", column.title), done)

    def action_delete(self) -> None:
        focused = self.focused
        if isinstance(focused, CardWidget):
            card_id = focused.card.id

            def done(ok: bool) -> None:
                if ok:
                    self.editor.delete_card(card_id)

            self.app.push_screen(ConfirmScreen(f"Delete card '{focused.card.title}'?"), done)
        elif isinstance(focused, ColumnHeader):
            column = find_column(self.editor.board, focused.column_id)
            if column.id in self.editor.settings.reserved_columns:
                self.notify(f"Column '{column.title}' cannot be deleted", severity="error")
                return

            def done(ok: bool) -> None:
                if ok:
                    self._apply(self.editor.delete_column, column.id)

            self.app.push_screen(
                ConfirmScreen(f"Delete column '{column.title}' and its {len(column.cards)} cards?"), done
            )

    def action_move_card(self, dx: int, dy: int) -> None:
        """Keyboard move: sideways keeps the position, up/down swaps with a neighbour."""
        widget = self._focused_card()
        if widget is None:
            return
        board = self.editor.board
        source = find_card_column(board, widget.card.id)
        columns = [c.id for c in board]
        target_pos = columns.index(source.id) + dx
        if not 0 <= target_pos < len(columns):
            return
        dest_index = widget.index + dy
        if dx == 0 and not 0 <= dest_index < len(source.cards):
            return
        self._apply(self.editor.move_card, source.id, columns[target_pos], widget.index, dest_index)

"""Main Textual application for trellis."""

import logging

from textual.app import App

from trellis import storage
from trellis.config import Settings
from trellis.editor import BoardEditor, TreeEditor
from trellis.errors import InvalidDocument
from trellis.fetch import Fetch
from trellis.ui.board import BoardScreen
from trellis.ui.tree import TreeScreen

logger = logging.getLogger(__name__)


class TrellisApp(App):
    """Kanban board and lazy tree editor TUI."""

    TITLE = "trellis"
    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
        ("f1", "show_board", "Board"),
        ("f2", "show_tree", "Tree"),
    ]

    def __init__(self, settings: Settings | None = None, fetch: Fetch | None = None, persist: bool = True):
        super().__init__()
        self.settings = settings or Settings()
        self.persist = persist
        self.board_editor = BoardEditor(settings=self.settings)
        self.tree_editor = TreeEditor(fetch=fetch, settings=self.settings, on_error=self._on_fetch_error)

    def on_mount(self) -> None:
        if self.persist:
            self._load(storage.load_board, self.board_editor, "board")
            self._load(storage.load_tree, self.tree_editor, "tree")
        self.install_screen(BoardScreen(self.board_editor), name="board")
        self.install_screen(TreeScreen(self.tree_editor), name="tree")
        self.push_screen("board")

    def _load(self, load, editor, what: str) -> None:
        try:
            load(editor)
        except InvalidDocument as e:
            logger.warning("could not load %s: %s", what, e)
            self.notify(f"Could not load {what}: {e}", severity="error")

    def _on_fetch_error(self, node_id: str, exc: BaseException) -> None:
        self.notify(f"Failed to load children of '{node_id}'", severity="error")

    def action_show_board(self) -> None:
        self.switch_screen("board")

    def action_show_tree(self) -> None:
        self.switch_screen("tree")

    def action_save(self) -> None:
        if self.persist:
            storage.save_board(self.board_editor)
            storage.save_tree(self.tree_editor)
            self.notify("Saved")

    def action_quit(self) -> None:
        """Cancel fetches, save and quit."""
        self.tree_editor.expander.cancel_all()
        if self.persist:
            storage.save_board(self.board_editor)
            storage.save_tree(self.tree_editor)
        self.exit()

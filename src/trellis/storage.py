"""Reading and writing the board and tree documents on disk."""

import logging
from pathlib import Path

from trellis.editor import BoardEditor, TreeEditor

logger = logging.getLogger(__name__)


def load_board(editor: BoardEditor) -> bool:
    """Import the settings' board file if present. Raises InvalidDocument."""
    path = Path(editor.settings.board_file)
    if not path.exists():
        logger.debug("no board file at %s, using defaults", path)
        return False
    editor.import_json(path.read_text())
    return True


def load_tree(editor: TreeEditor) -> bool:
    """Import the settings' tree file if present. Raises InvalidDocument."""
    path = Path(editor.settings.tree_file)
    if not path.exists():
        logger.debug("no tree file at %s, using defaults", path)
        return False
    editor.import_json(path.read_text())
    return True


def save_board(editor: BoardEditor) -> None:
    Path(editor.settings.board_file).write_text(editor.export_json() + "\n")


def save_tree(editor: TreeEditor) -> None:
    Path(editor.settings.tree_file).write_text(editor.export_json() + "\n")

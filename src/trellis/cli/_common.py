"""Shared helpers for CLI command handlers."""

import json
import sys
from contextlib import contextmanager
from pathlib import Path

from trellis import storage
from trellis.config import Settings
from trellis.editor import BoardEditor, TreeEditor
from trellis.errors import TrellisError
from trellis.storage import save_board, save_tree


def load_board_or_die(args) -> BoardEditor:
    """Load the board file into an editor. A missing file gives the default board."""
    settings = Settings.from_args(args)
    editor = BoardEditor(settings=settings)
    with guarded(args.json):
        storage.load_board(editor)
    return editor


def load_tree_or_die(args) -> TreeEditor:
    """Load the tree file into an editor. A missing file gives the default tree."""
    settings = Settings.from_args(args)
    editor = TreeEditor(settings=settings)
    with guarded(args.json):
        storage.load_tree(editor)
    return editor


def read_document(source: str) -> str:
    """Read an import document from a path, or stdin for '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text()


@contextmanager
def guarded(json_mode: bool):
    """Turn TrellisError into an error exit."""
    try:
        yield
    except TrellisError as e:
        error(str(e), json_mode)


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)

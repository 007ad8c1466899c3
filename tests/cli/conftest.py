"""Shared fixtures for CLI tests."""

import json
from argparse import Namespace

import pytest


@pytest.fixture
def make_args(tmp_path):
    """Build handler args pointing at documents under tmp_path."""

    def make(**kwargs):
        defaults = {
            "json": False,
            "verbose": False,
            "board_file": str(tmp_path / "board.json"),
            "tree_file": str(tmp_path / "tree.json"),
            "fetch_timeout": 5.0,
            "fetch_delay": 0.0,
        }
        defaults.update(kwargs)
        return Namespace(**defaults)

    return make


@pytest.fixture
def board_file(tmp_path):
    """A board document: todo has two cards, review is a custom column."""
    path = tmp_path / "board.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "todo",
                    "title": "To Do",
                    "color": "blue",
                    "cards": [
                        {"id": "card-1", "title": "First card", "columnId": "todo"},
                        {"id": "card-2", "title": "Second card", "columnId": "todo"},
                    ],
                },
                {"id": "in-progress", "title": "In Progress", "color": "orange", "cards": []},
                {"id": "done", "title": "Done", "color": "green", "cards": []},
                {"id": "review", "title": "Review", "color": "gray", "cards": []},
            ]
        )
    )
    return path


@pytest.fixture
def tree_file(tmp_path):
    """A tree document: root -> [root-1 -> [root-1-1], root-2 (not loaded)]."""
    path = tmp_path / "tree.json"
    path.write_text(
        json.dumps(
            {
                "id": "root",
                "label": "Level A",
                "level": "A",
                "isExpanded": True,
                "hasChildren": True,
                "children": [
                    {
                        "id": "root-1",
                        "label": "Alpha",
                        "level": "B",
                        "isExpanded": True,
                        "hasChildren": True,
                        "children": [{"id": "root-1-1", "label": "Alpha child", "level": "C", "hasChildren": True}],
                    },
                    {"id": "root-2", "label": "Beta", "level": "B", "hasChildren": True},
                ],
            }
        )
    )
    return path

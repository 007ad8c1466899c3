"""Shared fixtures for model tests."""

import pytest

from trellis.model.board import Card, Column
from trellis.model.tree import ROOT_ID, Level, Tree, TreeNode


@pytest.fixture
def board():
    """todo=[c1 "A", c2 "B"], in-progress=[c3 "C"], done=[]."""
    return (
        Column("todo", "To Do", (Card("c1", "A", "todo"), Card("c2", "B", "todo")), "blue"),
        Column("in-progress", "In Progress", (Card("c3", "C", "in-progress"),), "orange"),
        Column("done", "Done", (), "green"),
    )


@pytest.fixture
def tree():
    """root(A) -> [x(B) -> [x1(C), x2(C)], y(B)], y's children not loaded."""
    return Tree.build(
        TreeNode(ROOT_ID, "Level A", Level.A, is_expanded=True, has_children=True),
        {
            ROOT_ID: [
                TreeNode("x", "X", Level.B, is_expanded=True, has_children=True),
                TreeNode("y", "Y", Level.B, has_children=True),
            ],
            "x": [
                TreeNode("x1", "X1", Level.C, has_children=True),
                TreeNode("x2", "X2", Level.C, has_children=True),
            ],
        },
    )

"""Tests for the Textual app and its screens."""

import pytest

from trellis.model.board import card_ids, find_column
from trellis.model.tree import ROOT_ID, Level, TreeNode, child_ids
from trellis.ui import TrellisApp
from trellis.ui.board import BoardScreen, CardWidget, ColumnHeader, ColumnWidget
from trellis.ui.dialogs import ConfirmScreen, PromptScreen
from trellis.ui.tree import TreeRow, TreeScreen


async def _two_children(node_id, level):
    return [
        TreeNode(f"{node_id}-0", "Level B", Level.B, has_children=True),
        TreeNode(f"{node_id}-1", "Level B", Level.B, has_children=True),
    ]


async def _failing(node_id, level):
    raise ConnectionError("offline")


def _app(fetch=_two_children):
    return TrellisApp(fetch=fetch, persist=False)


@pytest.mark.asyncio
async def test_starts_on_board():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.screen, BoardScreen)
        assert len(app.screen.query(ColumnWidget)) == 3


@pytest.mark.asyncio
async def test_new_card_prompt():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("n")
        await pilot.pause()
        assert isinstance(app.screen, PromptScreen)
        await pilot.press(*"Write docs")
        await pilot.press("enter")
        await pilot.pause()

        todo = find_column(app.board_editor.board, "todo")
        assert [c.title for c in todo.cards] == ["Write docs"]
        await pilot.pause()
        assert len(app.screen.query(CardWidget)) == 1


@pytest.mark.asyncio
async def test_prompt_escape_adds_nothing():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("n")
        await pilot.pause()
        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.screen, BoardScreen)
        assert card_ids(app.board_editor.board) == []


@pytest.mark.asyncio
async def test_reserved_column_not_deleted():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.pause()
        app.screen.query(ColumnHeader).first().focus()
        await pilot.press("delete")
        await pilot.pause()
        assert isinstance(app.screen, BoardScreen)
        assert [c.id for c in app.board_editor.board] == ["todo", "in-progress", "done"]


@pytest.mark.asyncio
async def test_delete_card_confirm():
    app = _app()
    app.board_editor.add_card("todo", "Doomed")
    async with app.run_test() as pilot:
        await pilot.pause()
        app.screen.query_one(CardWidget).focus()
        await pilot.press("delete")
        await pilot.pause()
        assert isinstance(app.screen, ConfirmScreen)
        await pilot.click("#yes")
        await pilot.pause()
        assert card_ids(app.board_editor.board) == []


@pytest.mark.asyncio
async def test_keyboard_move_card():
    app = _app()
    app.board_editor.add_card("todo", "Mover")
    async with app.run_test() as pilot:
        await pilot.pause()
        app.screen.query_one(CardWidget).focus()
        await pilot.press("shift+right")
        await pilot.pause()
        assert [c.title for c in find_column(app.board_editor.board, "in-progress").cards] == ["Mover"]


@pytest.mark.asyncio
async def test_tree_expand_loads_children():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.press("f2")
        await pilot.pause()
        assert isinstance(app.screen, TreeScreen)
        app.screen.query_one(TreeRow).focus()
        await pilot.press("enter")
        await app.tree_editor.expander.wait()
        await pilot.pause()

        assert app.tree_editor.tree.root.is_expanded
        assert child_ids(app.tree_editor.tree, ROOT_ID) == ("root-0", "root-1")
        await pilot.pause()
        assert len(app.screen.query(TreeRow)) == 3


@pytest.mark.asyncio
async def test_tree_fetch_failure_recovers():
    app = _app(fetch=_failing)
    async with app.run_test() as pilot:
        await pilot.press("f2")
        await pilot.pause()
        app.screen.query_one(TreeRow).focus()
        await pilot.press("enter")
        await app.tree_editor.expander.wait()
        await pilot.pause()

        root = app.tree_editor.tree.root
        assert not root.is_loading
        assert not root.is_expanded


@pytest.mark.asyncio
async def test_tree_root_not_deleted():
    app = _app()
    async with app.run_test() as pilot:
        await pilot.press("f2")
        await pilot.pause()
        await pilot.press("delete")
        await pilot.pause()
        assert isinstance(app.screen, TreeScreen)
        assert ROOT_ID in app.tree_editor.tree

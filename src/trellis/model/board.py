"""Board snapshots and card/column mutation operations.

A board is an ordered tuple of columns, each holding an ordered tuple of
cards. Every operation returns a new board and leaves its input intact.
Unknown ids are no-ops: the input board is returned as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from trellis.ids import new_id
from trellis.model.seq import insert_at, remove_at, remove_where, replace_where

RESERVED_COLUMNS = ("todo", "in-progress", "done")


@dataclass(frozen=True)
class Card:
    """A card. ``column_id`` mirrors the column that holds it."""

    id: str
    title: str
    column_id: str


@dataclass(frozen=True)
class Column:
    """A column of cards."""

    id: str
    title: str
    cards: tuple[Card, ...] = field(default_factory=tuple)
    color: str = "gray"


Board = tuple[Column, ...]


def default_board() -> Board:
    """The three reserved columns, empty."""
    return (
        Column("todo", "To Do", color="blue"),
        Column("in-progress", "In Progress", color="orange"),
        Column("done", "Done", color="green"),
    )


def find_column(board: Board, column_id: str) -> Column | None:
    """Find a column by id."""
    for col in board:
        if col.id == column_id:
            return col
    return None


def find_card_column(board: Board, card_id: str) -> Column | None:
    """Find the column containing a card."""
    for col in board:
        if any(card.id == card_id for card in col.cards):
            return col
    return None


def find_card(board: Board, card_id: str) -> Card | None:
    """Find a card by id anywhere on the board."""
    for col in board:
        for card in col.cards:
            if card.id == card_id:
                return card
    return None


def card_ids(board: Board) -> list[str]:
    """All card ids, in column then card order."""
    return [card.id for col in board for card in col.cards]


def card_count(board: Board) -> int:
    return sum(len(col.cards) for col in board)


def _with_column(board: Board, column: Column) -> Board:
    return replace_where(board, lambda c: c.id == column.id, lambda c: column)


def move_card(
    board: Board,
    source_column_id: str,
    dest_column_id: str,
    source_index: int,
    dest_index: int,
) -> Board:
    """Move the card at source_index into dest column at dest_index.

    source_index must be valid for the source column. dest_index is
    clamped to the destination length after removal. Same-column moves
    are handled as one removal and one insertion on the same sequence.
    """
    source = find_column(board, source_column_id)
    dest = find_column(board, dest_column_id)
    if source is None or dest is None:
        return board

    remaining, card = remove_at(source.cards, source_index)
    card = replace(card, column_id=dest.id)

    if source.id == dest.id:
        return _with_column(board, replace(source, cards=insert_at(remaining, dest_index, card)))

    board = _with_column(board, replace(source, cards=remaining))
    return _with_column(board, replace(dest, cards=insert_at(dest.cards, dest_index, card)))


def add_card(board: Board, column_id: str, title: str, card_id: str | None = None) -> Board:
    """Append a new card to a column.

    Blank titles and unknown columns are no-ops. The title is stored as
    given; trimming is up to the caller.
    """
    column = find_column(board, column_id)
    if column is None or not title.strip():
        return board
    if card_id is None:
        card_id = new_id("card", card_ids(board))
    card = Card(id=card_id, title=title, column_id=column.id)
    return _with_column(board, replace(column, cards=column.cards + (card,)))


def delete_card(board: Board, card_id: str) -> Board:
    """Remove a card from whichever column holds it."""
    column = find_card_column(board, card_id)
    if column is None:
        return board
    return _with_column(board, replace(column, cards=remove_where(column.cards, lambda c: c.id == card_id)))


def rename_card(board: Board, card_id: str, new_title: str) -> Board:
    """Replace a card's title. Unchanged titles return the same board."""
    card = find_card(board, card_id)
    if card is None or card.title == new_title:
        return board
    column = find_card_column(board, card_id)
    cards = replace_where(column.cards, lambda c: c.id == card_id, lambda c: replace(c, title=new_title))
    return _with_column(board, replace(column, cards=cards))


def add_column(board: Board, title: str, column_id: str | None = None, color: str = "gray") -> Board:
    """Append a new empty column."""
    if column_id is None:
        column_id = new_id("column", [c.id for c in board])
    return board + (Column(id=column_id, title=title, color=color),)


def delete_column(board: Board, column_id: str) -> Board:
    """Remove a column and its cards. Reserved ids are not checked here."""
    if find_column(board, column_id) is None:
        return board
    return remove_where(board, lambda c: c.id == column_id)


def rename_column(board: Board, column_id: str, new_title: str) -> Board:
    """Replace a column's title."""
    column = find_column(board, column_id)
    if column is None or column.title == new_title:
        return board
    return _with_column(board, replace(column, title=new_title))

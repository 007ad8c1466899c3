"""Handlers for 'trellis board' commands."""

import sys

from trellis.cli._common import (
    error,
    guarded,
    load_board_or_die,
    output_json,
    output_result,
    read_document,
    save_board,
)
from trellis.model.board import card_count, find_card, find_card_column, find_column
from trellis.model.serialize import board_to_data


def board_show(args) -> int:
    """List columns and their cards."""
    editor = load_board_or_die(args)
    board = editor.board

    if args.json:
        output_json(board_to_data(board))
        return 0

    print(f"{card_count(board)} total cards across {len(board)} columns")
    for col in board:
        cards = "card" if len(col.cards) == 1 else "cards"
        print(f"{col.id}  {col.title:<16} {len(col.cards)} {cards}")
        for card in col.cards:
            print(f"  {card.id}  {card.title}")
    return 0


def board_export(args) -> int:
    """Write the board document to stdout or --output."""
    editor = load_board_or_die(args)
    text = editor.export_json()
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        print(f"Exported board to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def board_import(args) -> int:
    """Replace the board with a document read from a file or stdin."""
    editor = load_board_or_die(args)
    try:
        text = read_document(args.source)
    except OSError as e:
        error(str(e), args.json)
    with guarded(args.json):
        editor.import_json(text)
    save_board(editor)
    output_result(
        {"columns": len(editor.board), "cards": card_count(editor.board)},
        f"Imported {len(editor.board)} columns, {card_count(editor.board)} cards",
        args.json,
    )
    return 0


def board_reset(args) -> int:
    """Restore the three default columns."""
    editor = load_board_or_die(args)
    editor.reset()
    save_board(editor)
    output_result({"columns": len(editor.board)}, "Board reset", args.json)
    return 0


def card_add(args) -> int:
    """Append a card to a column."""
    editor = load_board_or_die(args)
    column = find_column(editor.board, args.column)
    if column is None:
        error(f"Column '{args.column}' not found.", args.json)
    with guarded(args.json):
        card_id = editor.add_card(column.id, args.title)
    save_board(editor)
    output_result(
        {"id": card_id, "title": args.title.strip(), "column": column.id},
        f"Created card {card_id} in {column.title}",
        args.json,
    )
    return 0


def card_delete(args) -> int:
    editor = load_board_or_die(args)
    if find_card(editor.board, args.id) is None:
        error(f"Card '{args.id}' not found.", args.json)
    editor.delete_card(args.id)
    save_board(editor)
    output_result({"id": args.id}, f"Deleted card {args.id}", args.json)
    return 0


def card_rename(args) -> int:
    editor = load_board_or_die(args)
    if find_card(editor.board, args.id) is None:
        error(f"Card '{args.id}' not found.", args.json)
    with guarded(args.json):
        editor.rename_card(args.id, args.title)
    save_board(editor)
    title = find_card(editor.board, args.id).title
    output_result({"id": args.id, "title": title}, f"Renamed card {args.id} to {title}", args.json)
    return 0


def card_move(args) -> int:
    """Move a card to a column, at a 1-indexed position or the end."""
    editor = load_board_or_die(args)
    source = find_card_column(editor.board, args.id)
    if source is None:
        error(f"Card '{args.id}' not found.", args.json)
    target = find_column(editor.board, args.column)
    if target is None:
        error(f"Column '{args.column}' not found.", args.json)

    source_index = next(i for i, c in enumerate(source.cards) if c.id == args.id)
    dest_index = args.position - 1 if args.position is not None else len(target.cards)

    with guarded(args.json):
        editor.move_card(source.id, target.id, source_index, dest_index)
    save_board(editor)
    output_result(
        {"id": args.id, "column": target.id},
        f"Moved card {args.id} to {target.title}",
        args.json,
    )
    return 0


def column_add(args) -> int:
    editor = load_board_or_die(args)
    with guarded(args.json):
        column_id = editor.add_column(args.title)
    save_board(editor)
    output_result({"id": column_id, "title": args.title.strip()}, f"Created column {column_id}", args.json)
    return 0


def column_delete(args) -> int:
    """Delete a column and every card in it."""
    editor = load_board_or_die(args)
    column = find_column(editor.board, args.id)
    if column is None:
        error(f"Column '{args.id}' not found.", args.json)
    with guarded(args.json):
        editor.delete_column(args.id)
    save_board(editor)
    output_result(
        {"id": args.id, "cards": len(column.cards)},
        f"Deleted column {args.id} ({len(column.cards)} cards lost)",
        args.json,
    )
    return 0


def column_rename(args) -> int:
    editor = load_board_or_die(args)
    if find_column(editor.board, args.id) is None:
        error(f"Column '{args.id}' not found.", args.json)
    with guarded(args.json):
        editor.rename_column(args.id, args.title)
    save_board(editor)
    title = find_column(editor.board, args.id).title
    output_result({"id": args.id, "title": title}, f"Renamed column {args.id} to {title}", args.json)
    return 0

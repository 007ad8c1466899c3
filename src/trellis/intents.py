"""Edit intents accepted by the board and tree editors."""

from __future__ import annotations

from dataclasses import dataclass

# --- Board ---


@dataclass(frozen=True)
class AddCard:
    column_id: str
    title: str


@dataclass(frozen=True)
class DeleteCard:
    card_id: str


@dataclass(frozen=True)
class RenameCard:
    card_id: str
    title: str


@dataclass(frozen=True)
class MoveCard:
    source_column_id: str
    dest_column_id: str
    source_index: int
    dest_index: int


@dataclass(frozen=True)
class AddColumn:
    title: str


@dataclass(frozen=True)
class DeleteColumn:
    column_id: str


@dataclass(frozen=True)
class RenameColumn:
    column_id: str
    title: str


# --- Tree ---


@dataclass(frozen=True)
class ToggleExpand:
    node_id: str


@dataclass(frozen=True)
class AddChild:
    parent_id: str
    label: str


@dataclass(frozen=True)
class RemoveNode:
    node_id: str


@dataclass(frozen=True)
class RenameNode:
    node_id: str
    label: str


@dataclass(frozen=True)
class MoveNode:
    source_id: str
    target_parent_id: str
    target_index: int


BoardIntent = AddCard | DeleteCard | RenameCard | MoveCard | AddColumn | DeleteColumn | RenameColumn
TreeIntent = ToggleExpand | AddChild | RemoveNode | RenameNode | MoveNode

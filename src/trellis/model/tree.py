"""Tree snapshots and node mutation operations.

A Tree is an immutable arena: node payloads, a children adjacency map
and a parent map, all keyed by node id. Operations copy only the maps
they touch and hand back a new Tree, so older snapshots stay valid and
untouched payloads are shared between snapshots.

A node id missing from the adjacency map has children that have not been
materialized yet; an empty tuple means it has none.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from trellis.ids import unique_id
from trellis.model.seq import insert_at

ROOT_ID = "root"


class Level(str, Enum):
    """Generation tag of a node. A child is one step after its parent."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"

    def next(self) -> Level | None:
        """The level after this one, or None at G."""
        members = list(Level)
        idx = members.index(self)
        return members[idx + 1] if idx + 1 < len(members) else None

    @property
    def is_terminal(self) -> bool:
        return self is Level.G


@dataclass(frozen=True)
class TreeNode:
    """Node payload. Children are held by the Tree, not the node."""

    id: str
    label: str
    level: Level
    is_expanded: bool = False
    is_loading: bool = False
    has_children: bool = False


class Row(NamedTuple):
    """A node as it appears in a flattened, expanded view."""

    node: TreeNode
    depth: int
    parent_id: str | None
    index: int


class Tree:
    """Immutable snapshot of a whole tree."""

    __slots__ = ("root_id", "version", "_nodes", "_children", "_parents")

    def __init__(
        self,
        root_id: str,
        nodes: Mapping[str, TreeNode],
        children: Mapping[str, tuple[str, ...]],
        parents: Mapping[str, str],
        version: int = 0,
    ) -> None:
        self.root_id = root_id
        self.version = version
        self._nodes = MappingProxyType(dict(nodes))
        self._children = MappingProxyType(dict(children))
        self._parents = MappingProxyType(dict(parents))

    @classmethod
    def build(cls, root: TreeNode, children: Mapping[str, Sequence[TreeNode]] | None = None) -> Tree:
        """Build a tree from a root payload and a parent-id → children map.

        Keys absent from ``children`` are left unmaterialized.
        """
        nodes = {root.id: root}
        adjacency: dict[str, tuple[str, ...]] = {}
        parents: dict[str, str] = {}
        for parent_id, kids in (children or {}).items():
            adjacency[parent_id] = tuple(kid.id for kid in kids)
            for kid in kids:
                nodes[kid.id] = kid
                parents[kid.id] = parent_id
        return cls(root.id, nodes, adjacency, parents)

    def _derive(
        self,
        nodes: Mapping[str, TreeNode] | None = None,
        children: Mapping[str, tuple[str, ...]] | None = None,
        parents: Mapping[str, str] | None = None,
    ) -> Tree:
        return Tree(
            self.root_id,
            self._nodes if nodes is None else nodes,
            self._children if children is None else children,
            self._parents if parents is None else parents,
            self.version + 1,
        )

    @property
    def root(self) -> TreeNode:
        return self._nodes[self.root_id]

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return (
            self.root_id == other.root_id
            and dict(self._nodes) == dict(other._nodes)
            and dict(self._children) == dict(other._children)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Tree root={self.root_id} nodes={len(self._nodes)} v{self.version}>"


def default_tree() -> Tree:
    """A single expandable root with no children loaded."""
    return Tree.build(TreeNode(ROOT_ID, "Level A", Level.A, has_children=True), {ROOT_ID: ()})


def make_child(parent: TreeNode, node_id: str, label: str) -> TreeNode:
    """Build a payload one level below parent.

    Raises ValueError when parent is already at the terminal level.
    """
    level = parent.level.next()
    if level is None:
        raise ValueError(f"level {parent.level.value} cannot have children")
    return TreeNode(node_id, label, level, has_children=not level.is_terminal)


# --- Queries ---


def find_node_by_id(tree: Tree, node_id: str) -> TreeNode | None:
    return tree._nodes.get(node_id)


def find_parent_node(tree: Tree, node_id: str) -> TreeNode | None:
    """Direct parent of node_id, or None for the root and unknown ids."""
    parent_id = tree._parents.get(node_id)
    return tree._nodes[parent_id] if parent_id is not None else None


def node_ids(tree: Tree) -> list[str]:
    return list(tree._nodes)


def is_materialized(tree: Tree, node_id: str) -> bool:
    """Whether node_id's children have been loaded or set."""
    return node_id in tree._children


def child_ids(tree: Tree, node_id: str) -> tuple[str, ...]:
    return tree._children.get(node_id, ())


def children_of(tree: Tree, node_id: str) -> tuple[TreeNode, ...] | None:
    """Children payloads in order, or None if not materialized."""
    ids = tree._children.get(node_id)
    if ids is None:
        return None
    return tuple(tree._nodes[i] for i in ids)


def ancestors(tree: Tree, node_id: str) -> list[str]:
    """Ids from the direct parent up to the root."""
    chain = []
    current = tree._parents.get(node_id)
    while current is not None and current not in chain:
        chain.append(current)
        current = tree._parents.get(current)
    return chain


def is_descendant(tree: Tree, ancestor_id: str, node_id: str) -> bool:
    """True if ancestor_id is a proper ancestor of node_id."""
    return ancestor_id in ancestors(tree, node_id)


def subtree_ids(tree: Tree, node_id: str) -> list[str]:
    """node_id and every id below it, depth-first."""
    found = []
    stack = [node_id]
    while stack:
        current = stack.pop()
        found.append(current)
        stack.extend(reversed(child_ids(tree, current)))
    return found


def iter_nodes(tree: Tree) -> Iterator[TreeNode]:
    """Every node, depth-first pre-order from the root."""
    for node_id in subtree_ids(tree, tree.root_id):
        yield tree._nodes[node_id]


def node_count(tree: Tree) -> int:
    return len(tree)


def visible_rows(tree: Tree) -> list[Row]:
    """Flatten the tree through expanded nodes only."""
    rows = []

    def visit(node_id: str, depth: int, parent_id: str | None, index: int) -> None:
        node = tree._nodes[node_id]
        rows.append(Row(node, depth, parent_id, index))
        if node.is_expanded:
            for i, kid in enumerate(child_ids(tree, node_id)):
                visit(kid, depth + 1, node_id, i)

    visit(tree.root_id, 0, None, 0)
    return rows


# --- Mutations ---


def update_node(tree: Tree, node_id: str, **fields) -> Tree:
    """Merge payload fields into a node."""
    node = tree._nodes.get(node_id)
    if node is None:
        return tree
    updated = replace(node, **fields)
    if updated == node:
        return tree
    nodes = dict(tree._nodes)
    nodes[node_id] = updated
    return tree._derive(nodes=nodes)


def add_child_node(tree: Tree, parent_id: str, new_node: TreeNode) -> Tree:
    """Append new_node under parent_id and expand the parent.

    Unknown parents and ids already in the tree are no-ops.
    """
    parent = tree._nodes.get(parent_id)
    if parent is None or new_node.id in tree._nodes:
        return tree
    nodes = dict(tree._nodes)
    children = dict(tree._children)
    parents = dict(tree._parents)
    nodes[new_node.id] = new_node
    nodes[parent_id] = replace(parent, is_expanded=True)
    children[parent_id] = child_ids(tree, parent_id) + (new_node.id,)
    parents[new_node.id] = parent_id
    return tree._derive(nodes, children, parents)


def remove_node(tree: Tree, target_id: str) -> Tree:
    """Remove a node and its whole subtree. The root is never removed."""
    if target_id == tree.root_id or target_id not in tree._nodes:
        return tree
    doomed = subtree_ids(tree, target_id)
    parent_id = tree._parents[target_id]
    nodes = dict(tree._nodes)
    children = dict(tree._children)
    parents = dict(tree._parents)
    for node_id in doomed:
        del nodes[node_id]
        children.pop(node_id, None)
        parents.pop(node_id, None)
    children[parent_id] = tuple(i for i in children[parent_id] if i != target_id)
    return tree._derive(nodes, children, parents)


def move_node(tree: Tree, source_id: str, target_parent_id: str, target_index: int) -> Tree:
    """Relocate the subtree at source_id under target_parent_id.

    target_index refers to the target's children after the source has
    been detached, and is clamped to [0, len]. Moving the root, moving
    a node under itself or one of its descendants, or naming an unknown
    node leaves the tree unchanged.
    """
    if source_id == tree.root_id or source_id not in tree._nodes:
        return tree
    target = tree._nodes.get(target_parent_id)
    if target is None or target_parent_id == source_id or is_descendant(tree, source_id, target_parent_id):
        return tree

    old_parent_id = tree._parents[source_id]
    children = dict(tree._children)
    children[old_parent_id] = tuple(i for i in children[old_parent_id] if i != source_id)
    children[target_parent_id] = insert_at(children.get(target_parent_id, ()), target_index, source_id)

    parents = dict(tree._parents)
    parents[source_id] = target_parent_id

    nodes = tree._nodes
    if not target.is_expanded:
        nodes = dict(tree._nodes)
        nodes[target_parent_id] = replace(target, is_expanded=True)
    return tree._derive(nodes, children, parents)


def _attach(tree: Tree, node_id: str, new_children: Sequence[TreeNode], keep: bool, fields: dict) -> Tree:
    node = tree._nodes.get(node_id)
    if node is None:
        return tree
    nodes = dict(tree._nodes)
    children = dict(tree._children)
    parents = dict(tree._parents)
    ids = list(child_ids(tree, node_id)) if keep else []
    if not keep:
        for old_id in subtree_ids(tree, node_id)[1:]:
            del nodes[old_id]
            children.pop(old_id, None)
            parents.pop(old_id, None)

    for kid in new_children:
        kid_id = unique_id(kid.id, set(nodes))
        if kid_id != kid.id:
            kid = replace(kid, id=kid_id)
        nodes[kid_id] = kid
        parents[kid_id] = node_id
        ids.append(kid_id)
    children[node_id] = tuple(ids)
    nodes[node_id] = replace(node, **fields)
    return tree._derive(nodes, children, parents)


def replace_children(tree: Tree, node_id: str, new_children: Sequence[TreeNode], **fields) -> Tree:
    """Swap a node's children for new_children and merge fields into it.

    Any previous descendants are dropped. Incoming ids that clash with
    ids elsewhere in the tree are re-keyed.
    """
    return _attach(tree, node_id, new_children, False, fields)


def append_children(tree: Tree, node_id: str, new_children: Sequence[TreeNode], **fields) -> Tree:
    """Add new_children after a node's current children and merge fields into it.

    Existing descendants stay. Clashing incoming ids are re-keyed.
    """
    return _attach(tree, node_id, new_children, True, fields)

"""Tests for tree queries and mutation operations."""

import pytest

from trellis.model.tree import (
    ROOT_ID,
    Level,
    Tree,
    TreeNode,
    add_child_node,
    ancestors,
    append_children,
    child_ids,
    children_of,
    default_tree,
    find_node_by_id,
    find_parent_node,
    is_descendant,
    is_materialized,
    iter_nodes,
    make_child,
    move_node,
    node_count,
    remove_node,
    replace_children,
    subtree_ids,
    update_node,
    visible_rows,
)


def test_level_next():
    assert Level.A.next() is Level.B
    assert Level.F.next() is Level.G
    assert Level.G.next() is None
    assert Level.G.is_terminal
    assert not Level.C.is_terminal


def test_default_tree():
    tree = default_tree()
    root = tree.root
    assert root.id == ROOT_ID
    assert root.label == "Level A"
    assert root.level is Level.A
    assert root.has_children
    assert not root.is_expanded
    assert children_of(tree, ROOT_ID) == ()


def test_make_child():
    parent = TreeNode("p", "P", Level.F, has_children=True)
    child = make_child(parent, "p-1", "Leaf")
    assert child.level is Level.G
    assert not child.has_children
    with pytest.raises(ValueError):
        make_child(child, "p-1-1", "Too deep")


def test_find_node_by_id(tree):
    assert find_node_by_id(tree, "x1").label == "X1"
    assert find_node_by_id(tree, "nope") is None


def test_find_parent_node(tree):
    assert find_parent_node(tree, "x1").id == "x"
    assert find_parent_node(tree, "x").id == ROOT_ID
    assert find_parent_node(tree, ROOT_ID) is None
    assert find_parent_node(tree, "nope") is None


def test_children_of_not_materialized(tree):
    """Absent children and an empty list are different things."""
    assert children_of(tree, "y") is None
    assert not is_materialized(tree, "y")
    assert [n.id for n in children_of(tree, "x")] == ["x1", "x2"]


def test_ancestors_and_descendants(tree):
    assert ancestors(tree, "x1") == ["x", ROOT_ID]
    assert is_descendant(tree, "x", "x1")
    assert is_descendant(tree, ROOT_ID, "x2")
    assert not is_descendant(tree, "y", "x1")
    assert not is_descendant(tree, "x1", "x1")


def test_subtree_and_iteration(tree):
    assert subtree_ids(tree, "x") == ["x", "x1", "x2"]
    assert [n.id for n in iter_nodes(tree)] == [ROOT_ID, "x", "x1", "x2", "y"]
    assert node_count(tree) == 5


def test_visible_rows_follow_expansion(tree):
    rows = visible_rows(tree)
    assert [(r.node.id, r.depth, r.parent_id, r.index) for r in rows] == [
        (ROOT_ID, 0, None, 0),
        ("x", 1, ROOT_ID, 0),
        ("x1", 2, "x", 0),
        ("x2", 2, "x", 1),
        ("y", 1, ROOT_ID, 1),
    ]
    collapsed = update_node(tree, "x", is_expanded=False)
    assert [r.node.id for r in visible_rows(collapsed)] == [ROOT_ID, "x", "y"]


def test_update_node(tree):
    updated = update_node(tree, "y", label="Why")
    assert find_node_by_id(updated, "y").label == "Why"
    assert find_node_by_id(tree, "y").label == "Y"
    assert updated.version == tree.version + 1


def test_update_node_noop(tree):
    assert update_node(tree, "nope", label="Z") is tree
    assert update_node(tree, "y", label="Y") is tree


def test_update_node_shares_untouched_payloads(tree):
    updated = update_node(tree, "y", label="Why")
    assert find_node_by_id(updated, "x1") is find_node_by_id(tree, "x1")


def test_add_child_node_expands_parent(tree):
    node = TreeNode("y-1", "New", Level.C)
    added = add_child_node(tree, "y", node)
    assert child_ids(added, "y") == ("y-1",)
    assert find_node_by_id(added, "y").is_expanded
    assert find_parent_node(added, "y-1").id == "y"


def test_add_child_node_appends(tree):
    added = add_child_node(tree, "x", TreeNode("x3", "X3", Level.C))
    assert child_ids(added, "x") == ("x1", "x2", "x3")


def test_add_child_node_noop(tree):
    assert add_child_node(tree, "nope", TreeNode("n", "N", Level.B)) is tree
    assert add_child_node(tree, "y", TreeNode("x1", "Dup", Level.C)) is tree


def test_remove_node_takes_subtree(tree):
    removed = remove_node(tree, "x")
    assert child_ids(removed, ROOT_ID) == ("y",)
    for gone in ("x", "x1", "x2"):
        assert gone not in removed
    assert node_count(removed) == 2


def test_remove_node_noop(tree):
    assert remove_node(tree, ROOT_ID) is tree
    assert remove_node(tree, "nope") is tree


def test_move_node_reorders_siblings():
    """root -> [x, y]; moving y to index 0 gives [y, x]."""
    tree = Tree.build(
        TreeNode(ROOT_ID, "Level A", Level.A, has_children=True),
        {ROOT_ID: [TreeNode("x", "X", Level.B), TreeNode("y", "Y", Level.B)]},
    )
    moved = move_node(tree, "y", ROOT_ID, 0)
    assert child_ids(moved, ROOT_ID) == ("y", "x")


def test_move_node_reparents(tree):
    moved = move_node(tree, "x2", "y", 0)
    assert child_ids(moved, "x") == ("x1",)
    assert child_ids(moved, "y") == ("x2",)
    assert find_parent_node(moved, "x2").id == "y"
    assert find_node_by_id(moved, "y").is_expanded


def test_move_node_keeps_level(tree):
    moved = move_node(tree, "x1", ROOT_ID, 0)
    assert find_node_by_id(moved, "x1").level is Level.C


def test_move_node_carries_subtree(tree):
    moved = move_node(tree, "x", "y", 0)
    assert child_ids(moved, "y") == ("x",)
    assert child_ids(moved, "x") == ("x1", "x2")
    assert ancestors(moved, "x1") == ["x", "y", ROOT_ID]


def test_move_node_index_clamped(tree):
    moved = move_node(tree, "x1", ROOT_ID, 99)
    assert child_ids(moved, ROOT_ID) == ("x", "y", "x1")
    moved = move_node(tree, "x1", ROOT_ID, -5)
    assert child_ids(moved, ROOT_ID) == ("x1", "x", "y")


def test_move_node_into_self_is_noop(tree):
    assert move_node(tree, "x", "x", 0) is tree


def test_move_node_into_descendant_is_noop(tree):
    assert move_node(tree, "x", "x1", 0) is tree
    assert move_node(tree, ROOT_ID, "y", 0) is tree


def test_move_node_unknown_is_noop(tree):
    assert move_node(tree, "nope", ROOT_ID, 0) is tree
    assert move_node(tree, "x1", "nope", 0) is tree


def test_move_node_is_permutation(tree):
    """A move never adds or drops nodes."""
    moved = move_node(tree, "x1", "y", 0)
    assert sorted(n.id for n in iter_nodes(moved)) == sorted(n.id for n in iter_nodes(tree))


def test_old_snapshot_stays_valid(tree):
    move_node(tree, "x", "y", 0)
    remove_node(tree, "x1")
    assert child_ids(tree, ROOT_ID) == ("x", "y")
    assert child_ids(tree, "x") == ("x1", "x2")


def test_replace_children(tree):
    kids = [TreeNode("y-0", "Level C", Level.C), TreeNode("y-1", "Level C", Level.C)]
    replaced = replace_children(tree, "y", kids, is_expanded=True)
    assert child_ids(replaced, "y") == ("y-0", "y-1")
    assert find_node_by_id(replaced, "y").is_expanded


def test_replace_children_drops_old_descendants(tree):
    replaced = replace_children(tree, "x", [TreeNode("n", "N", Level.C)])
    assert "x1" not in replaced
    assert child_ids(replaced, "x") == ("n",)


def test_replace_children_rekeys_collisions(tree):
    replaced = replace_children(tree, "y", [TreeNode("x1", "Clash", Level.C)])
    assert child_ids(replaced, "y") == ("x1-1",)
    assert find_node_by_id(replaced, "x1").label == "X1"
    assert find_node_by_id(replaced, "x1-1").label == "Clash"


def test_append_children_keeps_existing(tree):
    moved = move_node(tree, "x1", "y", 0)
    appended = append_children(moved, "y", [TreeNode("y-0", "Level C", Level.C)], is_expanded=True)
    assert child_ids(appended, "y") == ("x1", "y-0")
    assert find_parent_node(appended, "y-0").id == "y"
    assert node_count(appended) == node_count(tree) + 1


def test_append_children_rekeys_collisions(tree):
    appended = append_children(tree, "x", [TreeNode("x2", "Clash", Level.C)])
    assert child_ids(appended, "x") == ("x1", "x2", "x2-1")
    assert find_node_by_id(appended, "x2").label == "X2"


def test_tree_equality(tree):
    assert update_node(tree, "y", label="Z") != tree
    assert update_node(update_node(tree, "y", label="Z"), "y", label="Y") == tree

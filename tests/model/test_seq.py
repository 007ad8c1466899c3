"""Tests for ordered-sequence helpers."""

from trellis.model.seq import clamp_index, insert_at, remove_at, remove_where, replace_where


def test_clamp_index():
    assert clamp_index(-3, 4) == 0
    assert clamp_index(2, 4) == 2
    assert clamp_index(4, 4) == 4
    assert clamp_index(99, 4) == 4


def test_insert_at():
    assert insert_at(("a", "b"), 1, "x") == ("a", "x", "b")
    assert insert_at(("a", "b"), 0, "x") == ("x", "a", "b")


def test_insert_at_out_of_range_appends():
    assert insert_at(("a", "b"), 10, "x") == ("a", "b", "x")
    assert insert_at((), 5, "x") == ("x",)


def test_insert_at_negative_prepends():
    assert insert_at(("a",), -1, "x") == ("x", "a")


def test_remove_at():
    rest, item = remove_at(("a", "b", "c"), 1)
    assert rest == ("a", "c")
    assert item == "b"


def test_remove_where():
    assert remove_where((1, 2, 3, 4), lambda n: n % 2 == 0) == (1, 3)


def test_replace_where():
    assert replace_where((1, 2, 3), lambda n: n == 2, lambda n: n * 10) == (1, 20, 3)

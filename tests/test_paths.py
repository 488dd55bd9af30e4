"""Tests for key parsing and dot-path traversal helpers."""

import pytest

from docstore.core.paths import assign_in, get_in, parse_key, remove_in


# region Key parsing
@pytest.mark.parametrize(
    "key, expected_id, expected_path, expected_segments",
    [
        ("user", "user", None, []),
        ("user.name", "user", "name", ["name"]),
        ("user.settings.theme.color", "user", "settings.theme.color", ["settings", "theme", "color"]),
        ("user.", "user", None, []),
        (".name", "", "name", ["name"]),
        ("", "", None, []),
    ],
    ids=[
        "bare-id",
        "single-segment",
        "compound-path-kept-whole",
        "trailing-dot-means-no-path",
        "empty-id",
        "empty-key",
    ],
)
def test_parse_key(key, expected_id, expected_path, expected_segments):
    parsed = parse_key(key)
    assert parsed.id == expected_id
    assert parsed.path == expected_path
    assert parsed.segments == expected_segments


def test_parse_key_is_deterministic():
    assert parse_key("a.b.c") == parse_key("a.b.c")


# endregion


# region Traversal
@pytest.mark.parametrize(
    "document, segments, expected",
    [
        ({"a": {"b": 1}}, ["a", "b"], 1),
        ({"a": {"b": 1}}, ["a"], {"b": 1}),
        ({"a": {"b": 1}}, ["a", "c"], None),
        ({"a": None}, ["a", "b"], None),
        (None, ["a"], None),
        ({"a": [1, 2, 3]}, ["a", "0"], None),
        ({"a": "text"}, ["a", "length"], None),
        ({"a": 0}, ["a"], 0),
        ({"a": 1}, [], {"a": 1}),
    ],
    ids=[
        "nested-leaf",
        "nested-object",
        "missing-leaf",
        "null-intermediate",
        "missing-document",
        "lists-are-not-indexed",
        "scalars-have-no-properties",
        "falsy-leaf-returned",
        "no-segments-returns-document",
    ],
)
def test_get_in(document, segments, expected):
    assert get_in(document, segments) == expected


def test_get_in_does_not_mutate():
    document = {"a": {"b": 1}}
    get_in(document, ["a", "x", "y"])
    assert document == {"a": {"b": 1}}


# endregion


# region Assignment
def test_assign_in_keeps_siblings():
    document = {"a": {"x": 1}, "other": True}
    result = assign_in(document, ["a", "y"], 2)
    assert result == {"a": {"x": 1, "y": 2}, "other": True}
    assert result is document


def test_assign_in_creates_intermediates():
    assert assign_in({}, ["a", "b", "c"], 1) == {"a": {"b": {"c": 1}}}


@pytest.mark.parametrize(
    "document",
    [None, 5, "text", [1, 2], True],
    ids=["none", "number", "string", "list", "bool"],
)
def test_assign_in_replaces_non_object_root(document):
    assert assign_in(document, ["a"], 1) == {"a": 1}


@pytest.mark.parametrize(
    "intermediate",
    [None, 0, "text", [1, 2]],
    ids=["null", "number", "string", "list"],
)
def test_assign_in_replaces_non_object_intermediate(intermediate):
    document = {"a": intermediate, "b": 1}
    assert assign_in(document, ["a", "c"], 2) == {"a": {"c": 2}, "b": 1}


def test_assign_in_overwrites_leaf():
    assert assign_in({"a": {"b": 1}}, ["a"], [1]) == {"a": [1]}


def test_assign_in_requires_segments():
    with pytest.raises(ValueError):
        assign_in({}, [], 1)


# endregion


# region Removal
def test_remove_in_deletes_leaf():
    document = {"a": {"x": 1, "y": 2}}
    assert remove_in(document, ["a", "x"]) is True
    assert document == {"a": {"y": 2}}


def test_remove_in_deletes_null_valued_property():
    document = {"a": None}
    assert remove_in(document, ["a"]) is True
    assert document == {}


@pytest.mark.parametrize(
    "document, segments",
    [
        (None, ["a"]),
        ({}, ["a"]),
        ({"a": {}}, ["a", "b", "c"]),
        ({"a": 5}, ["a", "b"]),
        ({"a": [1]}, ["a", "0"]),
        ([1, 2], ["0"]),
        ({"a": 1}, []),
    ],
    ids=[
        "missing-document",
        "missing-leaf",
        "missing-intermediate",
        "scalar-intermediate",
        "list-intermediate",
        "list-document",
        "no-segments",
    ],
)
def test_remove_in_missing_path(document, segments):
    snapshot = repr(document)
    assert remove_in(document, segments) is False
    assert repr(document) == snapshot


# endregion

from __future__ import annotations

import pytest

from bst.bst_actions import (
    EMPTY_SEQUENCE_TEXT,
    INVALID_SEQUENCE_TEXT,
    INVALID_VALUE_TEXT,
    BSTActions,
    MessageLevel,
    format_traversal,
    parse_sequence,
    parse_value,
)
from bst.bst_model import BinarySearchTree


@pytest.fixture()
def actions() -> BSTActions:
    return BSTActions(BinarySearchTree())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("42", 42), ("  -7 ", -7), ("+3", 3), ("0", 0)],
)
def test_parse_value_accepts_integers(raw: str, expected: int) -> None:
    assert parse_value(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "3.5", "1e3", "12abc", "--1"])
def test_parse_value_rejects_non_integers(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_value(raw)


def test_parse_sequence_handles_separators() -> None:
    assert parse_sequence("5, 3 8，1") == [5, 3, 8, 1]
    assert parse_sequence("") == []
    with pytest.raises(ValueError):
        parse_sequence("1, two")


def test_format_traversal() -> None:
    assert format_traversal([]) == "Empty"
    assert format_traversal([1, 2, 3]) == "1 → 2 → 3"


def test_insert_then_duplicate(actions: BSTActions) -> None:
    outcome = actions.insert("10")
    assert outcome.changed
    assert outcome.value == 10
    assert outcome.message.text == "Inserted: 10"
    assert outcome.message.level is MessageLevel.SUCCESS

    duplicate = actions.insert("10")
    assert not duplicate.changed
    assert duplicate.message.text == "Value 10 already exists in the tree!"
    assert duplicate.message.level is MessageLevel.WARNING
    assert actions.model.count_nodes() == 1


def test_invalid_input_never_reaches_tree(actions: BSTActions) -> None:
    for handler in (actions.insert, actions.delete, actions.search):
        outcome = handler("ten")
        assert not outcome.changed
        assert outcome.value is None
        assert outcome.message.text == INVALID_VALUE_TEXT
        assert outcome.message.level is MessageLevel.ERROR
    assert actions.model.is_empty()


def test_delete_requires_presence(actions: BSTActions) -> None:
    missing = actions.delete("4")
    assert not missing.changed
    assert missing.message.text == "Value 4 not found in the tree!"

    actions.insert("4")
    deleted = actions.delete("4")
    assert deleted.changed
    assert deleted.message.text == "Deleted: 4"
    assert deleted.message.level is MessageLevel.ERROR
    assert actions.model.is_empty()


def test_search_messages(actions: BSTActions) -> None:
    actions.insert("7")
    found = actions.search("7")
    assert found.message.text == "Found: 7"
    assert found.message.level is MessageLevel.SUCCESS
    assert not found.changed

    missing = actions.search("8")
    assert missing.message.text == "Not found: 8"
    assert missing.message.level is MessageLevel.WARNING
    assert missing.value == 8


def test_clear_on_empty_tree_skips_confirmation(actions: BSTActions) -> None:
    def confirm() -> bool:
        raise AssertionError("confirmation should not be requested")

    outcome = actions.clear(confirm)
    assert outcome.message.text == "Tree is already empty!"
    assert not outcome.changed


def test_clear_respects_confirmation(actions: BSTActions) -> None:
    actions.insert("1")
    declined = actions.clear(lambda: False)
    assert declined.message is None
    assert not declined.changed
    assert not actions.model.is_empty()

    accepted = actions.clear(lambda: True)
    assert accepted.changed
    assert accepted.message.text == "Tree cleared"
    assert actions.model.is_empty()


def test_create_rebuilds_tree(actions: BSTActions) -> None:
    actions.insert("99")
    outcome = actions.create("50, 30, 70, 30")
    assert outcome.changed
    assert outcome.message.text == "Created tree with 3 values"
    assert actions.model.inorder_traversal() == [30, 50, 70]


def test_create_rejects_bad_list_without_touching_tree(actions: BSTActions) -> None:
    actions.insert("1")
    outcome = actions.create("2, x")
    assert not outcome.changed
    assert outcome.message.text == INVALID_SEQUENCE_TEXT
    assert actions.model.inorder_traversal() == [1]


def test_stats_follow_tree(actions: BSTActions) -> None:
    stats = actions.stats()
    assert (stats.node_count, stats.height, stats.traversal) == (0, 0, "Empty")

    for raw in ("10", "5", "15", "3", "7"):
        actions.insert(raw)
    stats = actions.stats()
    assert stats.node_count == 5
    assert stats.height == 3
    assert stats.traversal == "3 → 5 → 7 → 10 → 15"


@pytest.mark.parametrize("text", ["", "   ", " , ，"])
def test_create_with_empty_list_keeps_existing_tree(actions: BSTActions, text: str) -> None:
    actions.insert("10")
    actions.insert("5")
    outcome = actions.create(text)
    assert not outcome.changed
    assert outcome.message.text == EMPTY_SEQUENCE_TEXT
    assert outcome.message.level is MessageLevel.WARNING
    assert actions.model.count_nodes() == 2
    assert actions.model.inorder_traversal() == [5, 10]

from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtWidgets import QApplication  # noqa: E402

from bst.bst_model import BinarySearchTree  # noqa: E402
from bst.bst_view import FOUND_COLOR, BSTNodeItem, BSTView  # noqa: E402
from core.global_ctrl import GlobalController  # noqa: E402


@pytest.fixture(scope="module")
def qapp() -> QApplication:
    return QApplication.instance() or QApplication([])


@pytest.fixture()
def drawn(qapp: QApplication) -> tuple[BinarySearchTree, BSTView]:
    tree = BinarySearchTree()
    tree.create_from_iterable([50, 30, 70, 20, 40])
    view = BSTView(GlobalController())
    view.show_snapshot(tree.snapshot())
    return tree, view


def fill_of(item: BSTNodeItem) -> str:
    return item.fillColor.name()


def test_highlight_marks_node_until_cancelled(drawn: tuple[BinarySearchTree, BSTView]) -> None:
    tree, view = drawn
    item = view.node_items[tree.root.node_id]

    view.highlight_node(tree.root.node_id)
    assert view.highlight_pending
    assert fill_of(item) == FOUND_COLOR

    view.cancel_highlight()
    assert not view.highlight_pending
    assert fill_of(item) == BSTNodeItem.default_fill


def test_new_animation_drops_pending_highlight(drawn: tuple[BinarySearchTree, BSTView]) -> None:
    tree, view = drawn
    found = view.node_items[tree.root.left.node_id]
    view.highlight_node(found.node_id)

    target_id, path = tree.find_path(20)
    view.animate_find(tree.snapshot(), target_id, path)

    assert not view.highlight_pending
    assert fill_of(found) == BSTNodeItem.default_fill
    view.stop_all_animations()


def test_reset_stops_pending_highlight(drawn: tuple[BinarySearchTree, BSTView]) -> None:
    tree, view = drawn
    view.highlight_node(tree.root.node_id)

    view.reset()

    assert not view.highlight_pending
    assert view.node_items == {}


def test_second_highlight_restores_first_node(drawn: tuple[BinarySearchTree, BSTView]) -> None:
    tree, view = drawn
    first = view.node_items[tree.root.left.node_id]
    second = view.node_items[tree.root.right.node_id]

    view.highlight_node(first.node_id)
    view.highlight_node(second.node_id)

    assert fill_of(first) == BSTNodeItem.default_fill
    assert fill_of(second) == FOUND_COLOR
    assert view.highlight_pending


def test_interactions_lock_while_animating(drawn: tuple[BinarySearchTree, BSTView]) -> None:
    tree, view = drawn
    states: list[bool] = []
    view.interactionLocked.connect(states.append)

    target_id, path = tree.find_path(40)
    view.animate_find(tree.snapshot(), target_id, path)
    assert view.interactions_locked

    view.stop_all_animations()
    assert not view.interactions_locked
    assert states == [True, False]

from __future__ import annotations

import random

import pytest

from bst.bst_model import BinarySearchTree, TreeNode, subtree_height, subtree_size


def build(*values: int) -> BinarySearchTree:
    tree = BinarySearchTree()
    for value in values:
        tree.insert(value)
    return tree


def assert_ordered(node: TreeNode | None, low=None, high=None) -> None:
    if node is None:
        return
    if low is not None:
        assert node.value > low
    if high is not None:
        assert node.value < high
    assert_ordered(node.left, low, node.value)
    assert_ordered(node.right, node.value, high)


def test_empty_tree_answers() -> None:
    tree = BinarySearchTree()
    assert tree.is_empty()
    assert tree.root is None
    assert tree.search(1) is False
    assert tree.inorder_traversal() == []
    assert tree.get_height() == 0
    assert tree.count_nodes() == 0
    tree.delete(1)
    assert tree.is_empty()


def test_first_insert_becomes_root() -> None:
    tree = BinarySearchTree()
    assert tree.insert(42) is True
    assert not tree.is_empty()
    assert tree.root.value == 42
    assert tree.get_height() == 1
    assert tree.count_nodes() == 1


def test_scenario_small_tree() -> None:
    tree = build(10, 5, 15, 3, 7)
    assert tree.inorder_traversal() == [3, 5, 7, 10, 15]
    assert tree.get_height() == 3
    assert tree.count_nodes() == 5
    assert tree.search(7) is True
    assert tree.search(8) is False


def test_duplicate_insert_is_rejected() -> None:
    tree = build(10, 5)
    before = tree.count_nodes()
    assert tree.insert(5) is False
    assert tree.count_nodes() == before
    assert tree.inorder_traversal() == [5, 10]


def test_insert_places_leaf_under_correct_parent() -> None:
    tree = build(50, 30, 70)
    tree.insert(40)
    assert tree.root.left.right.value == 40
    assert tree.root.left.right.is_leaf()


def test_delete_leaf() -> None:
    tree = build(50, 30, 70)
    tree.delete(30)
    assert tree.root.left is None
    assert tree.inorder_traversal() == [50, 70]


def test_delete_node_with_one_child_keeps_subtree() -> None:
    tree = build(50, 30, 20, 10, 25)
    subtree = tree.root.left.left
    tree.delete(30)
    assert tree.root.left is subtree
    assert tree.inorder_traversal() == [10, 20, 25, 50]


def test_delete_two_children_copies_successor_into_root() -> None:
    tree = build(50, 30, 70, 20, 40, 60, 80)
    root = tree.root
    tree.delete(50)
    assert tree.inorder_traversal() == [20, 30, 40, 60, 70, 80]
    assert tree.root is root
    assert tree.root.value == 60
    assert tree.root.right.left is None


def test_delete_two_children_successor_with_right_child() -> None:
    tree = build(50, 30, 80, 60, 90, 65)
    tree.delete(50)
    assert tree.root.value == 60
    assert tree.root.right.left.value == 65
    assert tree.inorder_traversal() == [30, 60, 65, 80, 90]
    assert_ordered(tree.root)


def test_delete_two_children_successor_is_right_child() -> None:
    tree = build(50, 30, 70, 80)
    tree.delete(50)
    assert tree.root.value == 70
    assert tree.root.right.value == 80
    assert tree.count_nodes() == 3


def test_two_child_delete_leaves_other_nodes_untouched() -> None:
    tree = build(50, 30, 70, 20, 40, 60, 80)
    left = tree.root.left
    right = tree.root.right
    tree.delete(50)
    assert tree.root.left is left
    assert tree.root.right is right
    assert [left.value, left.left.value, left.right.value] == [30, 20, 40]


def test_delete_absent_value_changes_nothing() -> None:
    tree = build(10, 5, 15, 3, 7)
    before = (tree.inorder_traversal(), tree.count_nodes(), tree.get_height())
    tree.delete(99)
    tree.delete(6)
    assert (tree.inorder_traversal(), tree.count_nodes(), tree.get_height()) == before


def test_delete_last_node_empties_tree() -> None:
    tree = build(10)
    tree.delete(10)
    assert tree.is_empty()
    assert tree.inorder_traversal() == []


def test_clear_releases_everything() -> None:
    tree = build(3, 1, 2)
    tree.clear()
    assert tree.is_empty()
    assert tree.count_nodes() == 0
    assert tree.search(3) is False


def test_sorted_insert_degenerates_to_a_list() -> None:
    tree = build(*range(1, 3001))
    assert tree.get_height() == tree.count_nodes() == 3000
    assert tree.inorder_traversal() == list(range(1, 3001))
    tree.delete(1500)
    assert tree.search(1500) is False
    assert tree.get_height() == 2999


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_operations_keep_invariants(seed: int) -> None:
    rng = random.Random(seed)
    tree = BinarySearchTree()
    present: set[int] = set()
    for _ in range(400):
        value = rng.randint(-50, 50)
        if rng.random() < 0.6:
            assert tree.insert(value) is (value not in present)
            present.add(value)
        else:
            tree.delete(value)
            present.discard(value)
        assert tree.inorder_traversal() == sorted(present)
        assert tree.count_nodes() == len(tree.inorder_traversal())
    assert_ordered(tree.root)
    for value in range(-50, 51):
        assert tree.search(value) is (value in present)


def test_subtree_helpers() -> None:
    assert subtree_height(None) == 0
    assert subtree_size(None) == 0
    tree = build(10, 5, 15, 3, 7, 1)
    assert subtree_height(tree.root.left) == 3
    assert subtree_size(tree.root.left) == 4
    assert subtree_height(tree.root.right) == 1


def test_find_path_reports_visited_ids() -> None:
    tree = build(10, 5, 15, 7)
    node_id, path = tree.find_path(7)
    assert node_id == tree.root.left.right.node_id
    assert path == [tree.root.node_id, tree.root.left.node_id, node_id]

    missing, path = tree.find_path(6)
    assert missing is None
    assert path[-1] == tree.root.left.right.node_id


def test_snapshot_lists_nodes_in_preorder() -> None:
    tree = build(10, 5, 15)
    snapshot = tree.snapshot()
    assert snapshot["root"] == tree.root.node_id
    assert [node["value"] for node in snapshot["nodes"]] == [10, 5, 15]
    root_info = snapshot["nodes"][0]
    assert root_info["left"] == tree.root.left.node_id
    assert root_info["right"] == tree.root.right.node_id
    assert BinarySearchTree().snapshot() == {"root": None, "nodes": []}


def test_node_ids_survive_two_child_delete() -> None:
    tree = build(50, 30, 70, 60)
    root_id = tree.root.node_id
    successor_id = tree.root.right.left.node_id
    tree.delete(50)
    ids = {node["id"] for node in tree.snapshot()["nodes"]}
    assert root_id in ids
    assert successor_id not in ids
    assert tree.value_of(root_id) == 60
    assert tree.value_of(successor_id) is None


def test_create_from_iterable_skips_duplicates_and_resets_ids() -> None:
    tree = build(100)
    assert tree.create_from_iterable([5, 3, 5, 8]) == 3
    assert tree.inorder_traversal() == [3, 5, 8]
    assert tree.root.node_id == 0


def test_python_protocols() -> None:
    tree = build(2, 1, 3)
    assert len(tree) == 3
    assert 1 in tree
    assert 4 not in tree
    assert list(tree) == [1, 2, 3]

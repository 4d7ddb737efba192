import itertools
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TreeNode:
    """
    A single key with two exclusively owned child links.

    ``node_id`` is assigned once by the owning tree and lets renderers follow a
    node across snapshots, even after a deletion overwrites its key.
    """

    __slots__ = ("value", "left", "right", "node_id")

    def __init__(self, value: int, node_id: int = -1):
        self.value = value
        self.left: Optional["TreeNode"] = None
        self.right: Optional["TreeNode"] = None
        self.node_id = node_id

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        return f"TreeNode(value={self.value!r}, node_id={self.node_id})"


def subtree_height(node: Optional[TreeNode]) -> int:
    """Height counted in nodes: ``None`` is 0, a lone node is 1."""
    height = 0
    level = [node] if node is not None else []
    while level:
        height += 1
        level = [
            child
            for current in level
            for child in (current.left, current.right)
            if child is not None
        ]
    return height


def subtree_size(node: Optional[TreeNode]) -> int:
    """Number of nodes reachable from ``node`` (inclusive)."""
    count = 0
    stack = [node] if node is not None else []
    while stack:
        current = stack.pop()
        count += 1
        if current.left is not None:
            stack.append(current.left)
        if current.right is not None:
            stack.append(current.right)
    return count


class BinarySearchTree:
    """
    Unbalanced binary search tree over integer keys.

    Keys are unique: inserting a key that is already present is a no-op.
    Every walk is iterative, so a degenerate (sorted-insert) tree may grow
    deeper than the interpreter's recursion limit.
    """

    def __init__(self):
        self._id_iter = itertools.count()
        self._root: Optional[TreeNode] = None

    @property
    def root(self) -> Optional[TreeNode]:
        return self._root

    # ---------- Core operations ----------

    def insert(self, value: int) -> bool:
        """Insert ``value``; return False when it is already present."""
        if self._root is None:
            self._root = self._make_node(value)
            logger.debug("inserted %r as root", value)
            return True

        current = self._root
        while True:
            if value == current.value:
                return False
            if value < current.value:
                if current.left is None:
                    current.left = self._make_node(value)
                    break
                current = current.left
            else:
                if current.right is None:
                    current.right = self._make_node(value)
                    break
                current = current.right

        logger.debug("inserted %r under %r", value, current.value)
        return True

    def search(self, value: int) -> bool:
        return self._find_node(value) is not None

    def delete(self, value: int) -> None:
        """
        Remove ``value`` if present; absent keys leave the tree untouched.

        A node with two children keeps its position: it takes over the key of
        its in-order successor (leftmost node of the right subtree), and that
        successor, which never has a left child, is spliced out instead.
        """
        parent = None
        node = self._root
        while node is not None and value != node.value:
            parent = node
            node = node.left if value < node.value else node.right

        if node is None:
            return

        if node.left is not None and node.right is not None:
            succ_parent = node
            successor = node.right
            while successor.left is not None:
                succ_parent = successor
                successor = successor.left
            logger.debug("replacing %r with successor %r", node.value, successor.value)
            node.value = successor.value
            parent, node = succ_parent, successor

        replacement = node.left if node.left is not None else node.right
        self._replace_child(parent, node, replacement)
        logger.debug("deleted %r", value)

    def inorder_traversal(self) -> List[int]:
        result: List[int] = []
        stack: List[TreeNode] = []
        current = self._root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            result.append(current.value)
            current = current.right
        return result

    def get_height(self) -> int:
        return subtree_height(self._root)

    def count_nodes(self) -> int:
        return subtree_size(self._root)

    def clear(self):
        self._root = None
        self._id_iter = itertools.count()

    def is_empty(self) -> bool:
        return self._root is None

    # ---------- Visualizer support ----------

    def create_from_iterable(self, values: Iterable[int]) -> int:
        """Rebuild the tree from ``values``; returns how many were inserted."""
        self.clear()
        inserted = 0
        for value in values:
            if self.insert(value):
                inserted += 1
        return inserted

    def find_path(self, value: int) -> Tuple[Optional[int], List[int]]:
        """
        Return (id of the node holding ``value`` or None, ids visited).
        The visited ids include the found node itself.
        """
        path: List[int] = []
        current = self._root
        while current is not None:
            path.append(current.node_id)
            if value == current.value:
                return current.node_id, path
            current = current.left if value < current.value else current.right
        return None, path

    def snapshot(self) -> Dict[str, Any]:
        nodes = []
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            nodes.append(
                {
                    "id": node.node_id,
                    "value": node.value,
                    "left": node.left.node_id if node.left is not None else None,
                    "right": node.right.node_id if node.right is not None else None,
                }
            )
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return {
            "root": self._root.node_id if self._root is not None else None,
            "nodes": nodes,
        }

    def value_of(self, node_id: int) -> Optional[int]:
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            if node.node_id == node_id:
                return node.value
            stack.extend(child for child in (node.left, node.right) if child is not None)
        return None

    def __len__(self):
        return self.count_nodes()

    def __contains__(self, value):
        return self.search(value)

    def __iter__(self) -> Iterator[int]:
        return iter(self.inorder_traversal())

    # ---------- Internal helpers ----------

    def _make_node(self, value: int) -> TreeNode:
        return TreeNode(value, next(self._id_iter))

    def _find_node(self, value: int) -> Optional[TreeNode]:
        current = self._root
        while current is not None:
            if value == current.value:
                return current
            current = current.left if value < current.value else current.right
        return None

    def _replace_child(
        self,
        parent: Optional[TreeNode],
        old_child: TreeNode,
        new_child: Optional[TreeNode],
    ):
        if parent is None:
            self._root = new_child
        elif parent.left is old_child:
            parent.left = new_child
        else:
            parent.right = new_child

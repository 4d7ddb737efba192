from collections import deque
from typing import Any, Dict, List, Optional, Tuple

Position = Tuple[float, float]


def _index(snapshot: Dict[str, Any]) -> Dict[int, Dict[str, Any]]:
    return {node["id"]: node for node in snapshot.get("nodes", [])}


def compute_layout(
    snapshot: Dict[str, Any],
    node_width: float = 70,
    h_gap: float = 90,
    v_gap: float = 130,
    min_offset: float = 60,
    top: float = 40,
) -> Dict[int, Position]:
    """
    Subtree-width layout returning the top-left corner of every node:
    1. a parent sits at the horizontal centre of its children
    2. the left subtree lies entirely left of the parent, the right subtree right
    3. edges never bend back inwards
    """
    root_id = snapshot.get("root")
    if root_id is None:
        return {}

    tree = _index(snapshot)
    if root_id not in tree:
        return {}

    def child(node_id: Optional[int]) -> Optional[int]:
        return node_id if node_id in tree else None

    # parents come before children here, so the reversed walk is bottom-up
    order: List[int] = []
    stack = [root_id]
    while stack:
        node_id = stack.pop()
        order.append(node_id)
        node = tree[node_id]
        stack.extend(c for c in (child(node["left"]), child(node["right"])) if c is not None)

    subtree_width: Dict[int, float] = {}
    for node_id in reversed(order):
        node = tree[node_id]
        left_width = subtree_width.get(child(node["left"]), 0)
        right_width = subtree_width.get(child(node["right"]), 0)

        if left_width == 0 and right_width == 0:
            width = node_width
        elif left_width > 0 and right_width > 0:
            width = left_width + right_width + h_gap
        else:
            # single child: the node still needs room for the offset child
            child_width = left_width or right_width
            width = max(node_width / 2 + min_offset, child_width + node_width / 2 + h_gap / 2)
        subtree_width[node_id] = width

    positions: Dict[int, Position] = {}
    queue = deque([(root_id, 0.0, 0)])
    while queue:
        node_id, x_center, depth = queue.popleft()
        positions[node_id] = (x_center - node_width / 2, depth * v_gap)

        left_id = child(tree[node_id]["left"])
        right_id = child(tree[node_id]["right"])
        if left_id is not None and right_id is not None:
            queue.append((left_id, x_center - h_gap / 2 - subtree_width[left_id] / 2, depth + 1))
            queue.append((right_id, x_center + h_gap / 2 + subtree_width[right_id] / 2, depth + 1))
        elif left_id is not None:
            queue.append((left_id, x_center - min_offset, depth + 1))
        elif right_id is not None:
            queue.append((right_id, x_center + min_offset, depth + 1))

    if positions:
        min_y = min(y for _, y in positions.values())
        positions = {
            node_id: (x, y - min_y - top) for node_id, (x, y) in positions.items()
        }
    return positions


def level_order(snapshot: Dict[str, Any]) -> List[int]:
    root_id = snapshot.get("root")
    if root_id is None:
        return []
    tree = _index(snapshot)
    queue = deque([root_id])
    order = []
    while queue:
        node_id = queue.popleft()
        order.append(node_id)
        node = tree[node_id]
        if node["left"] is not None:
            queue.append(node["left"])
        if node["right"] is not None:
            queue.append(node["right"])
    return order

"""
Caller-side logic for the BST visualizer, kept free of Qt so it can be tested.

Raw text from the input box is parsed here, guarded against duplicates and
missing keys, and turned into user-facing messages. The tree itself never sees
invalid input.
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from bst.bst_model import BinarySearchTree

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[+-]?\d+")

INVALID_VALUE_TEXT = "Please enter a valid integer!"
INVALID_SEQUENCE_TEXT = "Every value in the list must be an integer!"
EMPTY_SEQUENCE_TEXT = "Enter at least one integer to create a tree!"


class MessageLevel(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Message:
    text: str
    level: MessageLevel = MessageLevel.INFO


@dataclass(frozen=True)
class ActionOutcome:
    """What an action did: the message to show and whether the tree changed."""

    message: Optional[Message]
    changed: bool = False
    value: Optional[int] = None


@dataclass(frozen=True)
class TreeStats:
    node_count: int
    height: int
    traversal: str


def parse_value(raw: str) -> int:
    text = (raw or "").strip()
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"not an integer: {raw!r}")
    return int(text)


def parse_sequence(text: str) -> List[int]:
    if not text:
        return []
    normalized = text.replace("，", ",")
    tokens = [part for part in re.split(r"[,\s]+", normalized) if part]
    return [parse_value(token) for token in tokens]


def format_traversal(values: Iterable[int]) -> str:
    values = list(values)
    if not values:
        return "Empty"
    return " → ".join(str(value) for value in values)


class BSTActions:
    def __init__(self, model: BinarySearchTree):
        self.model = model

    def insert(self, raw: str) -> ActionOutcome:
        try:
            value = parse_value(raw)
        except ValueError:
            return self._invalid()

        if self.model.search(value):
            return ActionOutcome(
                Message(f"Value {value} already exists in the tree!", MessageLevel.WARNING),
                value=value,
            )

        self.model.insert(value)
        logger.info("insert %d", value)
        return ActionOutcome(
            Message(f"Inserted: {value}", MessageLevel.SUCCESS),
            changed=True,
            value=value,
        )

    def delete(self, raw: str) -> ActionOutcome:
        try:
            value = parse_value(raw)
        except ValueError:
            return self._invalid()

        if not self.model.search(value):
            return ActionOutcome(
                Message(f"Value {value} not found in the tree!", MessageLevel.WARNING),
                value=value,
            )

        self.model.delete(value)
        logger.info("delete %d", value)
        return ActionOutcome(
            Message(f"Deleted: {value}", MessageLevel.ERROR),
            changed=True,
            value=value,
        )

    def search(self, raw: str) -> ActionOutcome:
        try:
            value = parse_value(raw)
        except ValueError:
            return self._invalid()

        if self.model.search(value):
            message = Message(f"Found: {value}", MessageLevel.SUCCESS)
        else:
            message = Message(f"Not found: {value}", MessageLevel.WARNING)
        return ActionOutcome(message, value=value)

    def clear(self, confirm: Callable[[], bool]) -> ActionOutcome:
        """Clear the tree once ``confirm()`` agrees; an empty tree is left alone."""
        if self.model.is_empty():
            return ActionOutcome(Message("Tree is already empty!", MessageLevel.WARNING))
        if not confirm():
            return ActionOutcome(None)

        self.model.clear()
        logger.info("clear")
        return ActionOutcome(Message("Tree cleared", MessageLevel.SUCCESS), changed=True)

    def create(self, text: str) -> ActionOutcome:
        try:
            values = parse_sequence(text)
        except ValueError:
            return ActionOutcome(Message(INVALID_SEQUENCE_TEXT, MessageLevel.ERROR))
        if not values:
            return ActionOutcome(Message(EMPTY_SEQUENCE_TEXT, MessageLevel.WARNING))

        inserted = self.model.create_from_iterable(values)
        logger.info("create from %d values (%d distinct)", len(values), inserted)
        return ActionOutcome(
            Message(f"Created tree with {inserted} values", MessageLevel.SUCCESS),
            changed=True,
        )

    def stats(self) -> TreeStats:
        return TreeStats(
            node_count=self.model.count_nodes(),
            height=self.model.get_height(),
            traversal=format_traversal(self.model.inorder_traversal()),
        )

    @staticmethod
    def _invalid() -> ActionOutcome:
        return ActionOutcome(Message(INVALID_VALUE_TEXT, MessageLevel.ERROR))

import logging
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from bst.bst_actions import ActionOutcome, BSTActions, Message, MessageLevel, parse_value
from bst.bst_model import BinarySearchTree
from bst.bst_view import BSTView
from core.global_ctrl import GlobalController

logger = logging.getLogger(__name__)

MESSAGE_STYLES = {
    MessageLevel.SUCCESS: ("#e8f5e9", "#2e7d32"),
    MessageLevel.ERROR: ("#ffebee", "#c62828"),
    MessageLevel.WARNING: ("#fff3e0", "#ef6c00"),
    MessageLevel.INFO: ("#e3f2fd", "#1565c0"),
}


class BSTController(QWidget):
    """
    Builds the BST operation panel and the statistics panel, and bridges the
    tree model with its view.
    """

    def __init__(self, global_ctrl: GlobalController, model: Optional[BinarySearchTree] = None):
        super().__init__()
        self.model = model if model is not None else BinarySearchTree()
        self.actions = BSTActions(self.model)
        self.view = BSTView(global_ctrl)
        self._panel_locked = False

        self._build_inputs()
        self.panel = self._create_panel()
        self.info_panel = self._create_info_panel()

        self.view.interactionLocked.connect(self._on_lock_state)
        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.findRequested.connect(self._handle_find_from_view)
        self.view.clearRequested.connect(self._on_clear)

        self.show_message(Message("Enter an integer to get started"))
        self._refresh()

    # ---------- UI construction ----------

    def _build_inputs(self):
        self.value_edit = QLineEdit()
        self.value_edit.setPlaceholderText("Value")
        self.value_edit.returnPressed.connect(self._on_insert)

    def _create_panel(self):
        container = QWidget()
        layout = QGridLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)

        create_btn = QPushButton("Create From List")
        create_btn.clicked.connect(self._on_create)
        layout.addWidget(self._single_button_group("Create", create_btn), 0, 0)

        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(self._on_clear)
        layout.addWidget(self._single_button_group("Reset", clear_btn), 0, 1)

        ops_group = QGroupBox("Operations")
        ops_group.setStyleSheet("QGroupBox { color: white; }")
        ops_layout = QFormLayout()
        ops_layout.setContentsMargins(12, 8, 12, 12)
        ops_layout.setSpacing(6)
        ops_layout.addRow("Value:", self.value_edit)

        buttons = QHBoxLayout()
        insert_btn = QPushButton("Insert")
        insert_btn.clicked.connect(self._on_insert)
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._on_delete)
        search_btn = QPushButton("Search")
        search_btn.clicked.connect(self._on_search)
        for button in (insert_btn, delete_btn, search_btn):
            buttons.addWidget(button)
        ops_layout.addRow(buttons)
        ops_group.setLayout(ops_layout)
        layout.addWidget(ops_group, 1, 0, 1, 2)

        layout.setRowStretch(2, 1)

        self.create_btn = create_btn
        self.clear_btn = clear_btn
        self.insert_btn = insert_btn
        self.delete_btn = delete_btn
        self.search_btn = search_btn

        return container

    def _create_info_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)

        self.message_label = QLabel()
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label)

        traversal_group = QGroupBox("Inorder Traversal")
        traversal_group.setStyleSheet("QGroupBox { color: white; }")
        traversal_layout = QVBoxLayout(traversal_group)
        self.traversal_label = QLabel()
        self.traversal_label.setWordWrap(True)
        self.traversal_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        traversal_layout.addWidget(self.traversal_label)
        layout.addWidget(traversal_group)

        stats_group = QGroupBox("Statistics")
        stats_group.setStyleSheet("QGroupBox { color: white; }")
        stats_layout = QFormLayout(stats_group)
        self.count_label = QLabel()
        self.height_label = QLabel()
        stats_layout.addRow("Nodes:", self.count_label)
        stats_layout.addRow("Height:", self.height_label)
        layout.addWidget(stats_group)

        layout.addStretch(1)
        return container

    @staticmethod
    def _single_button_group(title, button):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        vlayout = QVBoxLayout(group)
        vlayout.setContentsMargins(12, 10, 12, 12)
        vlayout.setSpacing(6)
        vlayout.addWidget(button)
        return group

    def build_panel(self):
        return self.panel

    def build_info_panel(self):
        return self.info_panel

    # ---------- Lifecycle ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        self.view.show_snapshot(self.model.snapshot())
        self._refresh()

    # ---------- Operation callbacks ----------

    def _on_insert(self):
        outcome = self.actions.insert(self.value_edit.text())
        self._report(outcome)
        if not outcome.changed:
            return
        inserted_id, path = self.model.find_path(outcome.value)
        self.view.animate_insert(self.model.snapshot(), inserted_id, path[:-1])
        self.value_edit.clear()
        self._refresh()

    def _on_delete(self):
        value = self._peek_value()
        target_id, path = self.model.find_path(value) if value is not None else (None, [])
        outcome = self.actions.delete(self.value_edit.text())
        self._report(outcome)
        if not outcome.changed:
            return
        self.view.animate_delete(self.model.snapshot(), target_id, path)
        self.value_edit.clear()
        self._refresh()

    def _on_search(self):
        outcome = self.actions.search(self.value_edit.text())
        self._report(outcome)
        if outcome.value is None or self.model.is_empty():
            return
        found_id, path = self.model.find_path(outcome.value)
        self.view.animate_find(self.model.snapshot(), found_id, path)

    def _on_clear(self):
        outcome = self.actions.clear(self._confirm_clear)
        self._report(outcome)
        if outcome.changed:
            self.view.reset()
            self._refresh()

    def _on_create(self):
        text, ok = QInputDialog.getText(
            self,
            "Create BST",
            "Enter integers (comma-separated):",
        )
        if not ok:
            return
        outcome = self.actions.create(text)
        self._report(outcome)
        if not outcome.changed:
            return
        self.view.animate_build(self.model.snapshot())
        self._refresh()

    def _confirm_clear(self) -> bool:
        answer = QMessageBox.question(
            self,
            "Clear Tree",
            "Are you sure you want to clear the entire tree?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return answer == QMessageBox.Yes

    def _handle_delete_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.value_edit.setText(str(value))
        self._on_delete()

    def _handle_find_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.value_edit.setText(str(value))
        self._on_search()

    # ---------- State management ----------

    def show_message(self, message: Message):
        background, foreground = MESSAGE_STYLES[message.level]
        self.message_label.setText(message.text)
        self.message_label.setStyleSheet(
            f"QLabel {{ background-color: {background}; color: {foreground};"
            " padding: 8px 12px; border-radius: 6px; font-weight: 600; }"
        )

    def _report(self, outcome: ActionOutcome):
        if outcome.message is not None:
            logger.debug("%s: %s", outcome.message.level.value, outcome.message.text)
            self.show_message(outcome.message)

    def _refresh(self):
        stats = self.actions.stats()
        self.traversal_label.setText(stats.traversal)
        self.count_label.setText(str(stats.node_count))
        self.height_label.setText(str(stats.height))
        self._refresh_inputs()

    def _refresh_inputs(self):
        has_nodes = not self.model.is_empty()
        state = self._panel_locked
        for widget in (self.create_btn, self.insert_btn, self.clear_btn, self.value_edit):
            widget.setDisabled(state)
        for widget in (self.delete_btn, self.search_btn):
            widget.setDisabled(state or not has_nodes)

    def _on_lock_state(self, locked):
        self._panel_locked = locked
        self._refresh_inputs()

    def _peek_value(self) -> Optional[int]:
        try:
            return parse_value(self.value_edit.text())
        except ValueError:
            return None

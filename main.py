import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from bst.bst_actions import parse_sequence
from bst.bst_ctrl import BSTController
from core.global_ctrl import GlobalController
from widgets.graphics_view import CustomGraphicsView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main window: tree canvas and controls on the left, tree info on the right."""

    def __init__(self, initial_values: Iterable[int] = ()):
        super().__init__()
        self.setWindowTitle("PyQt5 BST Visualizer")
        self.resize(1280, 760)

        self.global_ctrl = GlobalController()
        self.controller = BSTController(self.global_ctrl)

        initial_values = list(initial_values)
        if initial_values:
            self.controller.model.create_from_iterable(initial_values)

        self._build_ui()
        self._connect_signals()

        style_path = Path(__file__).parent / "resources" / "styles.qss"
        if style_path.exists():
            with open(style_path, "r", encoding="utf-8") as handle:
                self.setStyleSheet(handle.read())

        self.controller.on_activate(self.graphics_view)

    def _build_ui(self):
        central = QWidget(self)
        self.setCentralWidget(central)

        root_layout = QHBoxLayout(central)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(8)

        # Left panel (70%)
        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.setSpacing(6)

        self.graphics_view = CustomGraphicsView()
        left_layout.addWidget(self.graphics_view, 1)

        speed_layout = QHBoxLayout()
        speed_label = QLabel("Animation Speed")
        self.speed_value_label = QLabel("1.0×")
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(50, 300)  # maps to 0.5x – 3x
        self.speed_slider.setValue(100)
        speed_layout.addWidget(speed_label)
        speed_layout.addWidget(self.speed_slider, 1)
        speed_layout.addWidget(self.speed_value_label)
        left_layout.addLayout(speed_layout)

        left_layout.addWidget(self.controller.build_panel(), 0)

        # Right panel (30%)
        right_panel = QWidget()
        right_layout = QVBoxLayout(right_panel)
        right_layout.setContentsMargins(0, 0, 0, 0)
        right_layout.addWidget(self.controller.build_info_panel(), 1)

        root_layout.addWidget(left_panel, 14)
        root_layout.addWidget(right_panel, 6)

    def _connect_signals(self):
        self.speed_slider.valueChanged.connect(self._on_speed_slider_changed)

    def _on_speed_slider_changed(self, value):
        speed = value / 100.0
        self.speed_value_label.setText(f"{speed:.1f}×")
        self.global_ctrl.set_speed(speed)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive binary search tree visualizer.")
    parser.add_argument(
        "--values",
        default="",
        help="comma-separated integers to insert at start-up",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None):
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        initial_values = parse_sequence(args.values)
    except ValueError as error:
        logger.error("invalid --values: %s", error)
        return 2

    app = QApplication(sys.argv[:1])
    window = MainWindow(initial_values)
    window.showMaximized()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())

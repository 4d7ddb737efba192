from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPainter, QWheelEvent
from PyQt5.QtWidgets import QGraphicsView

ZOOM_FACTOR = 1.1


class CustomGraphicsView(QGraphicsView):
    """
    Canvas for the tree scene:
    - normal wheel: vertical panning only
    - Ctrl + wheel: zoom by ZOOM_FACTOR around the cursor
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(self.renderHints() | QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setInteractive(True)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta().y()
        if event.modifiers() & Qt.ControlModifier:
            factor = ZOOM_FACTOR if delta > 0 else (1 / ZOOM_FACTOR)
            self.scale(factor, factor)
        else:
            self.translate(0, -delta * 0.2)
        event.accept()

import math

from PyQt5.QtCore import QObject, QPointF, QRectF, pyqtSignal
from PyQt5.QtWidgets import QGraphicsScene

from core.animation import AnimationToolkit


DEFAULT_SCENE_RECT = QRectF(-200, -200, 1200, 800)
MIN_VIEW_SCALE = 0.05
MAX_VIEW_SCALE = 1.0  # small trees are not magnified
CAMERA_MS = 360


def _lerp(start, end, t):
    return start + (end - start) * t


class BaseStructureView(QObject):
    """
    Owns the scene and the bound canvas for the tree view.

    Animations started through ``_track_animation`` keep the controller's
    inputs locked until the last one finishes. Camera moves are not tracked
    and never lock anything.
    """

    interactionLocked = pyqtSignal(bool)

    def __init__(self, global_ctrl):
        super().__init__()
        self.scene = QGraphicsScene()
        self.scene.setSceneRect(DEFAULT_SCENE_RECT)
        self.anim = AnimationToolkit(global_ctrl)
        self._running = []
        self._canvas = None
        self._camera = None

    @property
    def interactions_locked(self) -> bool:
        return bool(self._running)

    def bind_canvas(self, view):
        self._stop_camera()
        self._canvas = view
        if view is not None:
            view.setScene(self.scene)
            view.resetTransform()

    # ---------- Camera ----------

    def auto_fit_view(self, padding=120):
        """Grow the scene around the drawn items and glide the canvas onto it."""
        if self._canvas is None:
            return
        target = self._fit_rect(padding)
        self.scene.setSceneRect(target)
        self._glide_to(target)

    def _fit_rect(self, padding):
        bounds = self.scene.itemsBoundingRect()
        if bounds.isNull():
            return QRectF(DEFAULT_SCENE_RECT)
        padded = bounds.adjusted(-padding, -padding, padding, padding)
        if DEFAULT_SCENE_RECT.contains(padded):
            return QRectF(DEFAULT_SCENE_RECT)
        return padded

    def _fit_scale(self, rect, viewport):
        scale = min(
            viewport.width() / max(rect.width(), 1.0),
            viewport.height() / max(rect.height(), 1.0),
        )
        return min(max(MIN_VIEW_SCALE, scale), MAX_VIEW_SCALE)

    def _current_camera(self, viewport):
        scale = self._canvas.transform().m11()
        if not math.isfinite(scale) or abs(scale) < 1e-4:
            scale = 1.0
        return scale, self._canvas.mapToScene(viewport.center())

    def _glide_to(self, rect):
        viewport = self._canvas.viewport().rect()
        if rect.isNull() or viewport.isNull():
            return

        from_scale, from_center = self._current_camera(viewport)
        to_scale, to_center = self._fit_scale(rect, viewport), rect.center()
        if (
            abs(to_scale - from_scale) < 1e-6
            and (to_center - from_center).manhattanLength() < 1e-6
        ):
            return

        def step(t):
            self._place_camera(
                _lerp(from_scale, to_scale, t),
                QPointF(
                    _lerp(from_center.x(), to_center.x(), t),
                    _lerp(from_center.y(), to_center.y(), t),
                ),
            )

        def land():
            self._place_camera(to_scale, to_center)
            self._camera = None

        self._stop_camera()
        camera = self.anim.progress(step, duration=CAMERA_MS, parent=self)
        camera.finished.connect(land)
        self._camera = camera
        camera.start()

    def _place_camera(self, scale, center):
        if self._canvas is None:
            return
        self._canvas.resetTransform()
        self._canvas.scale(scale, scale)
        self._canvas.centerOn(center)

    def _stop_camera(self):
        camera, self._camera = self._camera, None
        if camera is not None:
            camera.stop()

    # ---------- Animation lifecycle ----------

    def stop_all_animations(self):
        """Stop running animations without firing their finalizers."""
        running, self._running = self._running, []
        for animation in running:
            try:
                animation.finished.disconnect()
            except TypeError:
                pass
            animation.stop()
        self._stop_camera()
        if running:
            self.interactionLocked.emit(False)

    def _track_animation(self, animation, finalizer=None):
        """
        Start ``animation`` and hold a reference until it finishes, then run
        ``finalizer``.
        """
        if animation is None:
            return

        if not self._running:
            self.interactionLocked.emit(True)
        self._running.append(animation)

        def done():
            if animation in self._running:
                self._running.remove(animation)
                if not self._running:
                    self.interactionLocked.emit(False)
            if finalizer:
                finalizer()

        animation.finished.connect(done)
        animation.start()

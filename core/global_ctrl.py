import logging

from PyQt5.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)

MIN_SPEED = 0.5
MAX_SPEED = 3.0


class GlobalController(QObject):
    """
    Holds the playback speed multiplier shared by every animation and emits
    changes so running views can pick it up.
    """

    speedChanged = pyqtSignal(float)

    def __init__(self, speed: float = 1.0):
        super().__init__()
        self._speed = self.clamp(speed)

    @property
    def speed(self) -> float:
        return self._speed

    @staticmethod
    def clamp(value: float) -> float:
        return max(MIN_SPEED, min(MAX_SPEED, value))

    def set_speed(self, value: float):
        """Clamp to 0.5× – 3× and broadcast when the value actually changes."""
        value = self.clamp(value)
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            logger.debug("animation speed set to %.2fx", value)
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """
        Convert a base duration (ms) into the playback duration. Higher speed
        means a shorter duration; the result is never below 1 ms.
        """
        return max(1, int(base_ms / self._speed))

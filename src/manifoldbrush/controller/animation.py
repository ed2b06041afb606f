"""
Trajectory Playback
===================
Host-side animated accumulation along a TrajectoryBrush path.

The brush itself stays pure: this player calls `evaluate_at_path_index` once
per timer tick, sums the results and publishes the normalised running total.
Stopping is idempotent and keeps the accumulated field as it is.

Classes:
    TrajectoryPlayer: QTimer-driven accumulator.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, QTimer, Signal, Slot

from manifoldbrush.config import DEFAULT_PLAYBACK_INTERVAL_MS
from manifoldbrush.controller.brushes.base import normalize_max_abs
from manifoldbrush.errors import ManifoldBrushError

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.controller.brushes import TrajectoryBrush

logger = logging.getLogger(__name__)


class TrajectoryPlayer(QObject):
    # Signals to update the host from each tick
    frame_ready = Signal(object)       # normalised accumulated field
    path_index_changed = Signal(int)
    finished = Signal()
    error_occurred = Signal(str)

    def __init__(self, brush: TrajectoryBrush, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.brush = brush
        self._timer = QTimer(self)
        self._timer.timeout.connect(self.step)
        self._accumulated: npt.NDArray[np.float64] | None = None
        self._index = 0
        self._length = 0
        self.is_running = False

    @property
    def accumulated(self) -> Optional[npt.NDArray[np.float64]]:
        """Normalised running total, None before the first `prepare()`."""
        if self._accumulated is None:
            return None
        return normalize_max_abs(self._accumulated.copy())

    @property
    def path_index(self) -> int:
        """Index of the next path vertex to be accumulated."""
        return self._index

    @property
    def path_length(self) -> int:
        return self._length

    def prepare(self, source: int) -> npt.NDArray[np.int64]:
        """Compute the path from `source` and reset the accumulator."""
        path = self.brush.get_path(source)
        self._accumulated = np.zeros(self.brush.manifold.n_vertices, dtype=np.float64)
        self._index = 0
        self._length = len(path)
        return path

    def start(self, source: int, interval_ms: int = DEFAULT_PLAYBACK_INTERVAL_MS) -> None:
        """Prepare the path and tick every `interval_ms` until the end of the path."""
        self.stop()
        self.prepare(source)
        logger.info(f"Starting trajectory playback over {self._length} vertices.")
        self.is_running = True
        self._timer.start(interval_ms)

    @Slot()
    def step(self) -> bool:
        """
        Accumulate the next path vertex.

        Returns:
            False once the path is exhausted (or on error), True otherwise.
        """
        if self._accumulated is None or self._index >= self._length:
            self.stop()
            return False

        try:
            w = self.brush.evaluate_at_path_index(self._index)
        except ManifoldBrushError as e:
            logger.error(f"Trajectory playback failed at index {self._index}: {e}")
            self.error_occurred.emit(str(e))
            self.stop()
            return False

        self._accumulated += w
        self.path_index_changed.emit(self._index)
        self._index += 1
        self.frame_ready.emit(self.accumulated)

        if self._index >= self._length:
            self.stop()
            logger.info("Trajectory playback finished.")
            self.finished.emit()
        return True

    def stop(self) -> None:
        """Stop ticking. Safe to call any number of times."""
        if self._timer.isActive():
            self._timer.stop()
        self.is_running = False


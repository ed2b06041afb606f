from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from manifoldbrush.controller.brushes import ManifoldBrush, create_brush
from manifoldbrush.errors import MissingBrushError

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)


class ManifoldBrushModel(QObject):
    """Owns exactly one active ManifoldBrush and forwards evaluation to it."""
    brush_changed = Signal(object)

    def __init__(self, brush: Optional[ManifoldBrush] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._brush = brush

    @property
    def brush(self) -> Optional[ManifoldBrush]:
        return self._brush

    @brush.setter
    def brush(self, brush: Optional[ManifoldBrush]) -> None:
        self._brush = brush
        logger.debug(f"Active brush set to {brush!r}.")
        self.brush_changed.emit(brush)

    def select_tool(self, key: str, manifold: Optional[Manifold] = None) -> ManifoldBrush:
        """Replace the active brush with a fresh instance of a registered tool."""
        brush = create_brush(key, manifold)
        self.brush = brush
        return brush

    def evaluate(self, seed: Optional[int] = None) -> npt.NDArray[np.float64]:
        if self._brush is None:
            raise MissingBrushError("No brush is set.")
        return self._brush.evaluate(seed)

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject

from manifoldbrush.controller.brushes.base import ManifoldBrush
from manifoldbrush.controller.brushes.registry import register_brush

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.manifold import Manifold


@register_brush
class DeltaBrush(ManifoldBrush):
    """Kronecker delta at the seed vertex."""
    KEY = "delta"
    LABEL = "Delta Brush"

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        seed: int = 0,
        weight: float = 1.0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(manifold, weight, parent)
        self._seed = int(seed)

    @property
    def seed(self) -> int:
        """Default seed used when `evaluate()` gets none."""
        return self._seed

    @seed.setter
    def seed(self, seed: int) -> None:
        self._seed = int(seed)
        self.changed.emit("seed")

    def _evaluate_core(self, seed: Optional[int]) -> npt.NDArray[np.float64]:
        vertex = self._check_vertex(self._seed if seed is None else seed)
        w = np.zeros(self.manifold.n_vertices, dtype=np.float64)
        w[vertex] = 1.0
        return w

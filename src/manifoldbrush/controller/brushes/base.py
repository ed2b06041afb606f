from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from manifoldbrush.errors import MissingManifoldError, InvalidVertexError, ConfigurationError

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)


def normalize_max_abs(w: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Scale so that max |w| == 1, zero vectors are returned unchanged."""
    m = float(np.max(np.abs(w))) if w.size else 0.0
    if m > 0:
        return w / m
    return w


class ManifoldBrush(QObject):
    """
    Base class for manifold brush operators.

    `evaluate(seed)` returns `weight * _evaluate_core(seed)`, a per-vertex
    field of length N. Subclasses implement `_evaluate_core` and raise a
    `ManifoldBrushError` when they cannot produce a field.
    """
    KEY: str = "base"  # Override in subclass
    LABEL: str = "Brush"

    changed = Signal(str)

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        weight: float = 1.0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self._manifold = manifold
        self._weight = float(weight)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(weight={self._weight})"

    # ---- shared state ----

    @property
    def manifold(self) -> Optional[Manifold]:
        return self._manifold

    @manifold.setter
    def manifold(self, manifold: Optional[Manifold]) -> None:
        self._manifold = manifold
        self._manifold_replaced()
        self.changed.emit("manifold")

    @property
    def weight(self) -> float:
        return self._weight

    @weight.setter
    def weight(self, weight: float) -> None:
        self._weight = float(weight)
        self.changed.emit("weight")

    # ---- evaluation ----

    def evaluate(self, seed: Optional[int] = None) -> npt.NDArray[np.float64]:
        """
        Evaluate the brush at `seed` (or at the brush's own default).

        Raises:
            MissingManifoldError: if no manifold is attached.
        """
        if self._manifold is None:
            raise MissingManifoldError(f"{self.__class__.__name__}: manifold must be set before evaluation.")
        w0 = self._evaluate_core(seed)
        return self._weight * w0

    def _evaluate_core(self, seed: Optional[int]) -> npt.NDArray[np.float64]:
        raise NotImplementedError("`_evaluate_core` must be implemented in subclass.")

    # ---- utilities ----

    def _manifold_replaced(self) -> None:
        """Hook for subclasses holding manifold-dependent state."""
        pass

    def _check_vertex(self, vertex: int, name: str = "seed") -> int:
        vertex = int(vertex)
        if not self._manifold.is_valid_vertex(vertex):
            raise InvalidVertexError(
                f"{name.capitalize()} vertex {vertex} outside [0, {self._manifold.n_vertices})."
            )
        return vertex

    def _require_seed(self, seed: Optional[int]) -> int:
        if seed is None:
            raise ConfigurationError(f"{self.__class__.__name__} requires a seed vertex.")
        return self._check_vertex(seed)

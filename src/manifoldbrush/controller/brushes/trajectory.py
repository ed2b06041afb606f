from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject

from manifoldbrush.config import DEFAULT_USE_WEIGHTED
from manifoldbrush.controller.brushes.base import ManifoldBrush, normalize_max_abs
from manifoldbrush.controller.brushes.registry import register_brush
from manifoldbrush.controller.brushes.spectral import SpectralBrush
from manifoldbrush.errors import (
    ConfigurationError, MissingManifoldError, PathNotComputedError, InvalidPathIndexError
)
from manifoldbrush.model.graph import GraphCache, GraphBuilder, shortest_path

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.kernel_model import KernelModel
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)


@register_brush
class TrajectoryBrush(ManifoldBrush):
    """
    Applies a base brush (SpectralBrush by default) along the shortest path
    from the source (seed) to `target`.

    `evaluate(source)` returns the normalised sum over the whole path. The
    brush keeps no playback state; animated accumulation is done by the host
    calling `evaluate_at_path_index` once per tick.
    """
    KEY = "trajectory"
    LABEL = "Trajectory Brush"

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        target: int = 0,
        base_brush: Optional[ManifoldBrush] = None,
        kernel_model: Optional[KernelModel] = None,
        use_weighted: bool = DEFAULT_USE_WEIGHTED,
        graph_builder: Optional[GraphBuilder] = None,
        weight: float = 1.0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(manifold, weight, parent)
        self._target = int(target)
        self._use_weighted = bool(use_weighted)
        self._cache = GraphCache(graph_builder)
        self._path: npt.NDArray[np.int64] | None = None

        # Graph is built lazily on the first get_path()
        self._base_brush = base_brush if base_brush is not None else SpectralBrush(manifold)
        self._base_brush.manifold = manifold
        self._kernel_model = None
        if kernel_model is not None:
            self.kernel_model = kernel_model

    # ---- parameters ----

    @property
    def target(self) -> int:
        return self._target

    @target.setter
    def target(self, target: int) -> None:
        target = int(target)
        if self.manifold is not None:
            target = self._check_vertex(target, "target")
        self._target = target
        self.changed.emit("target")

    @property
    def base_brush(self) -> ManifoldBrush:
        return self._base_brush

    @base_brush.setter
    def base_brush(self, brush: ManifoldBrush) -> None:
        brush.manifold = self.manifold
        if self._kernel_model is not None and hasattr(brush, "kernel_model"):
            brush.kernel_model = self._kernel_model
        self._base_brush = brush
        self.changed.emit("base_brush")

    @property
    def kernel_model(self) -> Optional[KernelModel]:
        return self._kernel_model

    @kernel_model.setter
    def kernel_model(self, kernel_model: Optional[KernelModel]) -> None:
        self._kernel_model = kernel_model
        if hasattr(self._base_brush, "kernel_model"):
            self._base_brush.kernel_model = kernel_model
        self.changed.emit("kernel_model")

    @property
    def use_weighted(self) -> bool:
        return self._use_weighted

    @use_weighted.setter
    def use_weighted(self, use_weighted: bool) -> None:
        self._use_weighted = bool(use_weighted)
        self.changed.emit("use_weighted")

    @property
    def path(self) -> Optional[npt.NDArray[np.int64]]:
        """Path of the last `get_path()` call."""
        return None if self._path is None else self._path.copy()

    # ---- path operations ----

    def get_path(self, source: int) -> npt.NDArray[np.int64]:
        """
        Shortest path from `source` to `target`, both endpoints included.

        Raises:
            NoPathFoundError: if source and target are not connected.
        """
        if self.manifold is None:
            raise MissingManifoldError("TrajectoryBrush: manifold must be set.")
        source = self._check_vertex(source, "source")
        target = self._check_vertex(self._target, "target")

        graph = self._cache.get(self.manifold, self._use_weighted)
        self._path = shortest_path(graph, source, target)
        logger.debug(f"Trajectory {source} -> {target}: {len(self._path)} vertices.")
        return self._path.copy()

    def evaluate_at_path_index(self, path_index: int) -> npt.NDArray[np.float64]:
        """Base brush evaluated at the path vertex `path_index` (0-based)."""
        if self._path is None:
            raise PathNotComputedError("Path must be computed first using get_path().")
        if not 0 <= path_index < len(self._path):
            raise InvalidPathIndexError(
                f"Path index must be between 0 and {len(self._path) - 1}, got {path_index}."
            )
        return self._base_brush.evaluate(int(self._path[path_index]))

    def evaluate_full_trajectory(self, source: int) -> npt.NDArray[np.float64]:
        """Normalised sum of the base brush over every vertex of the path."""
        path = self.get_path(source)
        w = np.zeros(self.manifold.n_vertices, dtype=np.float64)
        for i in range(len(path)):
            w += self.evaluate_at_path_index(i)
        return normalize_max_abs(w)

    def _evaluate_core(self, seed: Optional[int]) -> npt.NDArray[np.float64]:
        if self._base_brush is None:
            raise ConfigurationError("TrajectoryBrush: base brush must be set.")
        if seed is None:
            raise ConfigurationError("TrajectoryBrush requires a source vertex.")
        return self.evaluate_full_trajectory(seed)

    def _manifold_replaced(self) -> None:
        self._path = None
        self._base_brush.manifold = self.manifold

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject

from manifoldbrush.config import (
    DEFAULT_SELECTION_MODE, DEFAULT_K, DEFAULT_DISTANCE_THRESHOLD, DEFAULT_USE_WEIGHTED
)
from manifoldbrush.controller.brushes.base import ManifoldBrush
from manifoldbrush.controller.brushes.registry import register_brush
from manifoldbrush.errors import InvalidSelectionModeError, MissingManifoldError
from manifoldbrush.model.graph import GraphCache, GraphBuilder, shortest_distances, component_labels

if TYPE_CHECKING:
    import numpy.typing as npt
    import scipy as sp
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)


class SelectionMode(StrEnum):
    K_NEIGHBORS = "KNeighbors"
    DISTANCE = "Distance"
    COMPONENT = "Component"


@register_brush
class GraphBrush(ManifoldBrush):
    """
    Graph-neighbourhood brush on the mesh edge graph.

    Modes:
        KNeighbors: vertices whose shortest-path distance is <= `k`.
        Distance:   vertices whose shortest-path distance is <= `distance_threshold`.

    Distances use edge lengths when `use_weighted`, unit weights (hop count)
    otherwise.
        Component:  the whole connected component of the seed.

    The graph is built once per manifold generation and reused for every seed.
    """
    KEY = "graph"
    LABEL = "Graph Brush"

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        selection_mode: str = DEFAULT_SELECTION_MODE,
        k: int = DEFAULT_K,
        distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
        use_weighted: bool = DEFAULT_USE_WEIGHTED,
        graph_builder: Optional[GraphBuilder] = None,
        weight: float = 1.0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(manifold, weight, parent)
        self._selection_mode = self._parse_mode(selection_mode)
        self._k = self._check_k(k)
        self._distance_threshold = float(distance_threshold)
        self._use_weighted = bool(use_weighted)
        self._cache = GraphCache(graph_builder)

    @staticmethod
    def _parse_mode(mode: str) -> SelectionMode:
        try:
            return SelectionMode(mode)
        except ValueError:
            valid = ", ".join(m.value for m in SelectionMode)
            raise InvalidSelectionModeError(f"Unknown selection mode '{mode}', expected one of: {valid}.") from None

    @staticmethod
    def _check_k(k: int) -> int:
        k = int(k)
        if k < 0:
            raise ValueError(f"Neighbourhood size k must be nonnegative, got {k}.")
        return k

    # ---- parameters ----

    @property
    def selection_mode(self) -> SelectionMode:
        return self._selection_mode

    @selection_mode.setter
    def selection_mode(self, mode: str) -> None:
        self._selection_mode = self._parse_mode(mode)
        self.changed.emit("selection_mode")

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, k: int) -> None:
        self._k = self._check_k(k)
        self.changed.emit("k")

    @property
    def distance_threshold(self) -> float:
        return self._distance_threshold

    @distance_threshold.setter
    def distance_threshold(self, threshold: float) -> None:
        self._distance_threshold = float(threshold)
        self.changed.emit("distance_threshold")

    @property
    def use_weighted(self) -> bool:
        return self._use_weighted

    @use_weighted.setter
    def use_weighted(self, use_weighted: bool) -> None:
        self._use_weighted = bool(use_weighted)
        self.changed.emit("use_weighted")

    @property
    def graph_builds(self) -> int:
        """Number of times the cached graph has been (re)built."""
        return self._cache.builds

    def graph(self) -> sp.sparse.csr_matrix:
        """Cached mesh graph of the current manifold."""
        if self.manifold is None:
            raise MissingManifoldError("GraphBrush: manifold must be set before building the graph.")
        return self._cache.get(self.manifold, self._use_weighted)

    # ---- evaluation ----

    def _evaluate_core(self, seed: Optional[int]) -> npt.NDArray[np.float64]:
        seed = self._require_seed(seed)
        graph = self.graph()
        w = np.zeros(self.manifold.n_vertices, dtype=np.float64)

        if self._selection_mode == SelectionMode.K_NEIGHBORS:
            d = shortest_distances(graph, seed)
            nodes = d <= self._k
        elif self._selection_mode == SelectionMode.DISTANCE:
            d = shortest_distances(graph, seed)
            nodes = d <= self._distance_threshold
        else:  # SelectionMode.COMPONENT
            labels = component_labels(graph)
            nodes = labels == labels[seed]

        w[nodes] = 1.0
        return w

"""
Mesh Graph Utilities
====================
Turns a triangulated Manifold into a weighted undirected graph and answers
the shortest-path questions the brushes need.

Graphs are symmetric `scipy.sparse.csr_matrix` adjacency matrices; the
queries are thin wrappers around `scipy.sparse.csgraph`.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

import numpy as np
import scipy as sp
from scipy.sparse import csgraph

from manifoldbrush.errors import NoPathFoundError, InvalidVertexError

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)

GraphBuilder = Callable[["Manifold", bool], sp.sparse.csr_matrix]


def mesh_edges(faces: npt.NDArray[np.int64]) -> npt.NDArray[np.int64]:
    """Unique undirected edges (i < j) of a triangle list, degenerate edges dropped."""
    if faces.size == 0:
        return np.empty((0, 2), dtype=np.int64)
    edges = np.vstack([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    edges = np.sort(edges, axis=1)
    edges = edges[edges[:, 0] != edges[:, 1]]
    return np.unique(edges, axis=0)


def build_graph(manifold: Manifold, use_weighted: bool = True) -> sp.sparse.csr_matrix:
    """
    Weighted undirected adjacency of the mesh.

    Args:
        manifold: Source mesh.
        use_weighted: Euclidean edge lengths if True, unit weights otherwise.

    Returns:
        Symmetric (N, N) CSR matrix.
    """
    n = manifold.n_vertices
    edges = mesh_edges(manifold.faces)
    if use_weighted:
        weights = np.linalg.norm(manifold.vertices[edges[:, 0]] - manifold.vertices[edges[:, 1]], axis=1)
    else:
        weights = np.ones(len(edges), dtype=np.float64)

    row = np.concatenate([edges[:, 0], edges[:, 1]])
    col = np.concatenate([edges[:, 1], edges[:, 0]])
    data = np.concatenate([weights, weights])
    graph = sp.sparse.coo_matrix((data, (row, col)), shape=(n, n)).tocsr()
    logger.debug(f"Built mesh graph: {n} vertices, {len(edges)} edges (weighted={use_weighted}).")
    return graph


def _check_source(graph: sp.sparse.csr_matrix, vertex: int, name: str = "source") -> int:
    vertex = int(vertex)
    n = graph.shape[0]
    if not 0 <= vertex < n:
        raise InvalidVertexError(f"{name.capitalize()} vertex {vertex} outside [0, {n}).")
    return vertex


def shortest_distances(
    graph: sp.sparse.csr_matrix,
    source: int,
    unweighted: bool = False
) -> npt.NDArray[np.float64]:
    """Single-source shortest-path distances (inf for unreachable vertices)."""
    source = _check_source(graph, source)
    return csgraph.dijkstra(graph, directed=False, indices=source, unweighted=unweighted)


def component_labels(graph: sp.sparse.csr_matrix) -> npt.NDArray[np.int32]:
    """Connected-component label of every vertex."""
    _, labels = csgraph.connected_components(graph, directed=False)
    return labels


def shortest_path(graph: sp.sparse.csr_matrix, source: int, target: int) -> npt.NDArray[np.int64]:
    """
    Vertex sequence of a shortest path from source to target (both included).

    Raises:
        NoPathFoundError: if the endpoints are in different components.
    """
    source = _check_source(graph, source)
    target = _check_source(graph, target, "target")

    dist, predecessors = csgraph.dijkstra(
        graph, directed=False, indices=source, return_predecessors=True
    )
    if not np.isfinite(dist[target]):
        raise NoPathFoundError(source, target)

    path = [target]
    while path[-1] != source:
        path.append(int(predecessors[path[-1]]))
    return np.asarray(path[::-1], dtype=np.int64)


def geodesic_distance(manifold: Manifold, source: int, use_weighted: bool = True) -> npt.NDArray[np.float64]:
    """
    Approximate geodesic distance from `source` to every vertex.

    Exact geodesics are out of scope, shortest paths along mesh edges are used.
    """
    return shortest_distances(build_graph(manifold, use_weighted), source)


class GraphCache:
    """
    Lazily built mesh graph, reused until the manifold generation changes.

    Owned by a single brush, no locking.
    """

    def __init__(self, builder: Optional[GraphBuilder] = None) -> None:
        self.builder: GraphBuilder = builder or build_graph
        self._graph: Optional[sp.sparse.csr_matrix] = None
        self._key: Optional[tuple[int, bool]] = None
        self.builds = 0

    def get(self, manifold: Manifold, use_weighted: bool = True) -> sp.sparse.csr_matrix:
        key = (manifold.generation, bool(use_weighted))
        if self._graph is None or self._key != key:
            logger.debug(f"Graph cache miss for manifold generation {manifold.generation}.")
            self._graph = self.builder(manifold, use_weighted)
            self._key = key
            self.builds += 1
        return self._graph

    def clear(self) -> None:
        self._graph = None
        self._key = None

"""
Shared mesh fixtures.

All meshes are tiny and built in memory. The spectral basis of the ring is the
exact eigendecomposition of its graph Laplacian, computed with numpy.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
import scipy as sp

from manifoldbrush.model.manifold import Manifold


@pytest.fixture(autouse=True)
def _qt_application(qapp):
    """Every test runs with a Qt application instance alive."""
    yield


def make_grid(nx: int, ny: int) -> Manifold:
    """Flat nx-by-ny vertex grid with unit spacing, two triangles per cell."""
    xs, ys = np.meshgrid(np.arange(nx, dtype=float), np.arange(ny, dtype=float))
    vertices = np.column_stack([xs.ravel(), ys.ravel(), np.zeros(nx * ny)])
    faces = []
    for j in range(ny - 1):
        for i in range(nx - 1):
            v0 = j * nx + i
            v1, v2, v3 = v0 + 1, v0 + nx, v0 + nx + 1
            faces.append([v0, v1, v3])
            faces.append([v0, v3, v2])
    return Manifold(vertices=vertices, faces=np.asarray(faces, dtype=np.int64).reshape(-1, 3))


def make_ring(n: int, with_basis: bool = True) -> Manifold:
    """
    n vertices on the unit circle joined into a cycle.

    The cycle edges come from degenerate faces (i, i+1, i+1).
    """
    theta = 2 * np.pi * np.arange(n) / n
    vertices = np.column_stack([np.cos(theta), np.sin(theta), np.zeros(n)])
    nxt = (np.arange(n) + 1) % n
    faces = np.column_stack([np.arange(n), nxt, nxt])
    manifold = Manifold(vertices=vertices, faces=faces)
    if with_basis:
        adjacency = np.zeros((n, n))
        adjacency[np.arange(n), nxt] = 1.0
        adjacency[nxt, np.arange(n)] = 1.0
        laplacian = np.diag(adjacency.sum(axis=1)) - adjacency
        eigenvalues, eigenvectors = np.linalg.eigh(laplacian)
        manifold.set_spectral_basis(np.clip(eigenvalues, 0.0, None), eigenvectors)
    return manifold


@pytest.fixture
def grid_factory():
    return make_grid


@pytest.fixture
def ring_factory():
    return make_ring


@pytest.fixture
def grid_manifold() -> Manifold:
    return make_grid(5, 5)


@pytest.fixture
def ring_manifold() -> Manifold:
    return make_ring(100)


@pytest.fixture
def small_ring() -> Manifold:
    return make_ring(12)


@pytest.fixture
def two_triangles() -> Manifold:
    """Two disjoint triangles: {0, 1, 2} and {3, 4, 5}."""
    vertices = np.array([
        [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
        [5.0, 0.0, 0.0], [6.0, 0.0, 0.0], [5.0, 1.0, 0.0],
    ])
    faces = np.array([[0, 1, 2], [3, 4, 5]])
    return Manifold(vertices=vertices, faces=faces)


@pytest.fixture
def path_manifold() -> Manifold:
    """Five collinear vertices, no faces. Use with `path_graph_builder`."""
    vertices = np.column_stack([np.arange(5, dtype=float), np.zeros(5), np.zeros(5)])
    return Manifold(vertices=vertices, faces=np.empty((0, 3), dtype=np.int64))


@pytest.fixture
def path_graph_builder():
    """Graph adapter returning the unit-weight path 0-1-2-3-4."""
    def build(manifold, use_weighted=True):
        n = manifold.n_vertices
        row = np.arange(n - 1)
        col = row + 1
        data = np.ones(n - 1)
        graph = sp.sparse.coo_matrix((data, (row, col)), shape=(n, n))
        return (graph + graph.T).tocsr()
    return build


class SignalRecorder:
    """Collects the arguments of every emission of a Qt signal."""

    def __init__(self, signal):
        self.calls = []
        signal.connect(self._record)

    def _record(self, *args):
        self.calls.append(args)

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture
def recorder():
    return SignalRecorder

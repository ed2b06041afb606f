"""
Manifold (Mesh + Spectral Basis)
================================
Read-only container for the surface mesh the brushes paint on.

The vertex/face arrays and the optional spectral basis are produced by an
external geometry subsystem; this module only validates and exposes them.

Caches never key on object identity. Every Manifold carries a `generation`
token drawn from a process-wide counter, and `invalidate()` draws a new one
after an in-place edit.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

import numpy as np
import pyvista as pv

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

_GENERATIONS = itertools.count(1)


@dataclass
class SpectralBasis:
    """
    Eigenpairs of a discrete Laplacian on the mesh (the "dual" of the manifold).

    eigenvalues: (K,) nonnegative
    eigenvectors: (N, K), columns assumed orthonormal
    """
    eigenvalues: npt.NDArray[np.float64]
    eigenvectors: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        self.eigenvalues = np.asarray(self.eigenvalues, dtype=np.float64).ravel()
        self.eigenvectors = np.asarray(self.eigenvectors, dtype=np.float64)
        if self.eigenvectors.ndim != 2:
            raise ValueError(f"Eigenvectors must be a 2D array, got shape {self.eigenvectors.shape}.")
        if self.eigenvectors.shape[1] != self.eigenvalues.size:
            raise ValueError(
                f"Got {self.eigenvalues.size} eigenvalues for {self.eigenvectors.shape[1]} eigenvectors."
            )
        if np.any(self.eigenvalues < 0):
            raise ValueError("Eigenvalues must be nonnegative.")

    @property
    def n_modes(self) -> int:
        return int(self.eigenvalues.size)


@dataclass(eq=False)
class Manifold:
    """
    Triangulated surface: N vertices, M faces and an optional spectral basis.
    """
    vertices: npt.NDArray[np.float64]
    faces: npt.NDArray[np.int64]
    dual: Optional[SpectralBasis] = None
    generation: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float64)
        faces = np.asarray(self.faces, dtype=np.int64)
        if faces.size == 0:
            faces = faces.reshape(0, 3)
        self.faces = faces

        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise ValueError(f"Expected vertices of shape (N, 3), got {self.vertices.shape}.")
        if self.faces.ndim != 2 or self.faces.shape[1] != 3:
            raise ValueError(f"Expected faces of shape (M, 3), got {self.faces.shape}.")
        if self.faces.size and (self.faces.min() < 0 or self.faces.max() >= self.n_vertices):
            raise ValueError(f"Face indices must lie in [0, {self.n_vertices}).")
        if self.dual is not None:
            self._check_dual(self.dual)

        self.generation = next(_GENERATIONS)

    def _check_dual(self, dual: SpectralBasis) -> None:
        n_rows, n_modes = dual.eigenvectors.shape
        if n_rows != self.n_vertices:
            raise ValueError(f"Eigenvectors have {n_rows} rows, mesh has {self.n_vertices} vertices.")
        if n_modes > self.n_vertices:
            raise ValueError(f"Basis has {n_modes} modes but only {self.n_vertices} vertices.")

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def has_spectral_basis(self) -> bool:
        return self.dual is not None

    def set_spectral_basis(self, eigenvalues: npt.ArrayLike, eigenvectors: npt.ArrayLike) -> None:
        """Attach (or replace) the spectral basis and invalidate caches."""
        dual = SpectralBasis(np.asarray(eigenvalues), np.asarray(eigenvectors))
        self._check_dual(dual)
        self.dual = dual
        self.invalidate()

    def invalidate(self) -> int:
        """Draw a fresh generation token after an in-place edit."""
        self.generation = next(_GENERATIONS)
        logger.debug(f"Manifold invalidated, new generation {self.generation}.")
        return self.generation

    def is_valid_vertex(self, index: int) -> bool:
        return 0 <= index < self.n_vertices

    # ---- renderer hand-off ----

    def to_polydata(self, scalars: npt.ArrayLike | None = None, name: str = "field") -> pv.PolyData:
        """
        Build a PyVista surface for an external renderer.

        Args:
            scalars: Optional per-vertex field, attached as point data.
            name: Name of the point-data array.
        """
        if self.n_faces:
            cells = np.hstack([np.full((self.n_faces, 1), 3, dtype=np.int64), self.faces]).ravel()
            mesh = pv.PolyData(self.vertices.copy(), cells)
        else:
            mesh = pv.PolyData(self.vertices.copy())
        if scalars is not None:
            values = np.asarray(scalars, dtype=np.float64)
            if values.shape != (self.n_vertices,):
                raise ValueError(f"Field must have shape ({self.n_vertices},), got {values.shape}.")
            mesh.point_data[name] = values
        return mesh

    @classmethod
    def from_polydata(cls, mesh: pv.PolyData, dual: Optional[SpectralBasis] = None) -> Manifold:
        """Build a Manifold from a triangulated PyVista surface."""
        if not mesh.is_all_triangles:
            mesh = mesh.triangulate()
        faces = np.asarray(mesh.faces, dtype=np.int64).reshape(-1, 4)[:, 1:]
        return cls(vertices=np.asarray(mesh.points, dtype=np.float64), faces=faces, dual=dual)

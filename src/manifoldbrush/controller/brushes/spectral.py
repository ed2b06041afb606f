from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Slot

from manifoldbrush.controller.brushes.base import ManifoldBrush, normalize_max_abs
from manifoldbrush.controller.brushes.registry import register_brush
from manifoldbrush.errors import MissingSpectralBasisError, MissingKernelModelError
from manifoldbrush.model.excitation import CompositeSignalModel, SignalContext

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.kernel_model import KernelModel
    from manifoldbrush.model.manifold import Manifold, SpectralBasis

logger = logging.getLogger(__name__)


def spectral_filter(
    basis: SpectralBasis,
    g: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Graph Fourier filtering: w = U (g * U^T x).
    """
    coeffs = basis.eigenvectors.T @ x
    return basis.eigenvectors @ (g * coeffs)


@register_brush
class SpectralBrush(ManifoldBrush):
    """
    Spectral diffusion brush.

        w = U * g(lambda) * U^T * x

    where x is the excitation (a delta at the seed by default) and g comes
    from the attached KernelModel. The result is normalised to max |w| = 1.

    Requires a manifold with a spectral basis (`manifold.dual`).
    """
    KEY = "spectral"
    LABEL = "Spectral Brush"

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        kernel_model: Optional[KernelModel] = None,
        excitation: Optional[CompositeSignalModel] = None,
        seed: int = 0,
        weight: float = 1.0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(manifold, weight, parent)
        self._kernel_model = kernel_model
        self._seed = int(seed)
        self._excitation: CompositeSignalModel | None = None
        self.excitation = excitation if excitation is not None else CompositeSignalModel.delta()

    # ---- parameters ----

    @property
    def kernel_model(self) -> Optional[KernelModel]:
        return self._kernel_model

    @kernel_model.setter
    def kernel_model(self, kernel_model: Optional[KernelModel]) -> None:
        self._kernel_model = kernel_model
        self.changed.emit("kernel_model")

    @property
    def seed(self) -> int:
        """Default seed used when `evaluate()` gets none."""
        return self._seed

    @seed.setter
    def seed(self, seed: int) -> None:
        self._seed = int(seed)
        self.changed.emit("seed")

    @property
    def excitation(self) -> CompositeSignalModel:
        return self._excitation

    @excitation.setter
    def excitation(self, excitation: CompositeSignalModel) -> None:
        if self._excitation is not None:
            self._excitation.signals_changed.disconnect(self._on_excitation_changed)
        self._excitation = excitation
        excitation.signals_changed.connect(self._on_excitation_changed)
        self.changed.emit("excitation")

    @Slot()
    def _on_excitation_changed(self) -> None:
        self.changed.emit("excitation")

    # ---- evaluation ----

    def _evaluate_core(self, seed: Optional[int]) -> npt.NDArray[np.float64]:
        manifold = self.manifold
        if manifold.dual is None:
            raise MissingSpectralBasisError("SpectralBrush: manifold must have a spectral basis (dual).")
        if self._kernel_model is None:
            raise MissingKernelModelError("SpectralBrush: KernelModel must be set.")

        seed = self._check_vertex(self._seed if seed is None else seed)
        n = manifold.n_vertices

        x = self._excitation.evaluate(n, SignalContext(manifold=manifold, seed=seed))
        g = self._kernel_model.evaluate(manifold.dual.eigenvalues)
        w = spectral_filter(manifold.dual, g, x)
        return normalize_max_abs(w)

"""
Kernel Model
============
Axis-aware state holder for the spectral filter used by the brushes.

Why is this file needed?
------------------------
1. State: It keeps the spectral axis, the selected kernel type, its
   parameters and the materialised filter function consistent with each other.
2. Signals: Hosts and the brush coordinator listen to its Qt signals instead
   of polling, so a slider move re-paints the surface immediately.

Update rules:
    axis / kernel type changed -> parameters reset to the kernel defaults,
                                  filter rebuilt
    parameters changed         -> filter rebuilt
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt
from PySide6.QtCore import QObject, Signal

from manifoldbrush.config import DEFAULT_KERNEL_TYPE, PREVIEW_SAMPLES, default_axis
from manifoldbrush.model.kernels import KernelRegistry, SpectralKernel, FilterFunction, get_kernel, get_registry

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _as_axis(axis: npt.ArrayLike) -> npt.NDArray[np.float64]:
    arr = np.asarray(axis, dtype=np.float64).ravel()
    if np.any(arr < 0):
        raise ValueError("Spectral axis must be nonnegative.")
    return arr


class KernelModel(QObject):
    """
    Spectral kernel state: axis, kernel type, parameters and filter function.

    Construction happens in two phases: axis, type and registry are collected
    first, then `_finalize()` resolves parameters and the filter once. No
    setter runs during construction.
    """
    axis_changed = Signal(object)
    kernel_type_changed = Signal(str)
    parameters_changed = Signal(object)
    kernel_changed = Signal()

    def __init__(
        self,
        axis: Optional[npt.ArrayLike] = None,
        kernel_type: str = DEFAULT_KERNEL_TYPE,
        registry: Optional[KernelRegistry] = None,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        # Phase 1: gather
        self._registry: KernelRegistry = get_registry() if registry is None else dict(registry)
        self._axis = _as_axis(default_axis() if axis is None else axis)
        self._kernel_type = kernel_type
        self._parameters: dict[str, float] = {}
        self._function: FilterFunction | None = None

        # Phase 2: finalize
        self._finalize()

    def _finalize(self) -> None:
        get_kernel(self._kernel_type, self._registry)
        self._reset_parameters()

    # ---- properties ----

    @property
    def registry(self) -> KernelRegistry:
        return self._registry

    @property
    def kernel(self) -> type[SpectralKernel]:
        return get_kernel(self._kernel_type, self._registry)

    @property
    def axis(self) -> npt.NDArray[np.float64]:
        return self._axis

    @axis.setter
    def axis(self, axis: npt.ArrayLike) -> None:
        self._axis = _as_axis(axis)
        self._reset_parameters()
        self.axis_changed.emit(self._axis)
        self.parameters_changed.emit(dict(self._parameters))
        self.kernel_changed.emit()

    @property
    def kernel_type(self) -> str:
        return self._kernel_type

    @kernel_type.setter
    def kernel_type(self, kernel_type: str) -> None:
        # Validate before touching state, an unknown name leaves the model as it was
        get_kernel(kernel_type, self._registry)
        self._kernel_type = kernel_type
        self._reset_parameters()
        logger.debug(f"Kernel type set to '{kernel_type}' with {self._parameters}.")
        self.kernel_type_changed.emit(kernel_type)
        self.parameters_changed.emit(dict(self._parameters))
        self.kernel_changed.emit()

    @property
    def parameters(self) -> dict[str, float]:
        return dict(self._parameters)

    @parameters.setter
    def parameters(self, params: dict[str, float]) -> None:
        params = {k: float(v) for k, v in params.items()}
        missing = set(self.kernel.PARAM_NAMES) - set(params)
        if missing:
            raise ValueError(f"Missing parameters for '{self._kernel_type}': {sorted(missing)}")
        function = self.kernel.function(params)
        self._parameters = params
        self._function = function
        self.parameters_changed.emit(dict(self._parameters))
        self.kernel_changed.emit()

    @property
    def kernel_function(self) -> FilterFunction:
        return self._function

    # ---- operations ----

    def set_parameter(self, name: str, value: float) -> None:
        """Change a single named parameter."""
        if name not in self.kernel.PARAM_NAMES:
            raise ValueError(f"Kernel '{self._kernel_type}' has no parameter '{name}'.")
        params = dict(self._parameters)
        params[name] = float(value)
        self.parameters = params

    def param_ranges(self) -> dict[str, tuple[float, float]]:
        return self.kernel.param_ranges(self._axis)

    def evaluate(self, lam: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Apply the filter elementwise to a vector of eigenvalues."""
        lam = np.asarray(lam, dtype=np.float64)
        g = np.asarray(self._function(lam), dtype=np.float64)
        return np.broadcast_to(g, lam.shape).copy()

    def preview_curve(self, samples: Optional[int] = None) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Get sample points spanning the axis and the filter values there."""
        n = samples or PREVIEW_SAMPLES
        lo = float(self._axis.min()) if self._axis.size else 0.0
        hi = float(self._axis.max()) if self._axis.size else 1.0
        x = np.linspace(lo, hi, n)
        return x, self.evaluate(x)

    def plot(self) -> None:
        """
        Plot the kernel over the axis range.
        """
        x, g = self.preview_curve()

        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 5))

        plt.plot(x, g, 'b', lw=2)
        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)

        plt.title(f"{self._kernel_type} Kernel (Spectral Domain)")
        plt.xlabel(r"Eigenvalue $\lambda$")
        plt.ylabel(r"$g(\lambda)$")
        fig.text(0.15, 0.02, self.kernel.EQUATION)
        plt.show()

    # ---- internals ----

    def _reset_parameters(self) -> None:
        self._parameters = self.kernel.default_params(self._axis)
        self._function = self.kernel.function(self._parameters)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kernel_type='{self._kernel_type}', parameters={self._parameters})"

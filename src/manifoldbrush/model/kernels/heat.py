from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from manifoldbrush.model.kernels.base import SpectralKernel, FilterFunction, axis_span
from manifoldbrush.model.kernels.registry import register_kernel

if TYPE_CHECKING:
    import numpy.typing as npt


@register_kernel
class HeatKernel(SpectralKernel):
    """
    Heat (diffusion) kernel g(lambda) = exp(-tau * lambda).

    Small tau keeps the brush local, large tau diffuses it over the surface.
    """
    KEY = "Heat"
    EQUATION = r"$g(\lambda) = e^{-\tau \lambda}$"
    PARAM_NAMES = ("tau",)

    @classmethod
    def default_params(cls, axis: npt.NDArray[np.float64]) -> dict[str, float]:
        _, _, span = axis_span(axis)
        # g drops to e^-4 at the end of the axis
        return {"tau": 4.0 / span}

    @classmethod
    def param_ranges(cls, axis: npt.NDArray[np.float64]) -> dict[str, tuple[float, float]]:
        _, _, span = axis_span(axis)
        return {"tau": (0.0, 20.0 / span)}

    @classmethod
    def function(cls, params: dict[str, float]) -> FilterFunction:
        tau = float(params["tau"])

        def g(lam: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
            return np.exp(-tau * np.asarray(lam, dtype=np.float64))

        return g

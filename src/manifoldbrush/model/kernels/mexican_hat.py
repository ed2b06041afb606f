from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from manifoldbrush.model.kernels.base import SpectralKernel, FilterFunction, axis_span
from manifoldbrush.model.kernels.registry import register_kernel

if TYPE_CHECKING:
    import numpy.typing as npt


@register_kernel
class MexicanHatKernel(SpectralKernel):
    """Band-pass Ricker profile centred at mu with width sigma."""
    KEY = "MexicanHat"
    EQUATION = r"$g(\lambda) = (1 - x^2)\,e^{-x^2/2},\; x = (\lambda - \mu)/\sigma$"
    PARAM_NAMES = ("mu", "sigma")

    @classmethod
    def default_params(cls, axis: npt.NDArray[np.float64]) -> dict[str, float]:
        lo, hi, span = axis_span(axis)
        return {"mu": 0.5 * (lo + hi), "sigma": 0.1 * span}

    @classmethod
    def param_ranges(cls, axis: npt.NDArray[np.float64]) -> dict[str, tuple[float, float]]:
        lo, hi, span = axis_span(axis)
        return {"mu": (lo, hi), "sigma": (1e-3 * span, span)}

    @classmethod
    def function(cls, params: dict[str, float]) -> FilterFunction:
        mu = float(params["mu"])
        sigma = float(params["sigma"])
        if sigma <= 0:
            raise ValueError(f"sigma must be positive, got {sigma}.")

        def g(lam: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
            x2 = ((np.asarray(lam, dtype=np.float64) - mu) / sigma) ** 2
            return (1.0 - x2) * np.exp(-0.5 * x2)

        return g

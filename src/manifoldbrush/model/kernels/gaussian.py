from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from manifoldbrush.model.kernels.base import SpectralKernel, FilterFunction, axis_span
from manifoldbrush.model.kernels.registry import register_kernel

if TYPE_CHECKING:
    import numpy.typing as npt


@register_kernel
class GaussianKernel(SpectralKernel):
    KEY = "Gaussian"
    EQUATION = r"$g(\lambda) = e^{-(\lambda - \mu)^2 / 2\sigma^2}$"
    PARAM_NAMES = ("mu", "sigma")

    @classmethod
    def default_params(cls, axis: npt.NDArray[np.float64]) -> dict[str, float]:
        lo, _, span = axis_span(axis)
        return {"mu": lo, "sigma": 0.25 * span}

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
            return np.exp(-((np.asarray(lam, dtype=np.float64) - mu) ** 2) / (2.0 * sigma ** 2))

        return g

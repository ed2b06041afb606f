from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

FilterFunction = Callable[["npt.NDArray[np.float64]"], "npt.NDArray[np.float64]"]


def axis_span(axis: npt.NDArray[np.float64]) -> tuple[float, float, float]:
    """(min, max, span) of an axis, span never zero."""
    lo = float(np.min(axis)) if axis.size else 0.0
    hi = float(np.max(axis)) if axis.size else 1.0
    span = hi - lo
    return lo, hi, span if span > 0 else 1.0


class SpectralKernel(ABC):
    """
    Abstract base class for spectral filter families g(lambda).

    A kernel is stateless: it only knows how to pick sensible default
    parameters for a spectral axis and how to turn parameters into a
    vectorised filter function.
    """
    KEY: str = "base"  # Override in subclass
    EQUATION: str = ""
    PARAM_NAMES: tuple[str, ...] = ()

    @classmethod
    @abstractmethod
    def default_params(cls, axis: npt.NDArray[np.float64]) -> dict[str, float]:
        """Parameters matched to the range of `axis`."""
        pass

    @classmethod
    @abstractmethod
    def param_ranges(cls, axis: npt.NDArray[np.float64]) -> dict[str, tuple[float, float]]:
        """Slider limits for every parameter."""
        pass

    @classmethod
    @abstractmethod
    def function(cls, params: dict[str, float]) -> FilterFunction:
        """Filter function for the given parameters."""
        pass

    @classmethod
    def num_params(cls) -> int:
        return len(cls.PARAM_NAMES)

"""
Excitation Signals
==================
Composable per-vertex input signals that spectral brushes filter.

A `CompositeSignalModel` is a weighted superposition of `SignalModel`
instances. New excitation types are added here as another SignalModel
subclass; brushes never special-case them.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from enum import StrEnum
from typing import Any, Callable, Iterable, Iterator, Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from manifoldbrush.config import DEFAULT_NOISE_MEAN, DEFAULT_NOISE_SIGMA, DEFAULT_PATCH_RADIUS
from manifoldbrush.errors import MissingManifoldError, InvalidVertexError
from manifoldbrush.model.graph import geodesic_distance

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)

DistanceQuery = Callable[["Manifold", int], "npt.NDArray[np.float64]"]


class SignalType(StrEnum):
    DELTA = "Delta"
    NOISE = "Noise"
    PATCH = "Patch"


@dataclass
class SignalContext:
    """Evaluation context handed to every signal."""
    manifold: Optional[Manifold] = None
    seed: Optional[int] = None
    distance: DistanceQuery = field(default=geodesic_distance)

    def checked_seed(self, n: int) -> Optional[int]:
        if self.seed is None:
            return None
        seed = int(self.seed)
        if not 0 <= seed < n:
            raise InvalidVertexError(f"Seed vertex {seed} outside [0, {n}).")
        return seed


@dataclass(kw_only=True)
class SignalModel(ABC):
    """
    Abstract base class for excitation signals.
    """
    weight: float = 1.0

    @property
    @abstractmethod
    def type(self) -> SignalType:
        pass

    @abstractmethod
    def evaluate(self, n: int, context: SignalContext) -> npt.NDArray[np.float64]:
        """Unweighted signal of length n."""
        pass

    @property
    def parameters(self) -> dict[str, Any]:
        params = asdict(self)
        params.pop("weight")
        return params


@dataclass(kw_only=True)
class DeltaSignal(SignalModel):
    """Unit impulse at the context seed."""

    @property
    def type(self) -> SignalType:
        return SignalType.DELTA

    def evaluate(self, n: int, context: SignalContext) -> npt.NDArray[np.float64]:
        x = np.zeros(n, dtype=np.float64)
        seed = context.checked_seed(n)
        if seed is not None:
            x[seed] = 1.0
        return x


@dataclass(kw_only=True)
class NoiseSignal(SignalModel):
    """
    I.i.d. Gaussian samples.

    With `random_state=None` every evaluation draws fresh samples; an integer
    makes each evaluation reproduce the same vector.
    """
    mean: float = DEFAULT_NOISE_MEAN
    sigma: float = DEFAULT_NOISE_SIGMA
    random_state: Optional[int] = None

    @property
    def type(self) -> SignalType:
        return SignalType.NOISE

    def evaluate(self, n: int, context: SignalContext) -> npt.NDArray[np.float64]:
        rng = np.random.default_rng(self.random_state)
        return self.mean + self.sigma * rng.standard_normal(n)


@dataclass(kw_only=True)
class PatchSignal(SignalModel):
    """Indicator of the vertices within `radius` of the seed."""
    radius: float = DEFAULT_PATCH_RADIUS

    @property
    def type(self) -> SignalType:
        return SignalType.PATCH

    def evaluate(self, n: int, context: SignalContext) -> npt.NDArray[np.float64]:
        x = np.zeros(n, dtype=np.float64)
        seed = context.checked_seed(n)
        if seed is None:
            return x
        if context.manifold is None:
            raise MissingManifoldError("Patch signal needs a manifold for distance queries.")

        d = np.asarray(context.distance(context.manifold, seed), dtype=np.float64)
        x[d <= self.radius] = 1.0
        return x


class CompositeSignalModel(QObject):
    """Ordered, weighted superposition of excitation signals."""
    signals_changed = Signal()

    def __init__(self, signals: Iterable[SignalModel] = (), parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._signals: list[SignalModel] = list(signals)

    @classmethod
    def delta(cls) -> CompositeSignalModel:
        """The one-signal composite equivalent to a Kronecker delta at the seed."""
        return cls([DeltaSignal()])

    @property
    def signals(self) -> list[SignalModel]:
        return list(self._signals)

    def add_signal(self, signal: SignalModel) -> None:
        if not isinstance(signal, SignalModel):
            raise TypeError(f"Expected a SignalModel, got {type(signal).__name__}.")
        self._signals.append(signal)
        self.signals_changed.emit()

    def remove_signal(self, index: int) -> SignalModel:
        signal = self._signals.pop(index)
        self.signals_changed.emit()
        return signal

    def clear(self) -> None:
        self._signals.clear()
        self.signals_changed.emit()

    def __len__(self) -> int:
        return len(self._signals)

    def __iter__(self) -> Iterator[SignalModel]:
        return iter(self._signals)

    def evaluate(self, n: int, context: SignalContext) -> npt.NDArray[np.float64]:
        """Sum of weight_i * signal_i over all signals."""
        x = np.zeros(n, dtype=np.float64)
        for signal in self._signals:
            x += signal.weight * signal.evaluate(n, context)
        return x

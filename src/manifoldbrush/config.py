"""
Configuration & Defaults
========================
This module serves as the central registry for default values and global
constants of the brush engine.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (kernel type, graph thresholds,
   timer intervals) from being scattered throughout the brushes.
2. Consistency: Brush factories, the kernel model and the trajectory player
   all read their starting values from one place, so a host application can
   tune them before creating any objects.

Exports:
    LOGGER_NAME (str): Name of the package logger namespace.
    DEFAULT_KERNEL_TYPE (str): Registry key of the kernel used by new models.
    default_axis(): Fresh copy of the default spectral axis.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

LOGGER_NAME: str = "manifoldbrush"

# Kernel model
DEFAULT_KERNEL_TYPE: str = "Heat"
DEFAULT_AXIS_MIN: float = 0.0
DEFAULT_AXIS_MAX: float = 10.0
DEFAULT_AXIS_SAMPLES: int = 600
PREVIEW_SAMPLES: int = 200

# Graph brush
DEFAULT_SELECTION_MODE: str = "KNeighbors"
DEFAULT_K: int = 5
DEFAULT_DISTANCE_THRESHOLD: float = 10.0
DEFAULT_USE_WEIGHTED: bool = True

# Excitation signals
DEFAULT_PATCH_RADIUS: float = 5.0
DEFAULT_NOISE_MEAN: float = 0.0
DEFAULT_NOISE_SIGMA: float = 1.0

# Trajectory playback
DEFAULT_PLAYBACK_INTERVAL_MS: int = 50


def default_axis() -> npt.NDArray[np.float64]:
    """Spectral axis used before the host supplies real eigenvalues."""
    return np.linspace(DEFAULT_AXIS_MIN, DEFAULT_AXIS_MAX, DEFAULT_AXIS_SAMPLES)

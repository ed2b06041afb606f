"""
Spectral kernel registry.

Auto-imports all kernel modules so their `@register_kernel` side effects run.
After importing this package, `get_registry()` knows every built-in kernel.
"""
from __future__ import annotations

import importlib
import pkgutil

from manifoldbrush.model.kernels.base import SpectralKernel, FilterFunction
from manifoldbrush.model.kernels.registry import (
    KernelRegistry, register_kernel, get_registry, get_kernel, list_keys
)

for _module in pkgutil.iter_modules(__path__, __name__ + "."):
    importlib.import_module(_module.name)

__all__ = [
    "SpectralKernel", "FilterFunction", "KernelRegistry",
    "register_kernel", "get_registry", "get_kernel", "list_keys",
]

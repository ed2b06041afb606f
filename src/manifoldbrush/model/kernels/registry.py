from __future__ import annotations

from typing import Mapping

from manifoldbrush.errors import InvalidKernelTypeError
from manifoldbrush.model.kernels.base import SpectralKernel

KernelRegistry = Mapping[str, type[SpectralKernel]]

_REGISTRY: dict[str, type[SpectralKernel]] = {}


def register_kernel(cls: type[SpectralKernel]) -> type[SpectralKernel]:
    """Class decorator to register a kernel by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key or key == SpectralKernel.KEY:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[key] = cls
    return cls


def get_registry() -> KernelRegistry:
    """Read-only view of the registered kernels."""
    return dict(_REGISTRY)


def get_kernel(key: str, registry: KernelRegistry | None = None) -> type[SpectralKernel]:
    table = _REGISTRY if registry is None else registry
    cls = table.get(key)
    if cls is None:
        raise InvalidKernelTypeError(key)
    return cls


def list_keys() -> list[str]:
    return list(_REGISTRY.keys())

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from manifoldbrush.controller.brushes.base import ManifoldBrush

if TYPE_CHECKING:
    from manifoldbrush.model.manifold import Manifold

_REGISTRY: dict[str, type[ManifoldBrush]] = {}


def register_brush(cls: type[ManifoldBrush]) -> type[ManifoldBrush]:
    """Class decorator to register a brush tool by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key or key == ManifoldBrush.KEY:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[key] = cls
    return cls


def create_brush(key: str, manifold: Optional[Manifold] = None) -> ManifoldBrush:
    cls = _REGISTRY.get(key)
    if not cls:
        raise KeyError(f"No brush registered for key '{key}'")
    return cls(manifold=manifold)


def brush_label(key: str) -> str:
    cls = _REGISTRY.get(key)
    if not cls:
        raise KeyError(f"No brush registered for key '{key}'")
    return cls.LABEL


def list_keys() -> list[str]:
    return list(_REGISTRY.keys())

"""
Manifold brush tools.

Importing this package imports every brush module, so their `@register_brush`
side effects run. After that, `list_keys()` and `create_brush()` know about
every available tool.
"""
from __future__ import annotations

from manifoldbrush.controller.brushes.base import ManifoldBrush, normalize_max_abs
from manifoldbrush.controller.brushes.registry import register_brush, create_brush, brush_label, list_keys
from manifoldbrush.controller.brushes.delta import DeltaBrush
from manifoldbrush.controller.brushes.graph import GraphBrush, SelectionMode
from manifoldbrush.controller.brushes.spectral import SpectralBrush, spectral_filter
from manifoldbrush.controller.brushes.trajectory import TrajectoryBrush

__all__ = [
    "ManifoldBrush", "DeltaBrush", "GraphBrush", "SelectionMode", "SpectralBrush", "TrajectoryBrush",
    "register_brush", "create_brush", "brush_label", "list_keys",
    "normalize_max_abs", "spectral_filter",
]

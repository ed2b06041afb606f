"""
Manifold Brush
==============
Brush and spectral-kernel evaluation engine for painting scalar fields on
triangulated surface meshes.

Layers:
    model       Pure data structures and numerics (manifold, graph, kernels,
                excitation signals). No knowledge of the host UI.
    controller  Brushes and the reactive coordinator that keeps the painted
                field in sync with its inputs.
"""

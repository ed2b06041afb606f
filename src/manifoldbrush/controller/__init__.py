"""
The CONTROLLER layer turns model data into painted fields.

It owns the brush tools, the single-brush model and the reactive context
that recomputes the field whenever one of its inputs changes.
Qt is used only for signals (and a timer in the trajectory player).
"""

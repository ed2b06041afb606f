"""
Manifold Brush Context (Reactive Coordinator)
=============================================
Shared interaction state for manifold brushing.

Why is this file needed?
------------------------
1. State: It holds the manifold, the seed/target vertices, the active brush
   model and the kernel model in one place.
2. Consistency: Every mutation emits its own Qt signal and then runs a single
   `recompute()`, so the published `field` always matches the inputs of the
   last successful evaluation.
3. Isolation: It renders nothing and implements no brush logic. A renderer
   only listens to `field_changed`.

Failure policy:
    `recompute()` is the only place that catches brush errors. A failed
    evaluation is logged and reported through `evaluation_failed`; the last
    valid field is kept.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal, Slot

from manifoldbrush.errors import ManifoldBrushError

if TYPE_CHECKING:
    import numpy.typing as npt
    from manifoldbrush.controller.brush_model import ManifoldBrushModel
    from manifoldbrush.controller.brushes import ManifoldBrush
    from manifoldbrush.model.kernel_model import KernelModel
    from manifoldbrush.model.manifold import Manifold

logger = logging.getLogger(__name__)


class ContextState(IntEnum):
    """Configuration stages of the context. There is no terminal state."""
    UNINITIALIZED = 0
    PARTIALLY_CONFIGURED = 1
    READY = 2


class ManifoldBrushContext(QObject):
    """Central brushing state with signals for renderer/UI sync."""
    manifold_changed = Signal(object)
    seed_changed = Signal(int)
    target_changed = Signal(int)
    brush_model_changed = Signal(object)
    brush_changed = Signal(object)
    kernel_model_changed = Signal(object)
    field_changed = Signal(object)
    evaluation_failed = Signal(str)
    state_changed = Signal(int)

    def __init__(
        self,
        manifold: Optional[Manifold] = None,
        brush_model: Optional[ManifoldBrushModel] = None,
        kernel_model: Optional[KernelModel] = None,
        seed: int = 0,
        target: int = 0,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self._manifold = manifold
        self._seed = int(seed)
        self._target = int(target)
        self._brush_model: Optional[ManifoldBrushModel] = None
        self._kernel_model: Optional[KernelModel] = None
        self._armed_brush: Optional[ManifoldBrush] = None
        self._field: Optional[npt.NDArray[np.float64]] = None
        self._state = ContextState.UNINITIALIZED

        self._attach_brush_model(brush_model)
        self._attach_kernel_model(kernel_model)
        self._state = self._compute_state()
        self._sync()

    # ---- observed state ----

    @property
    def manifold(self) -> Optional[Manifold]:
        return self._manifold

    @manifold.setter
    def manifold(self, manifold: Optional[Manifold]) -> None:
        self._manifold = manifold
        self.manifold_changed.emit(manifold)
        self._update_state()
        self._sync()

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, seed: int) -> None:
        self._seed = int(seed)
        self.seed_changed.emit(self._seed)
        self.recompute()

    @property
    def target(self) -> int:
        return self._target

    @target.setter
    def target(self, target: int) -> None:
        self._target = int(target)
        self.target_changed.emit(self._target)
        self._sync()

    @property
    def brush_model(self) -> Optional[ManifoldBrushModel]:
        return self._brush_model

    @brush_model.setter
    def brush_model(self, brush_model: Optional[ManifoldBrushModel]) -> None:
        self._attach_brush_model(brush_model)
        self.brush_model_changed.emit(brush_model)
        self._update_state()
        self._sync()

    @property
    def kernel_model(self) -> Optional[KernelModel]:
        return self._kernel_model

    @kernel_model.setter
    def kernel_model(self, kernel_model: Optional[KernelModel]) -> None:
        self._attach_kernel_model(kernel_model)
        self.kernel_model_changed.emit(kernel_model)
        self._sync()

    @property
    def brush(self) -> Optional[ManifoldBrush]:
        return None if self._brush_model is None else self._brush_model.brush

    # ---- derived state ----

    @property
    def field(self) -> Optional[npt.NDArray[np.float64]]:
        """Result of the last successful recompute (read-only), None before the first."""
        return self._field

    @property
    def state(self) -> ContextState:
        return self._state

    # ---- core computation ----

    def recompute(self) -> bool:
        """
        Re-evaluate the active brush at the current seed.

        Returns:
            True if a new field was published, False if nothing was computed
            or the evaluation failed (the previous field is kept).
        """
        brush_model = self._brush_model
        if brush_model is None or brush_model.brush is None or self._manifold is None:
            return False

        try:
            w = brush_model.evaluate(self._seed)
        except ManifoldBrushError as e:
            self._report_failure(e)
            return False

        field = np.array(w, dtype=np.float64, copy=True)
        field.setflags(write=False)
        self._field = field
        self.field_changed.emit(field)
        return True

    # ---- internal reactions ----

    @Slot(object)
    def _on_brush_replaced(self, brush: Optional[ManifoldBrush]) -> None:
        # The inner brush changed, the listener must follow it
        self._arm_brush(brush)
        self.brush_changed.emit(brush)
        self._update_state()
        self._sync()

    @Slot(str)
    def _on_brush_edited(self, name: str) -> None:
        logger.debug(f"Active brush parameter '{name}' changed.")
        self.recompute()

    @Slot()
    def _on_kernel_changed(self) -> None:
        self.recompute()

    # ---- wiring ----

    def _attach_brush_model(self, brush_model: Optional[ManifoldBrushModel]) -> None:
        if self._brush_model is not None:
            self._brush_model.brush_changed.disconnect(self._on_brush_replaced)
        self._brush_model = brush_model
        if brush_model is not None:
            brush_model.brush_changed.connect(self._on_brush_replaced)
        self._arm_brush(self.brush)

    def _arm_brush(self, brush: Optional[ManifoldBrush]) -> None:
        if self._armed_brush is brush:
            return
        if self._armed_brush is not None:
            self._armed_brush.changed.disconnect(self._on_brush_edited)
        self._armed_brush = brush
        if brush is not None:
            brush.changed.connect(self._on_brush_edited)

    def _attach_kernel_model(self, kernel_model: Optional[KernelModel]) -> None:
        if self._kernel_model is not None:
            self._kernel_model.kernel_changed.disconnect(self._on_kernel_changed)
        self._kernel_model = kernel_model
        if kernel_model is not None:
            kernel_model.kernel_changed.connect(self._on_kernel_changed)

    def _bind_brush(self) -> None:
        """Push manifold, target and kernel model into the active brush."""
        brush = self.brush
        if brush is None:
            return

        # Programmatic updates must not echo back through brush.changed
        was_blocked = brush.blockSignals(True)
        try:
            if self._manifold is not None and brush.manifold is not self._manifold:
                brush.manifold = self._manifold
            if hasattr(brush, "target"):
                brush.target = self._target
            # None is pushed as well
            if hasattr(brush, "kernel_model") and brush.kernel_model is not self._kernel_model:
                brush.kernel_model = self._kernel_model
        finally:
            brush.blockSignals(was_blocked)

    def _sync(self) -> None:
        try:
            self._bind_brush()
        except ManifoldBrushError as e:
            self._report_failure(e)
            return
        self.recompute()

    def _report_failure(self, error: ManifoldBrushError) -> None:
        logger.warning(f"Brush evaluation failed: {error}")
        self.evaluation_failed.emit(str(error))

    def _compute_state(self) -> ContextState:
        if self._manifold is not None and self.brush is not None:
            return ContextState.READY
        if self._manifold is not None or self._brush_model is not None:
            return ContextState.PARTIALLY_CONFIGURED
        return ContextState.UNINITIALIZED

    def _update_state(self) -> None:
        state = self._compute_state()
        if state != self._state:
            self._state = state
            self.state_changed.emit(int(state))

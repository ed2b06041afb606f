"""
Tests for the reactive coordinator: every input mutation triggers exactly the
recomputations it should, and failures never clobber the published field.
"""
import numpy as np
import pytest

from manifoldbrush.controller.brush_model import ManifoldBrushModel
from manifoldbrush.controller.brushes import DeltaBrush, GraphBrush, SpectralBrush, TrajectoryBrush
from manifoldbrush.controller.context import ContextState, ManifoldBrushContext
from manifoldbrush.model.kernel_model import KernelModel


@pytest.fixture
def delta_context(grid_manifold):
    return ManifoldBrushContext(manifold=grid_manifold, brush_model=ManifoldBrushModel(DeltaBrush()))


class TestRecompute:

    def test_no_brush_model_is_a_no_op(self, grid_manifold, recorder):
        ctx = ManifoldBrushContext(manifold=grid_manifold)
        rec = recorder(ctx.field_changed)
        assert ctx.recompute() is False
        assert ctx.field is None
        assert rec.count == 0

    def test_empty_brush_model_is_a_no_op(self, grid_manifold):
        ctx = ManifoldBrushContext(manifold=grid_manifold, brush_model=ManifoldBrushModel())
        assert ctx.recompute() is False
        assert ctx.field is None

    def test_cleared_brush_model_keeps_field(self, delta_context, recorder):
        before = delta_context.field.copy()
        fields = recorder(delta_context.field_changed)

        delta_context.brush_model = None

        assert delta_context.recompute() is False
        assert fields.count == 0
        np.testing.assert_array_equal(delta_context.field, before)

    def test_emptied_brush_model_keeps_field(self, delta_context, recorder):
        delta_context.seed = 4
        before = delta_context.field.copy()
        fields = recorder(delta_context.field_changed)

        delta_context.brush_model.brush = None

        assert delta_context.recompute() is False
        assert fields.count == 0
        np.testing.assert_array_equal(delta_context.field, before)

    def test_initial_field(self, delta_context):
        assert delta_context.field.shape == (25,)
        assert delta_context.field[0] == 1.0
        assert delta_context.brush.manifold is delta_context.manifold

    def test_seed_change_recomputes(self, delta_context, recorder):
        fields = recorder(delta_context.field_changed)
        seeds = recorder(delta_context.seed_changed)
        delta_context.seed = 7
        assert seeds.calls == [(7,)]
        assert fields.count == 1
        assert np.argmax(delta_context.field) == 7

    def test_failure_keeps_previous_field(self, delta_context, recorder):
        before = delta_context.field
        failures = recorder(delta_context.evaluation_failed)
        fields = recorder(delta_context.field_changed)

        delta_context.seed = 99

        assert failures.count == 1
        assert "99" in failures.calls[0][0]
        assert fields.count == 0
        np.testing.assert_array_equal(delta_context.field, before)

    def test_field_is_read_only(self, delta_context):
        with pytest.raises(ValueError):
            delta_context.field[0] = 5.0

    def test_manifold_change_rebinds_brush(self, delta_context, grid_factory):
        bigger = grid_factory(6, 6)
        delta_context.manifold = bigger
        assert delta_context.brush.manifold is bigger
        assert delta_context.field.shape == (36,)


class TestListeners:

    def test_brush_parameter_edit_recomputes(self, grid_manifold, recorder):
        brush = GraphBrush(k=1, use_weighted=False)
        ctx = ManifoldBrushContext(manifold=grid_manifold, brush_model=ManifoldBrushModel(brush))
        assert ctx.field.sum() == 4  # corner, two axis neighbours, one diagonal
        fields = recorder(ctx.field_changed)

        brush.k = 2

        assert fields.count == 1
        assert ctx.field.sum() > 4

    def test_select_tool_rearms_listener(self, delta_context, recorder):
        old = delta_context.brush
        brushes = recorder(delta_context.brush_changed)

        new = delta_context.brush_model.select_tool("graph")

        assert brushes.calls == [(new,)]
        assert new.manifold is delta_context.manifold
        assert delta_context.field.sum() > 1

        fields = recorder(delta_context.field_changed)
        old.seed = 3
        assert fields.count == 0
        new.k = 1
        assert fields.count == 1

    def test_brush_model_replacement_rearms_listeners(self, delta_context, recorder):
        old_model = delta_context.brush_model
        new_model = ManifoldBrushModel(GraphBrush(k=0))

        delta_context.brush_model = new_model
        assert delta_context.brush is new_model.brush
        assert delta_context.field.sum() == 1

        fields = recorder(delta_context.field_changed)
        old_model.select_tool("delta")
        assert fields.count == 0

        new_model.select_tool("delta")
        assert fields.count == 1

    def test_kernel_change_recomputes(self, small_ring, recorder):
        kernel_model = KernelModel(axis=np.linspace(0, 4, 50))
        ctx = ManifoldBrushContext(
            manifold=small_ring,
            brush_model=ManifoldBrushModel(SpectralBrush()),
            kernel_model=kernel_model,
        )
        assert ctx.brush.kernel_model is kernel_model
        before = ctx.field
        fields = recorder(ctx.field_changed)

        kernel_model.set_parameter("tau", 2.0)

        assert fields.count == 1
        assert not np.allclose(ctx.field, before)

    def test_replaced_kernel_model_is_disconnected(self, small_ring, recorder):
        old = KernelModel()
        ctx = ManifoldBrushContext(
            manifold=small_ring, brush_model=ManifoldBrushModel(SpectralBrush()), kernel_model=old
        )
        new = KernelModel()
        ctx.kernel_model = new
        assert ctx.brush.kernel_model is new

        fields = recorder(ctx.field_changed)
        old.set_parameter("tau", 1.0)
        assert fields.count == 0

    def test_cleared_kernel_model_reaches_brush(self, small_ring, recorder):
        old = KernelModel()
        ctx = ManifoldBrushContext(
            manifold=small_ring, brush_model=ManifoldBrushModel(SpectralBrush()), kernel_model=old
        )
        before = ctx.field.copy()
        failures = recorder(ctx.evaluation_failed)
        fields = recorder(ctx.field_changed)

        ctx.kernel_model = None

        assert ctx.brush.kernel_model is None
        assert failures.count == 1
        assert ctx.recompute() is False

        old.set_parameter("tau", 3.0)
        assert fields.count == 0
        np.testing.assert_array_equal(ctx.field, before)

    def test_bound_updates_do_not_echo(self, grid_manifold, recorder):
        brush = DeltaBrush()
        edits = recorder(brush.changed)
        ManifoldBrushContext(manifold=grid_manifold, brush_model=ManifoldBrushModel(brush))
        assert edits.count == 0


class TestTarget:

    def test_target_reaches_trajectory_brush(self, small_ring, recorder):
        brush = TrajectoryBrush(base_brush=DeltaBrush())
        ctx = ManifoldBrushContext(manifold=small_ring, brush_model=ManifoldBrushModel(brush))
        targets = recorder(ctx.target_changed)

        ctx.target = 3

        assert targets.calls == [(3,)]
        assert brush.target == 3
        np.testing.assert_allclose(ctx.field[:4], 1.0)
        np.testing.assert_allclose(ctx.field[4:], 0.0)

    def test_invalid_target_reported(self, small_ring, recorder):
        brush = TrajectoryBrush(base_brush=DeltaBrush())
        ctx = ManifoldBrushContext(manifold=small_ring, brush_model=ManifoldBrushModel(brush))
        failures = recorder(ctx.evaluation_failed)

        ctx.target = 50

        assert failures.count == 1
        assert brush.target == 0


class TestState:

    def test_transitions(self, grid_manifold, recorder):
        ctx = ManifoldBrushContext()
        assert ctx.state == ContextState.UNINITIALIZED
        states = recorder(ctx.state_changed)

        ctx.manifold = grid_manifold
        ctx.brush_model = ManifoldBrushModel(DeltaBrush())
        ctx.manifold = None

        assert states.calls == [
            (ContextState.PARTIALLY_CONFIGURED,),
            (ContextState.READY,),
            (ContextState.PARTIALLY_CONFIGURED,),
        ]

    def test_brush_model_without_brush_is_partial(self, grid_manifold):
        ctx = ManifoldBrushContext(manifold=grid_manifold, brush_model=ManifoldBrushModel())
        assert ctx.state == ContextState.PARTIALLY_CONFIGURED

    def test_no_emission_without_transition(self, delta_context, recorder):
        states = recorder(delta_context.state_changed)
        delta_context.seed = 3
        delta_context.brush_model.select_tool("graph")
        assert states.count == 0

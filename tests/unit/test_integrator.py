"""Unit tests for the damped spring integrator."""

import pytest

from evograph.models import Canvas, NodeState, Point, SimulationState
from evograph.simulation import step


def single(position: Point, target: Point | None) -> SimulationState:
    return SimulationState(nodes={"n": NodeState(position=position, target=target)})


class TestStep:
    """Tests for a single integrator step."""

    def test_moves_fraction_of_distance(self, canvas: Canvas) -> None:
        state = step(single(Point(100, 100), Point(200, 100)), damping=0.05, canvas=canvas)
        node = state["n"]
        assert node.position.x == pytest.approx(105.0)
        assert node.position.y == pytest.approx(100.0)
        assert node.velocity == (pytest.approx(5.0), pytest.approx(0.0))

    def test_dt_scales_step(self, canvas: Canvas) -> None:
        state = step(single(Point(100, 100), Point(200, 100)), dt=2.0, damping=0.05, canvas=canvas)
        assert state["n"].position.x == pytest.approx(110.0)

    def test_gain_never_overshoots(self, canvas: Canvas) -> None:
        """A huge dt lands exactly on the target instead of passing it."""
        state = step(single(Point(100, 100), Point(200, 150)), dt=1000.0, damping=0.05, canvas=canvas)
        assert state["n"].position == (pytest.approx(200.0), pytest.approx(150.0))

    def test_default_damping_from_settings(self, canvas: Canvas) -> None:
        state = step(single(Point(100, 100), Point(300, 100)), canvas=canvas)
        assert state["n"].position.x == pytest.approx(110.0)

    def test_input_state_unchanged(self, canvas: Canvas) -> None:
        original = single(Point(100, 100), Point(200, 100))
        new = step(original, canvas=canvas)
        assert original["n"].position == Point(100, 100)
        assert original.tick == 0
        assert new.tick == 1

    def test_empty_state_is_noop(self, canvas: Canvas) -> None:
        state = step(SimulationState(), canvas=canvas)
        assert len(state) == 0

    def test_node_without_target_stays(self, canvas: Canvas) -> None:
        state = step(single(Point(120, 130), None), canvas=canvas)
        assert state["n"].position == Point(120, 130)
        assert state["n"].velocity == Point(0.0, 0.0)


class TestConvergence:
    """Convergence and containment over many ticks."""

    def test_monotonic_convergence_within_200_ticks(self, canvas: Canvas) -> None:
        target = Point(260, 220)
        state = single(Point(100, 100), target)
        previous = state["n"].distance_to_target()
        assert previous == pytest.approx(200.0)

        for _ in range(200):
            state = step(state, damping=0.05, canvas=canvas)
            distance = state["n"].distance_to_target()
            assert distance < previous
            previous = distance

        assert previous < 0.01

    def test_positions_stay_inside_bounds(self, canvas: Canvas) -> None:
        """Nodes starting or aimed outside the canvas are clamped every tick."""
        state = SimulationState(
            nodes={
                "outside": NodeState(position=Point(-500, 2000), target=Point(400, 300)),
                "aimed_out": NodeState(position=Point(400, 300), target=Point(5000, -5000)),
                "corner": NodeState(position=Point(0, 0), target=Point(0, 0)),
            }
        )
        min_x, max_x, min_y, max_y = canvas.bounds
        for _ in range(100):
            state = step(state, damping=0.05, canvas=canvas)
            for ns in state.nodes.values():
                assert min_x <= ns.position.x <= max_x
                assert min_y <= ns.position.y <= max_y

    def test_no_oscillation(self, canvas: Canvas) -> None:
        """The position never crosses to the far side of the target."""
        state = single(Point(100, 300), Point(400, 300))
        for _ in range(300):
            state = step(state, damping=0.05, canvas=canvas)
            assert state["n"].position.x <= 400

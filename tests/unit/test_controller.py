"""Unit tests for the simulation controller."""

import asyncio

import pytest

from evograph.layout import LayoutConfig, LayoutModeError
from evograph.models import Canvas, FilterCriteria, NodeType, SimulationState
from evograph.simulation import SimulationController, SimulationStatus


@pytest.fixture
def controller(sample_graph, canvas: Canvas) -> SimulationController:
    """Controller over the sample graph with a fast layout and no frame delay."""
    nodes, edges = sample_graph
    return SimulationController(
        nodes,
        edges,
        seed=42,
        canvas=canvas,
        layout_config=LayoutConfig(iterations=10),
        frame_interval=0.0,
    )


async def run_frames(count: int) -> None:
    """Yield to the event loop ``count`` times."""
    for _ in range(count):
        await asyncio.sleep(0)


class TestLifecycle:
    """Tests for start/stop and frame scheduling."""

    def test_initial_state(self, controller: SimulationController) -> None:
        """A new controller is idle with targets for every visible node."""
        assert controller.status is SimulationStatus.IDLE
        assert not controller.is_running()
        assert len(controller.state) == 8
        assert all(ns.target is not None for ns in controller.state.nodes.values())
        assert controller.state.tick == 0

    def test_stop_without_start(self, controller: SimulationController) -> None:
        controller.stop()
        assert controller.status is SimulationStatus.IDLE

    def test_start_requires_event_loop(self, controller: SimulationController) -> None:
        with pytest.raises(RuntimeError):
            controller.start()

    @pytest.mark.asyncio
    async def test_start_then_stop_twice(self, controller: SimulationController) -> None:
        """Stopping twice does not raise and leaves the controller stopped."""
        controller.start()
        assert controller.is_running()

        controller.stop()
        controller.stop()

        assert not controller.is_running()
        assert controller.status is SimulationStatus.STOPPED

    @pytest.mark.asyncio
    async def test_frames_advance_while_running(self, controller: SimulationController) -> None:
        controller.start()
        await run_frames(10)
        assert controller.state.tick > 0
        await controller.aclose()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, controller: SimulationController) -> None:
        controller.start()
        generation = controller.generation
        controller.start()
        assert controller.generation == generation
        await controller.aclose()

    @pytest.mark.asyncio
    async def test_no_ticks_after_stop(self, controller: SimulationController) -> None:
        controller.start()
        await run_frames(5)
        controller.stop()
        tick = controller.state.tick

        await run_frames(10)
        assert controller.state.tick == tick

    @pytest.mark.asyncio
    async def test_stale_generation_does_not_tick(self, controller: SimulationController) -> None:
        """A tick scheduled before stop() does nothing once stop() has run."""
        controller.start()
        stale = controller.generation
        controller.stop()
        tick = controller.state.tick

        assert controller._tick_if_current(stale) is False
        assert controller.state.tick == tick

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, controller: SimulationController) -> None:
        controller.start()
        controller.stop()
        controller.start()
        assert controller.is_running()
        await run_frames(5)
        assert controller.state.tick > 0
        await controller.aclose()
        assert not controller.is_running()

    @pytest.mark.asyncio
    async def test_stop_from_frame_callback(self, sample_graph, canvas: Canvas) -> None:
        """Stopping inside a frame callback ends the loop cleanly."""
        nodes, edges = sample_graph
        frames: list[SimulationState] = []

        def on_frame(snapshot: SimulationState) -> None:
            frames.append(snapshot)
            if len(frames) == 3:
                controller.stop()

        controller = SimulationController(
            nodes,
            edges,
            canvas=canvas,
            layout_config=LayoutConfig(iterations=5),
            frame_interval=0.0,
            on_frame=on_frame,
        )
        controller.start()
        await run_frames(20)

        assert len(frames) == 3
        assert [f.tick for f in frames] == [1, 2, 3]
        assert not controller.is_running()

    @pytest.mark.asyncio
    async def test_failing_frame_callback_stops_loop(self, sample_graph, canvas: Canvas) -> None:
        """A callback error ends the loop and leaves the controller restartable."""
        nodes, edges = sample_graph

        def on_frame(snapshot: SimulationState) -> None:
            raise RuntimeError("renderer gone")

        controller = SimulationController(
            nodes,
            edges,
            canvas=canvas,
            layout_config=LayoutConfig(iterations=5),
            frame_interval=0.0,
            on_frame=on_frame,
        )
        controller.start()
        await run_frames(10)

        assert not controller.is_running()
        assert controller.status is SimulationStatus.STOPPED
        tick = controller.state.tick

        controller.on_frame = None
        controller.start()
        assert controller.is_running()
        await run_frames(5)
        assert controller.state.tick > tick
        await controller.aclose()


class TestTicking:
    """Tests for explicit ticks and settling."""

    def test_tick_moves_toward_targets(self, controller: SimulationController) -> None:
        before = controller.state.max_displacement()
        state = controller.tick()
        assert state.tick == 1
        assert state.max_displacement() < before

    def test_settle(self, controller: SimulationController) -> None:
        ticks = controller.settle(tolerance=0.01, max_ticks=1000)
        assert 0 < ticks < 1000
        assert controller.state.max_displacement() < 0.01

    def test_positions_stay_inside_canvas(self, controller: SimulationController, canvas: Canvas) -> None:
        min_x, max_x, min_y, max_y = canvas.bounds
        for _ in range(50):
            controller.tick()
            for ns in controller.state.nodes.values():
                assert min_x <= ns.position.x <= max_x
                assert min_y <= ns.position.y <= max_y


class TestInputChanges:
    """Tests for graph, filter and mode changes."""

    def test_filter_change_keeps_positions(self, controller: SimulationController) -> None:
        """Surviving nodes keep their position; only targets change."""
        for _ in range(10):
            controller.tick()
        before = controller.state.positions()

        controller.update_criteria(FilterCriteria(node_types={NodeType.INPUT, NodeType.CONTEXT}))

        after = controller.state.positions()
        assert set(after) < set(before)
        for node_id, position in after.items():
            assert position == before[node_id]
        assert all(n.type is not NodeType.OUTPUT for n in controller.visible_nodes)

    def test_filtered_node_returns_to_previous_position(self, controller: SimulationController) -> None:
        for _ in range(10):
            controller.tick()
        position = controller.state["docker-3"].position

        controller.update_criteria(FilterCriteria(search="redis"))
        assert "docker-3" not in controller.state

        controller.update_criteria(FilterCriteria())
        assert controller.state["docker-3"].position == position

    def test_visible_edges_follow_filter(self, controller: SimulationController) -> None:
        controller.update_criteria(FilterCriteria(search="docker"))
        visible_ids = {n.id for n in controller.visible_nodes}
        for edge in controller.visible_edges:
            assert set(edge.endpoints) <= visible_ids

    def test_idle_change_does_not_start_loop(self, controller: SimulationController) -> None:
        controller.update_criteria(FilterCriteria(confidence_threshold=0.5))
        assert controller.status is SimulationStatus.IDLE
        assert controller.state.tick == 0

    @pytest.mark.asyncio
    async def test_change_while_running_keeps_running(self, controller: SimulationController) -> None:
        controller.start()
        await run_frames(5)
        controller.set_mode("force")
        assert controller.is_running()
        await run_frames(5)
        await controller.aclose()

    def test_invalid_mode_rejected(self, controller: SimulationController) -> None:
        targets = controller.state.targets()
        with pytest.raises(LayoutModeError):
            controller.set_mode("radial")
        assert controller.mode.value == "multilevel"
        assert controller.state.targets() == targets

    def test_invalid_mode_in_constructor(self, sample_graph) -> None:
        nodes, edges = sample_graph
        with pytest.raises(LayoutModeError):
            SimulationController(nodes, edges, mode="grid")

    def test_graph_replacement_drops_missing_nodes(self, controller: SimulationController, sample_graph) -> None:
        nodes, edges = sample_graph
        docker_nodes = [n for n in nodes if n.id.startswith("docker")]
        controller.update_graph(docker_nodes, edges)
        assert set(controller.state) == {n.id for n in docker_nodes}

    def test_removed_node_does_not_keep_old_position(self, controller: SimulationController, sample_graph) -> None:
        """A node removed from the graph and added back later starts fresh."""
        nodes, edges = sample_graph
        for _ in range(10):
            controller.tick()
        position = controller.state["redis-0"].position

        controller.update_graph([n for n in nodes if n.id.startswith("docker")], edges)
        assert "redis-0" not in controller.state

        controller.update_graph(nodes, edges)
        assert controller.state["redis-0"].position != position

    def test_empty_graph(self, canvas: Canvas) -> None:
        controller = SimulationController(canvas=canvas)
        assert len(controller.state) == 0
        assert controller.tick().tick == 1

    def test_hyperedge_curves(self, controller: SimulationController) -> None:
        curves = controller.hyperedge_curves()
        # One hyperedge per cluster, each through four endpoints
        assert len(curves) == 2
        assert all(len(points) == 7 for points in curves.values())


class TestBackgroundRelayout:
    """Tests for relayout in a worker thread."""

    @pytest.mark.asyncio
    async def test_relayout_applies(self, controller: SimulationController) -> None:
        controller.update_criteria(FilterCriteria(search="redis"), relayout=False)
        assert len(controller.state) == 8

        applied = await controller.relayout()

        assert applied is True
        assert set(controller.state) == {f"redis-{i}" for i in range(4)}

    @pytest.mark.asyncio
    async def test_superseded_relayout_is_discarded(self, controller: SimulationController) -> None:
        controller.update_criteria(FilterCriteria(search="redis"), relayout=False)

        task = asyncio.create_task(controller.relayout())
        await asyncio.sleep(0)
        controller.cancel_layout()

        assert await task is False
        assert len(controller.state) == 8

    @pytest.mark.asyncio
    async def test_graph_change_supersedes_running_relayout(
        self, controller: SimulationController, sample_graph
    ) -> None:
        """A layout started on the old graph is not applied after the graph changes."""
        nodes, edges = sample_graph
        docker_nodes = [n for n in nodes if n.id.startswith("docker")]

        task = asyncio.create_task(controller.relayout())
        await asyncio.sleep(0)
        controller.update_graph(docker_nodes, edges, relayout=False)

        assert await task is False
        assert await controller.relayout() is True
        assert set(controller.state) == {n.id for n in docker_nodes}

    @pytest.mark.asyncio
    async def test_filter_change_supersedes_running_relayout(self, controller: SimulationController) -> None:
        task = asyncio.create_task(controller.relayout())
        await asyncio.sleep(0)
        controller.update_criteria(FilterCriteria(search="redis"), relayout=False)

        assert await task is False
        assert len(controller.state) == 8

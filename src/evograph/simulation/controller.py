"""Simulation controller - animation clock and simulation state ownership.

The controller is the only writer of the simulation state. Filtering and
layout receive the current inputs and return new data; the controller
swaps the results in as a whole, so a tick never sees a half-updated set
of targets.

Frame loop cancellation uses a generation counter: ``start()`` issues a
new generation, ``stop()`` advances it, and a tick belonging to an older
generation does nothing.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from enum import Enum

import numpy as np

from evograph.config import settings
from evograph.filtering import filter_graph
from evograph.geometry.hyperedge import hyperedge_paths
from evograph.layout import LayoutConfig, LayoutMode, compute_layout
from evograph.models import (
    Canvas,
    Edge,
    FilterCriteria,
    Node,
    NodeState,
    Point,
    SimulationState,
)
from evograph.simulation.integrator import step

logger = logging.getLogger(__name__)

FrameCallback = Callable[[SimulationState], None]


class SimulationStatus(str, Enum):
    """Animation state of the controller."""

    IDLE = "idle"  # Never started
    RUNNING = "running"  # Frame loop active
    STOPPED = "stopped"  # Explicitly paused


class SimulationController:
    """
    Owns the animation clock and the per-node simulation state.

    Graph, filter and mode changes recompute layout targets without
    resetting positions, so nodes animate smoothly to their new targets.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        criteria: FilterCriteria | None = None,
        mode: LayoutMode | str = LayoutMode.MULTILEVEL,
        seed: int | None = None,
        canvas: Canvas | None = None,
        layout_config: LayoutConfig | None = None,
        damping: float | None = None,
        frame_interval: float | None = None,
        on_frame: FrameCallback | None = None,
    ) -> None:
        self.mode = LayoutMode.parse(mode)
        self.seed = seed if seed is not None else settings.layout_default_seed
        self.canvas = canvas or Canvas.from_settings()
        self.layout_config = layout_config or LayoutConfig.from_settings()
        self.damping = damping if damping is not None else settings.damping_factor
        self.frame_interval = frame_interval if frame_interval is not None else settings.frame_interval
        self.on_frame = on_frame

        self._nodes: list[Node] = list(nodes)
        self._edges: list[Edge] = list(edges)
        self._criteria = criteria or FilterCriteria()

        self._visible_nodes: list[Node] = []
        self._visible_edges: list[Edge] = []
        self._state = SimulationState()
        self._hidden_positions: dict[str, Point] = {}  # Last position of filtered-out nodes
        self._rng = np.random.default_rng(self.seed)

        self._status = SimulationStatus.IDLE
        self._generation = 0
        self._layout_token = 0
        self._task: asyncio.Task | None = None

        self.refresh()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SimulationState:
        """Current immutable snapshot."""
        return self._state

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def visible_nodes(self) -> list[Node]:
        return list(self._visible_nodes)

    @property
    def visible_edges(self) -> list[Edge]:
        return list(self._visible_edges)

    def is_running(self) -> bool:
        return self._status == SimulationStatus.RUNNING

    def hyperedge_curves(self) -> dict[str, list[Point]]:
        """Curve paths of visible hyperedges at current positions."""
        return hyperedge_paths(self._state, self._visible_edges)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def update_graph(self, nodes: Iterable[Node], edges: Iterable[Edge], relayout: bool = True) -> None:
        """Replace the graph. Nodes that no longer exist are dropped for good."""
        self._nodes = list(nodes)
        self._edges = list(edges)
        self.cancel_layout()
        known = {node.id for node in self._nodes}
        self._hidden_positions = {
            node_id: pos for node_id, pos in self._hidden_positions.items() if node_id in known
        }
        if relayout:
            self.refresh()

    def update_criteria(self, criteria: FilterCriteria, relayout: bool = True) -> None:
        self._criteria = criteria
        self.cancel_layout()
        if relayout:
            self.refresh()

    def set_mode(self, mode: LayoutMode | str, relayout: bool = True) -> None:
        """Switch layout mode; unknown modes raise before anything changes."""
        self.mode = LayoutMode.parse(mode)
        self.cancel_layout()
        if relayout:
            self.refresh()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Re-filter and re-layout synchronously, superseding any background layout."""
        self._layout_token += 1
        visible_nodes, visible_edges = filter_graph(self._nodes, self._edges, self._criteria)
        targets = compute_layout(
            visible_nodes,
            visible_edges,
            self.mode,
            self.seed,
            self.canvas,
            self.layout_config,
        )
        self._apply_layout(visible_nodes, visible_edges, targets)

    async def relayout(self) -> bool:
        """
        Re-filter and re-layout in a worker thread.

        The result is discarded if another layout was requested (or
        ``cancel_layout()`` was called) while this one was running.

        Returns:
            True if the new targets were applied
        """
        self._layout_token += 1
        token = self._layout_token

        visible_nodes, visible_edges = filter_graph(self._nodes, self._edges, self._criteria)
        targets = await asyncio.to_thread(
            compute_layout,
            visible_nodes,
            visible_edges,
            self.mode,
            self.seed,
            self.canvas,
            self.layout_config,
        )

        if token != self._layout_token:
            logger.debug(f"Discarding superseded layout {token} (current {self._layout_token})")
            return False

        self._apply_layout(visible_nodes, visible_edges, targets)
        return True

    def cancel_layout(self) -> None:
        """Invalidate any background layout still in flight."""
        self._layout_token += 1

    def _apply_layout(
        self,
        visible_nodes: list[Node],
        visible_edges: list[Edge],
        targets: dict[str, Point],
    ) -> None:
        """Swap in a new visible set and targets as one update."""
        current = self._state.nodes
        visible_ids = {node.id for node in visible_nodes}

        known = {node.id for node in self._nodes}
        for node_id, ns in current.items():
            if node_id not in visible_ids and node_id in known:
                self._hidden_positions[node_id] = ns.position

        new_nodes: dict[str, NodeState] = {}
        placed = 0
        for node in visible_nodes:
            target = targets.get(node.id)
            if node.id in current:
                new_nodes[node.id] = current[node.id].retarget(target)
            elif node.id in self._hidden_positions:
                new_nodes[node.id] = NodeState(position=self._hidden_positions.pop(node.id), target=target)
            else:
                new_nodes[node.id] = NodeState(position=self._random_position(), target=target)
                placed += 1

        self._visible_nodes = visible_nodes
        self._visible_edges = visible_edges
        self._state = self._state.with_nodes(new_nodes)

        logger.info(
            f"Layout applied ({self.mode.value}): {len(new_nodes)} visible nodes, "
            f"{len(visible_edges)} visible edges, {placed} newly placed"
        )

    def _random_position(self) -> Point:
        min_x, max_x, min_y, max_y = self.canvas.bounds
        return Point(float(self._rng.uniform(min_x, max_x)), float(self._rng.uniform(min_y, max_y)))

    # ------------------------------------------------------------------
    # Animation clock
    # ------------------------------------------------------------------

    def tick(self, dt: float = 1.0) -> SimulationState:
        """Apply one integrator step to every visible node."""
        self._state = step(self._state, dt, self.damping, self.canvas)
        if self.on_frame is not None:
            self.on_frame(self._state)
        return self._state

    def settle(self, tolerance: float = 0.01, max_ticks: int = 1000) -> int:
        """
        Tick until every node is within ``tolerance`` of its target.

        Returns:
            Number of ticks performed
        """
        ticks = 0
        while ticks < max_ticks and self._state.max_displacement() >= tolerance:
            self.tick()
            ticks += 1
        return ticks

    def start(self) -> None:
        """Start the frame loop on the running event loop. No-op if already running."""
        if self._status == SimulationStatus.RUNNING:
            return

        loop = asyncio.get_running_loop()
        self._generation += 1
        self._status = SimulationStatus.RUNNING
        self._task = loop.create_task(self._run(self._generation))
        logger.info(f"Simulation started (generation {self._generation})")

    def stop(self) -> None:
        """Stop the frame loop. Safe to call any number of times."""
        if self._status != SimulationStatus.RUNNING:
            return

        self._generation += 1
        self._status = SimulationStatus.STOPPED
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        logger.info(f"Simulation stopped at tick {self._state.tick}")

    async def aclose(self) -> None:
        """Stop and wait for the frame loop task to finish."""
        task = self._task
        self.stop()
        self.cancel_layout()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _tick_if_current(self, generation: int) -> bool:
        """Tick only if ``generation`` has not been superseded."""
        if generation != self._generation:
            return False
        self.tick()
        return True

    async def _run(self, generation: int) -> None:
        try:
            while self._tick_if_current(generation):
                await asyncio.sleep(self.frame_interval)
        except Exception as e:
            logger.exception(f"Frame loop failed at tick {self._state.tick}: {e}")
        finally:
            # Loop ended on its own (not via stop()): leave a restartable state
            if generation == self._generation:
                self._generation += 1
                self._status = SimulationStatus.STOPPED
                self._task = None

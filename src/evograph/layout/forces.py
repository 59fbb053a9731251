"""Force-directed refinement of node positions.

Each iteration combines three forces:
1. Pairwise repulsion, inversely proportional to squared distance
2. Gravity toward the canvas center
3. Spring attraction along edges, weighted by edge confidence

Repulsion grows and gravity weakens with the level index, so coarse
levels spread out before finer levels settle local structure.
"""

import logging
from typing import NamedTuple

import numpy as np

from evograph.layout.config import LayoutConfig
from evograph.models import Canvas

logger = logging.getLogger(__name__)


class LinkArrays(NamedTuple):
    """Edges of one level as parallel index/weight arrays."""

    sources: np.ndarray
    targets: np.ndarray
    weights: np.ndarray

    @classmethod
    def from_weights(cls, weights: dict[tuple[int, int], float]) -> "LinkArrays":
        """Build from an ``(i, j) -> weight`` mapping, in sorted key order."""
        keys = sorted(weights)
        return cls(
            sources=np.array([i for i, _ in keys], dtype=np.intp),
            targets=np.array([j for _, j in keys], dtype=np.intp),
            weights=np.array([weights[k] for k in keys], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.sources)


def clamp_to_canvas(positions: np.ndarray, canvas: Canvas) -> np.ndarray:
    """Clip an (n, 2) position array into the canvas bounds in place."""
    min_x, max_x, min_y, max_y = canvas.bounds
    np.clip(positions[:, 0], min_x, max_x, out=positions[:, 0])
    np.clip(positions[:, 1], min_y, max_y, out=positions[:, 1])
    return positions


def refine(
    positions: np.ndarray,
    links: LinkArrays,
    level: int,
    canvas: Canvas,
    config: LayoutConfig,
) -> np.ndarray:
    """
    Run a bounded number of force-directed iterations.

    Args:
        positions: (n, 2) array of starting positions (not modified)
        links: Edges between rows of ``positions``
        level: Level index, 0 being the finest
        canvas: Canvas whose center and bounds apply
        config: Force parameters

    Returns:
        New (n, 2) array of refined positions
    """
    pos = np.array(positions, dtype=float, copy=True)
    n = len(pos)
    if n == 0:
        return pos

    center = np.array(canvas.center, dtype=float)
    repulsion = config.repulsion * 10 * (level + 1)
    gravity = config.gravity / (level + 1)

    for _ in range(config.iterations):
        # delta[i, j] points from j to i
        delta = pos[:, None, :] - pos[None, :, :]
        dist = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta))
        dist = np.maximum(dist, config.min_distance)

        # Unit vector times repulsion / d^2
        coeff = repulsion / dist ** 3
        np.fill_diagonal(coeff, 0.0)
        disp = np.einsum("ij,ijk->ik", coeff, delta)

        disp += (center - pos) * gravity

        if len(links):
            pull = (pos[links.targets] - pos[links.sources]) * (
                config.attraction * links.weights
            )[:, None]
            np.add.at(disp, links.sources, pull)
            np.add.at(disp, links.targets, -pull)

        length = np.sqrt(np.einsum("ik,ik->i", disp, disp))
        scale = np.minimum(1.0, config.max_displacement / np.maximum(length, 1e-12))
        pos += disp * scale[:, None]
        clamp_to_canvas(pos, canvas)

    logger.debug(f"Level {level}: refined {n} nodes over {config.iterations} iterations")
    return pos

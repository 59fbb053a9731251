"""Compute graph layout positions for a graph JSON file.

This script:
1. Loads nodes and edges from a JSON file ({"nodes": [...], "edges": [...]})
2. Applies filter criteria from the command line
3. Computes target positions with the chosen layout mode
4. Optionally animates the simulation until nodes settle on their targets
5. Writes positions (and hyperedge curves) to a JSON file

Run after generating data with create_test_graph.py, or on an export
from any graph data source.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from evograph.filtering import filter_graph, summarize
from evograph.layout import LayoutMode, LayoutModeError, compute_layout
from evograph.models import Edge, FilterCriteria, Node
from evograph.simulation import SimulationController

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def load_graph(path: Path) -> tuple[list[Node], list[Edge]]:
    """Load nodes and edges from a JSON file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    nodes = [Node.from_dict(n) for n in data.get("nodes", [])]
    edges = [Edge.from_dict(e) for e in data.get("edges", [])]
    return nodes, edges


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    criteria = FilterCriteria(confidence_threshold=args.threshold, search=args.search)
    if args.node_types:
        criteria = criteria.updated(node_types=frozenset(args.node_types.split(",")))
    if args.edge_types:
        criteria = criteria.updated(edge_types=frozenset(args.edge_types.split(",")))
    return criteria


def main() -> int:
    parser = argparse.ArgumentParser(description="Compute layout positions for a graph JSON file")
    parser.add_argument("input", type=Path, help="Graph JSON file")
    parser.add_argument("-o", "--output", type=Path, help="Write positions JSON here")
    parser.add_argument("--mode", default=LayoutMode.MULTILEVEL.value,
                        help="force, hierarchical or multilevel")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--threshold", type=float, default=0.0, help="Minimum node confidence")
    parser.add_argument("--search", default="", help="Label substring filter")
    parser.add_argument("--node-types", default="", help="Comma-separated accepted node types")
    parser.add_argument("--edge-types", default="", help="Comma-separated accepted edge types")
    parser.add_argument("--animate", action="store_true",
                        help="Run the simulation from random positions until settled")
    args = parser.parse_args()

    nodes, edges = load_graph(args.input)
    criteria = build_criteria(args)
    logger.info(f"Loaded {len(nodes)} nodes, {len(edges)} edges")

    stats = summarize([n.confidence for n in nodes])
    if stats:
        logger.info(
            f"Confidence: mean={stats.mean:.2f} median={stats.median:.2f} "
            f"std={stats.std_dev:.2f} IQR={stats.quartiles.iqr:.2f}"
        )

    visible_nodes, visible_edges = filter_graph(nodes, edges, criteria)
    logger.info(f"Visible: {len(visible_nodes)} nodes, {len(visible_edges)} edges")

    start = time.perf_counter()
    try:
        positions = compute_layout(visible_nodes, visible_edges, args.mode, args.seed)
    except LayoutModeError as e:
        logger.error(str(e))
        return 2
    logger.info(f"Layout computed in {(time.perf_counter() - start) * 1000:.1f}ms")

    result = {
        "mode": args.mode,
        "positions": {node_id: [p.x, p.y] for node_id, p in positions.items()},
    }

    if args.animate:
        controller = SimulationController(nodes, edges, criteria, mode=args.mode, seed=args.seed)
        ticks = controller.settle(tolerance=0.01, max_ticks=5000)
        logger.info(f"Simulation settled after {ticks} ticks")
        result["settled_ticks"] = ticks
        result["hyperedge_curves"] = {
            key: [[p.x, p.y] for p in points]
            for key, points in controller.hyperedge_curves().items()
        }

    if positions:
        xs = [p.x for p in positions.values()]
        ys = [p.y for p in positions.values()]
        logger.info(f"Bounding box: x=[{min(xs):.1f}, {max(xs):.1f}], y=[{min(ys):.1f}, {max(ys):.1f}]")

    if args.output:
        args.output.write_text(json.dumps(result, indent=2), encoding="utf-8")
        logger.info(f"Positions written to {args.output}")
    else:
        print(json.dumps(result, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Create a synthetic knowledge graph JSON file for layout debugging.

Produces clustered topic groups: each topic has an input node, context
nodes, and an output node, joined by direct, temporal and hyperedges,
plus a few cross-topic links.
"""

import argparse
import json
import random
from pathlib import Path


TOPICS = [
    "docker", "kubernetes", "postgres", "redis", "fastapi", "pytest",
    "terraform", "grafana", "kafka", "numpy", "pandas", "asyncio",
]


def create_graph(topics: int, contexts_per_topic: int, seed: int) -> dict:
    """Build nodes and edges for ``topics`` topic clusters."""
    rng = random.Random(seed)
    nodes = []
    edges = []

    for t in range(topics):
        name = f"{TOPICS[t % len(TOPICS)]}_{t}"
        input_id = f"{name}:in"
        output_id = f"{name}:out"
        nodes.append({"id": input_id, "label": f"{name} question", "type": "input",
                      "confidence": round(rng.uniform(0.5, 1.0), 3)})
        nodes.append({"id": output_id, "label": f"{name} answer", "type": "output",
                      "confidence": round(rng.uniform(0.3, 1.0), 3)})

        context_ids = []
        for c in range(contexts_per_topic):
            context_id = f"{name}:ctx{c}"
            context_ids.append(context_id)
            nodes.append({"id": context_id, "label": f"{name} context {c}", "type": "context",
                          "confidence": round(rng.random(), 3)})
            edges.append({"source": input_id, "target": context_id, "type": "direct",
                          "confidence": round(rng.uniform(0.4, 1.0), 3)})

        edges.append({"source": input_id, "target": output_id, "type": "hyperedge",
                      "via": context_ids[:2], "confidence": round(rng.uniform(0.5, 1.0), 3)})
        for a, b in zip(context_ids, context_ids[1:]):
            edges.append({"source": a, "target": b, "type": "temporal",
                          "confidence": round(rng.uniform(0.2, 0.9), 3)})

    # Sparse cross-topic links
    ids = [n["id"] for n in nodes]
    for _ in range(topics):
        a, b = rng.sample(ids, 2)
        edges.append({"source": a, "target": b, "type": "direct",
                      "confidence": round(rng.uniform(0.1, 0.5), 3)})

    return {"nodes": nodes, "edges": edges}


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a synthetic graph JSON file")
    parser.add_argument("output", type=Path, help="Where to write the graph JSON")
    parser.add_argument("--topics", type=int, default=20)
    parser.add_argument("--contexts", type=int, default=5, help="Context nodes per topic")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    graph = create_graph(args.topics, args.contexts, args.seed)
    args.output.write_text(json.dumps(graph, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote {len(graph['nodes'])} nodes and {len(graph['edges'])} edges to {args.output}")


if __name__ == "__main__":
    main()

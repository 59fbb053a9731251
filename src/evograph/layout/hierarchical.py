"""Layered placement for hierarchical mode.

Nodes are grouped into layers by topological generation of the edge
graph (cycles collapsed into strongly connected components). Graphs
without edges fall back to layers by node type: input, context, output.
"""

import logging

import networkx as nx

from evograph.models import Canvas, Edge, Node, NodeType, Point

logger = logging.getLogger(__name__)

TYPE_LAYERS = (NodeType.INPUT, NodeType.CONTEXT, NodeType.OUTPUT)


def build_digraph(nodes: list[Node], edges: list[Edge]) -> nx.DiGraph:
    """Directed graph over the visible nodes; hyperedges become chains."""
    G = nx.DiGraph()
    G.add_nodes_from(sorted(node.id for node in nodes))
    for edge in edges:
        endpoints = edge.endpoints
        for src, dst in zip(endpoints, endpoints[1:]):
            if src in G.nodes and dst in G.nodes and src != dst:
                G.add_edge(src, dst)
    return G


def topological_layers(G: nx.DiGraph) -> list[list[str]]:
    """Topological generations of the condensation, members sorted."""
    condensed = nx.condensation(G)
    layers = []
    for generation in nx.topological_generations(condensed):
        members = sorted(m for component in generation for m in condensed.nodes[component]["members"])
        layers.append(members)
    return layers


def type_layers(nodes: list[Node]) -> list[list[str]]:
    """One layer per node type, in input -> context -> output order."""
    layers = []
    for node_type in TYPE_LAYERS:
        members = sorted(node.id for node in nodes if node.type == node_type)
        if members:
            layers.append(members)
    return layers


def hierarchical_layout(nodes: list[Node], edges: list[Edge], canvas: Canvas) -> dict[str, Point]:
    """
    Deterministic layered placement.

    Layers are spread top to bottom across the canvas height; nodes in a
    layer are spread evenly across the width.
    """
    G = build_digraph(nodes, edges)
    if G.number_of_edges() == 0:
        layers = type_layers(nodes)
    else:
        layers = topological_layers(G)

    logger.debug(f"Hierarchical layout: {len(layers)} layers for {G.number_of_nodes()} nodes")

    min_x, max_x, min_y, max_y = canvas.bounds
    layer_height = (max_y - min_y) / len(layers)

    positions: dict[str, Point] = {}
    for row, members in enumerate(layers):
        y = min_y + (row + 0.5) * layer_height
        column_width = (max_x - min_x) / len(members)
        for col, node_id in enumerate(members):
            positions[node_id] = Point(min_x + (col + 0.5) * column_width, y)

    return positions

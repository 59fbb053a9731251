"""Filter predicates deriving the visible subgraph.

Pure functions: the same nodes, edges and criteria always give the same
visible sets, and inputs are never modified.
"""

import logging
from collections.abc import Iterable

from evograph.models import Edge, FilterCriteria, Node

logger = logging.getLogger(__name__)


def node_matches(node: Node, criteria: FilterCriteria) -> bool:
    """Check a node against search text, confidence range and type set."""
    search = criteria.search.lower()
    if search and search not in node.label.lower():
        return False
    if node.confidence < criteria.confidence_threshold:
        return False
    if node.confidence > criteria.max_confidence:
        return False
    return criteria.accepts_node_type(node.type)


def edge_matches(edge: Edge, visible_ids: set[str], criteria: FilterCriteria) -> bool:
    """An edge is visible only when every endpoint is visible and its type is accepted."""
    if not criteria.accepts_edge_type(edge.type):
        return False
    return all(endpoint in visible_ids for endpoint in edge.endpoints)


def filter_graph(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    criteria: FilterCriteria,
) -> tuple[list[Node], list[Edge]]:
    """
    Derive the visible subgraph.

    Edges that reference unknown node ids are dropped rather than raising.

    Args:
        nodes: All nodes of the graph
        edges: All edges of the graph
        criteria: Active filter criteria

    Returns:
        (visible_nodes, visible_edges), both in input order
    """
    nodes = list(nodes)
    known_ids = {node.id for node in nodes}

    visible_nodes = [node for node in nodes if node_matches(node, criteria)]
    visible_ids = {node.id for node in visible_nodes}

    visible_edges = []
    dangling = 0
    for edge in edges:
        if not known_ids.issuperset(edge.endpoints):
            dangling += 1
            continue
        if edge_matches(edge, visible_ids, criteria):
            visible_edges.append(edge)

    if dangling:
        logger.debug(f"Dropped {dangling} edges referencing unknown nodes")

    return visible_nodes, visible_edges

"""Pytest configuration and fixtures."""

import pytest

from evograph.config import Settings, get_test_settings
from evograph.layout import LayoutConfig
from evograph.models import Canvas, Edge, EdgeType, FilterCriteria, Node, NodeType


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def canvas() -> Canvas:
    """Standard 800x600 canvas with a 50 unit margin."""
    return Canvas(width=800.0, height=600.0, margin=50.0)


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Small iteration budget to keep layout tests fast."""
    return LayoutConfig(iterations=10)


@pytest.fixture
def scenario_nodes() -> list[Node]:
    """Three nodes of different type and confidence."""
    return [
        Node(id="A", label="Alpha question", type=NodeType.INPUT, confidence=0.9),
        Node(id="B", label="Beta answer", type=NodeType.OUTPUT, confidence=0.4),
        Node(id="C", label="Gamma context", type=NodeType.CONTEXT, confidence=0.1),
    ]


@pytest.fixture
def scenario_edges() -> list[Edge]:
    """Edges among the scenario nodes, plus one hyperedge through all three."""
    return [
        Edge(source_id="A", target_id="B", type=EdgeType.DIRECT, confidence=0.8),
        Edge(source_id="A", target_id="C", type=EdgeType.DIRECT, confidence=0.6),
        Edge(source_id="C", target_id="B", type=EdgeType.TEMPORAL, confidence=0.5),
        Edge(source_id="A", target_id="B", type=EdgeType.HYPEREDGE, via=("C",), confidence=0.7),
    ]


@pytest.fixture
def sample_graph() -> tuple[list[Node], list[Edge]]:
    """Two four-node clusters joined by a single weak edge."""
    types = [NodeType.INPUT, NodeType.CONTEXT, NodeType.CONTEXT, NodeType.OUTPUT]
    nodes = []
    edges = []
    for cluster in ("docker", "redis"):
        ids = [f"{cluster}-{i}" for i in range(4)]
        for i, node_id in enumerate(ids):
            nodes.append(
                Node(id=node_id, label=f"{cluster} node {i}", type=types[i], confidence=0.2 + 0.2 * i)
            )
        for a, b in zip(ids, ids[1:]):
            edges.append(Edge(source_id=a, target_id=b, confidence=0.9))
        edges.append(
            Edge(source_id=ids[0], target_id=ids[3], type=EdgeType.HYPEREDGE, via=(ids[1], ids[2]))
        )
    edges.append(Edge(source_id="docker-3", target_id="redis-0", type=EdgeType.TEMPORAL, confidence=0.1))
    return nodes, edges


@pytest.fixture
def all_criteria() -> FilterCriteria:
    """Criteria that accept everything."""
    return FilterCriteria()

"""Unit tests for filter predicates."""

from evograph.filtering import edge_matches, filter_graph, node_matches
from evograph.models import Edge, EdgeType, FilterCriteria, Node, NodeType


def ids(nodes: list[Node]) -> set[str]:
    return {n.id for n in nodes}


class TestNodeMatches:
    """Tests for the node predicate."""

    def test_search_is_case_insensitive_substring(self) -> None:
        node = Node(id="n", label="Docker Compose", type=NodeType.INPUT)
        assert node_matches(node, FilterCriteria(search="COMPOSE"))
        assert node_matches(node, FilterCriteria(search="ker co"))
        assert not node_matches(node, FilterCriteria(search="kubernetes"))

    def test_empty_search_matches(self) -> None:
        node = Node(id="n", label="anything", type=NodeType.INPUT)
        assert node_matches(node, FilterCriteria(search=""))

    def test_threshold_is_inclusive(self) -> None:
        node = Node(id="n", label="x", type=NodeType.INPUT, confidence=0.5)
        assert node_matches(node, FilterCriteria(confidence_threshold=0.5))
        assert not node_matches(node, FilterCriteria(confidence_threshold=0.51))

    def test_max_confidence(self) -> None:
        node = Node(id="n", label="x", type=NodeType.INPUT, confidence=0.9)
        assert not node_matches(node, FilterCriteria(max_confidence=0.8))


class TestEdgeMatches:
    """Tests for the edge predicate."""

    def test_type_must_be_accepted(self) -> None:
        edge = Edge(source_id="a", target_id="b", type=EdgeType.TEMPORAL)
        criteria = FilterCriteria(edge_types={EdgeType.DIRECT})
        assert not edge_matches(edge, {"a", "b"}, criteria)

    def test_hyperedge_needs_every_endpoint(self) -> None:
        edge = Edge(source_id="a", target_id="c", type=EdgeType.HYPEREDGE, via=("b",))
        assert edge_matches(edge, {"a", "b", "c"}, FilterCriteria())
        assert not edge_matches(edge, {"a", "c"}, FilterCriteria())


class TestFilterGraph:
    """Tests for filter_graph."""

    def test_scenario_threshold_and_types(self, scenario_nodes, scenario_edges) -> None:
        """Threshold 0.5 with input/output types keeps only A; C's edges are excluded."""
        criteria = FilterCriteria(
            confidence_threshold=0.5,
            node_types={NodeType.INPUT, NodeType.OUTPUT},
        )
        visible_nodes, visible_edges = filter_graph(scenario_nodes, scenario_edges, criteria)

        assert ids(visible_nodes) == {"A"}
        assert visible_edges == []

    def test_scenario_lower_threshold(self, scenario_nodes, scenario_edges) -> None:
        """With B above the threshold, A and B are visible and nothing touching C is."""
        criteria = FilterCriteria(
            confidence_threshold=0.4,
            node_types={NodeType.INPUT, NodeType.OUTPUT},
        )
        visible_nodes, visible_edges = filter_graph(scenario_nodes, scenario_edges, criteria)

        assert ids(visible_nodes) == {"A", "B"}
        assert len(visible_edges) == 1
        assert visible_edges[0].endpoints == ("A", "B")
        assert all("C" not in e.endpoints for e in visible_edges)

    def test_visible_edges_never_dangle(self, sample_graph) -> None:
        """Every visible edge endpoint is a visible node, for many criteria."""
        nodes, edges = sample_graph
        for threshold in (0.0, 0.3, 0.5, 0.7, 1.0):
            for search in ("", "docker", "node 1", "zzz"):
                criteria = FilterCriteria(confidence_threshold=threshold, search=search)
                visible_nodes, visible_edges = filter_graph(nodes, edges, criteria)
                visible_ids = ids(visible_nodes)
                for edge in visible_edges:
                    assert set(edge.endpoints) <= visible_ids

    def test_idempotent(self, sample_graph) -> None:
        """Filtering twice gives the same result and leaves inputs alone."""
        nodes, edges = sample_graph
        criteria = FilterCriteria(confidence_threshold=0.3, edge_types={EdgeType.DIRECT})
        first = filter_graph(nodes, edges, criteria)
        second = filter_graph(nodes, edges, criteria)
        assert first == second
        assert len(nodes) == 8

    def test_unknown_endpoint_is_dropped(self) -> None:
        """Edges naming unknown nodes are excluded, not an error."""
        nodes = [Node(id="a", label="a", type=NodeType.INPUT)]
        edges = [Edge(source_id="a", target_id="ghost")]
        visible_nodes, visible_edges = filter_graph(nodes, edges, FilterCriteria())
        assert ids(visible_nodes) == {"a"}
        assert visible_edges == []

    def test_empty_inputs(self) -> None:
        assert filter_graph([], [], FilterCriteria()) == ([], [])

    def test_edge_type_filter_keeps_endpoints(self, scenario_nodes, scenario_edges) -> None:
        """Edge type filtering hides edges but never nodes."""
        criteria = FilterCriteria(edge_types={EdgeType.TEMPORAL})
        visible_nodes, visible_edges = filter_graph(scenario_nodes, scenario_edges, criteria)
        assert ids(visible_nodes) == {"A", "B", "C"}
        assert [e.type for e in visible_edges] == [EdgeType.TEMPORAL]

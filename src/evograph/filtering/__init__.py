"""Filtering - visible subgraph derivation and confidence statistics.

Provides:
- Filter predicates (search, confidence range, node/edge type sets)
- Descriptive statistics feeding the filter panel
"""

from evograph.filtering.predicates import edge_matches, filter_graph, node_matches
from evograph.filtering.stats import (
    ConfidenceStats,
    FlaggedValue,
    Quartiles,
    detect_outliers,
    percentile,
    significant_changes,
    summarize,
)

__all__ = [
    # Predicates
    "filter_graph",
    "node_matches",
    "edge_matches",
    # Statistics
    "ConfidenceStats",
    "Quartiles",
    "FlaggedValue",
    "summarize",
    "percentile",
    "detect_outliers",
    "significant_changes",
]

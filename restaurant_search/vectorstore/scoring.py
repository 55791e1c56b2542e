"""Conversions between Qdrant scores, distances and client-facing scores.

Qdrant reports a similarity for cosine and dot collections and a distance
for euclid collections. The index client normalises everything to a
distance (lower is closer); the search pipeline turns distances into scores
(higher is better) with the function that matches the metric.
"""

from collections.abc import Callable

from qdrant_client.models import Distance

from restaurant_search.config import DistanceMetric

QDRANT_DISTANCE: dict[DistanceMetric, Distance] = {
    DistanceMetric.COSINE: Distance.COSINE,
    DistanceMetric.EUCLID: Distance.EUCLID,
    DistanceMetric.DOT: Distance.DOT,
}

_FROM_QDRANT: dict[Distance, DistanceMetric] = {v: k for k, v in QDRANT_DISTANCE.items()}

_TO_DISTANCE: dict[DistanceMetric, Callable[[float], float]] = {
    DistanceMetric.COSINE: lambda similarity: 1.0 - similarity,
    DistanceMetric.EUCLID: lambda distance: distance,
    DistanceMetric.DOT: lambda product: -product,
}

_TO_SCORE: dict[DistanceMetric, Callable[[float], float]] = {
    # Cosine distance is nominally in [0, 2]; scores below 0 are possible.
    DistanceMetric.COSINE: lambda distance: 1.0 - distance,
    DistanceMetric.EUCLID: lambda distance: 1.0 / (1.0 + distance),
    DistanceMetric.DOT: lambda distance: -distance,
}


def metric_from_qdrant(distance: Distance) -> DistanceMetric | None:
    """Map a Qdrant collection distance back to a DistanceMetric, if supported."""
    return _FROM_QDRANT.get(distance)


def distance_from_qdrant_score(metric: DistanceMetric, raw_score: float) -> float:
    """Convert the ``score`` Qdrant returns into a distance."""
    return _TO_DISTANCE[metric](raw_score)


def score_from_distance(metric: DistanceMetric, distance: float) -> float:
    """Convert a distance into a relevance score (higher is better)."""
    return _TO_SCORE[metric](distance)

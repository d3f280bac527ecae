"""Vector helpers for substring-aware similarity scoring.

The functions here are pure and independent of the document store so they can
be unit tested on hand-built concordances.
"""

from __future__ import annotations

from collections.abc import Mapping
import math

from vector_search.search.models import Vector


def magnitude(concordance: Mapping[str, int]) -> float:
    """Return the Euclidean norm of the concordance counts."""

    return math.sqrt(sum(count * count for count in concordance.values()))


def build_vector(concordance: Mapping[str, int]) -> Vector:
    return Vector(concordance=concordance, magnitude=magnitude(concordance))


def relation(candidate: Vector, query: Vector) -> float:
    """Score how strongly ``candidate`` relates to ``query``.

    Every query token contained as a substring of a candidate token adds the
    product of both counts; the sum is normalized by the product of the two
    magnitudes. Containment is directional: a short query token matches inside
    a longer indexed token, never the reverse, so ``relation(a, b)`` and
    ``relation(b, a)`` may differ.
    """

    denominator = candidate.magnitude * query.magnitude
    if denominator <= 0:
        return 0.0

    accumulator = 0
    query_items = tuple(query.concordance.items())
    for candidate_token, candidate_count in candidate.concordance.items():
        for query_token, query_count in query_items:
            if query_token in candidate_token:
                accumulator += candidate_count * query_count
    return accumulator / denominator

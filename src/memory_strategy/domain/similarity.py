"""Similarity helpers shared by the recall strategies."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Cosine similarity in [-1.0, 1.0] over the overlapping prefix of two vectors.

    Returns 0.0 when either vector is empty or has zero magnitude over the
    compared prefix.
    """
    length = min(len(vector_a), len(vector_b))
    if length == 0:
        return 0.0

    a = np.asarray(vector_a[:length], dtype=np.float64)
    b = np.asarray(vector_b[:length], dtype=np.float64)

    magnitude = float(np.dot(a, a) * np.dot(b, b))
    if magnitude <= 0.0:
        return 0.0

    similarity = float(np.dot(a, b)) / float(np.sqrt(magnitude))
    return max(-1.0, min(1.0, similarity))


def levenshtein_distance(source: str, target: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if len(source) < len(target):
        source, target = target, source

    previous = list(range(len(target) + 1))
    for i, source_char in enumerate(source, start=1):
        current = [i]
        for j, target_char in enumerate(target, start=1):
            cost = 0 if source_char == target_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def fuzzy_similarity(source: str, target: str) -> float:
    """Case-insensitive normalized edit similarity.

    ``1 - distance / max(len(source), len(target))``; two empty strings are
    identical (1.0), one empty string against a non-empty one scores 0.0.
    """
    if not source and not target:
        return 1.0
    if not source or not target:
        return 0.0

    source = source.lower()
    target = target.lower()
    distance = levenshtein_distance(source, target)
    return 1.0 - distance / max(len(source), len(target))

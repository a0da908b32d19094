"""Heuristic completion estimates for display alongside ranked templates.

These numbers are rough approximations, not a derived hypergeometric
probability. Ranking never uses them; they only help a player compare hands
that are the same distance away.
"""

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from analysis.logic.settings import DEFAULT_REMAINING_DRAWS
from analysis.logic.tiles import FULL_SET_SIZE, normalize_tile, remaining_count
from analysis.logic.types import HandAnalysis

MAX_SCORE = 100.0
_DISTANCE_DECAY = 0.3
_MIN_POINTS_FOR_BONUS = 25


@dataclass(frozen=True, slots=True)
class ViabilityEstimate:
    probability: float
    score: float


def draw_probability(
    needed: Sequence[int],
    seen: Sequence[int],
    remaining_draws: int = DEFAULT_REMAINING_DRAWS,
) -> float:
    """
    Approximate the chance of drawing every needed tile.

    Each needed copy is treated independently: the chance of not seeing it
    over the remaining draws is (1 - available/unseen) ** (draws/copies_left).
    Returns 0 when more copies are needed than remain unseen.
    """
    if not needed:
        return 1.0

    needed_counts = Counter(normalize_tile(tile) for tile in needed)
    unseen_total = max(1, FULL_SET_SIZE - len(seen))
    probability = 1.0

    for tile, count in needed_counts.items():
        available = remaining_count(tile, seen)
        if available < count:
            return 0.0
        for i in range(count):
            adjusted_available = max(0, available - i)
            adjusted_unseen = max(1, unseen_total - i)
            miss = (1 - adjusted_available / adjusted_unseen) ** (remaining_draws / (count - i))
            probability *= 1 - miss

    return min(1.0, max(0.0, probability))


def viability_score(distance: float, probability: float, points: int) -> float:
    """Combine distance, probability and hand value into a 0-100 score."""
    if distance == 0:
        return MAX_SCORE
    if math.isinf(distance):
        return 0.0
    distance_factor = math.exp(-distance * _DISTANCE_DECAY)
    points_factor = 1 + math.log10(max(_MIN_POINTS_FOR_BONUS, points)) / 10
    score = distance_factor * probability * points_factor * MAX_SCORE
    return min(MAX_SCORE, max(0.0, score))


def estimate_viability(
    analysis: HandAnalysis,
    seen: Sequence[int],
    remaining_draws: int = DEFAULT_REMAINING_DRAWS,
) -> ViabilityEstimate:
    """Estimate for one analyzed template; seen tiles include the player's own."""
    if not analysis.is_viable:
        return ViabilityEstimate(probability=0.0, score=0.0)
    probability = draw_probability(analysis.needed_tiles, seen, remaining_draws)
    return ViabilityEstimate(
        probability=probability,
        score=viability_score(analysis.distance, probability, analysis.template.points),
    )

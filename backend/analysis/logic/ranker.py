"""
Hand ranking -- find each template's best combination and order templates by it.
"""

from collections.abc import Callable, Iterable

import structlog

from analysis.logic.distance import evaluate_combination, needed_tiles
from analysis.logic.expander import expand_template
from analysis.logic.settings import DEFAULT_MAX_RESULTS, DEFAULT_VIABILITY_THRESHOLD
from analysis.logic.types import (
    UNREACHABLE,
    CombinationDistance,
    ConcreteCombination,
    HandAnalysis,
    HandTemplate,
    PlayerHandState,
)

logger = structlog.get_logger()

type Expander = Callable[[HandTemplate], Iterable[ConcreteCombination]]


def analyze_template(
    template: HandTemplate,
    hand: PlayerHandState,
    *,
    expand: Expander = expand_template,
    viability_threshold: int = DEFAULT_VIABILITY_THRESHOLD,
) -> HandAnalysis:
    """
    Evaluate every combination of a template and keep the closest one.

    Stops at the first zero-distance combination. A template with no
    combinations, or none compatible with the hand, is unreachable.
    """
    if template.is_concealed and hand.exposed_melds:
        return HandAnalysis(template=template, distance=UNREACHABLE)

    best_combination: ConcreteCombination | None = None
    best: CombinationDistance | None = None
    for combination in expand(template):
        result = evaluate_combination(combination, hand, is_concealed=template.is_concealed)
        if not result.is_reachable:
            continue
        if best is None or result.distance < best.distance:
            best_combination, best = combination, result
        if result.distance == 0:
            break

    if best is None or best_combination is None:
        return HandAnalysis(template=template, distance=UNREACHABLE)

    return HandAnalysis(
        template=template,
        distance=best.distance,
        best_combination=best_combination,
        group_matches=best.group_matches,
        needed_tiles=needed_tiles(best_combination, best.group_matches),
        jokers_usable=best.jokers_used,
        is_viable=best.distance <= viability_threshold,
        meld_to_group=best.meld_to_group,
    )


def _rank_key(analysis: HandAnalysis) -> tuple[float, int]:
    # closer first, then higher value
    return analysis.distance, -analysis.template.points


def rank_templates(
    templates: Iterable[HandTemplate],
    hand: PlayerHandState,
    *,
    max_results: int = DEFAULT_MAX_RESULTS,
    expand: Expander = expand_template,
    viability_threshold: int = DEFAULT_VIABILITY_THRESHOLD,
) -> list[HandAnalysis]:
    """Analyze all templates and return the viable ones, best first."""
    analyses = [
        analyze_template(template, hand, expand=expand, viability_threshold=viability_threshold)
        for template in templates
    ]
    viable = sorted((a for a in analyses if a.is_viable), key=_rank_key)
    logger.debug("ranked templates", evaluated=len(analyses), viable=len(viable), returned=min(len(viable), max_results))
    return viable[:max_results]

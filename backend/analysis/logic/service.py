"""
Card analysis service.

HandAnalyzer is what callers outside the core use: it applies
AnalysisSettings, routes expansion through the shared cache and exposes the
invalidation hook the card editor calls after a template changes.
"""

from collections.abc import Iterable, Sequence

import structlog

from analysis.logic.cache import ExpansionCache
from analysis.logic.call_advisor import advise_calls
from analysis.logic.exceptions import InvalidTileError
from analysis.logic.expander import expand_template
from analysis.logic.heuristics import ViabilityEstimate, estimate_viability
from analysis.logic.ranker import analyze_template, rank_templates
from analysis.logic.settings import AnalysisSettings
from analysis.logic.tiles import decode_tile
from analysis.logic.types import CallAdvice, ConcreteCombination, HandAnalysis, HandTemplate, PlayerHandState
from shared.logging import setup_logging

logger = structlog.get_logger()


class HandAnalyzer:
    """Rank a card's templates against a hand and advise on discards."""

    def __init__(
        self,
        settings: AnalysisSettings | None = None,
        cache: ExpansionCache | None = None,
    ) -> None:
        self._settings = settings or AnalysisSettings()
        self._cache = cache if cache is not None else ExpansionCache()

    @property
    def settings(self) -> AnalysisSettings:
        return self._settings

    @property
    def cache(self) -> ExpansionCache:
        return self._cache

    def _expand(self, template: HandTemplate) -> tuple[ConcreteCombination, ...]:
        if self._settings.cache_enabled:
            return self._cache.get_or_expand(template)
        return expand_template(template)

    def analyze(
        self,
        templates: Iterable[HandTemplate],
        hand: PlayerHandState,
        *,
        max_results: int | None = None,
    ) -> list[HandAnalysis]:
        """Viable templates ordered by distance, then points, truncated to max_results."""
        return rank_templates(
            templates,
            hand,
            max_results=max_results if max_results is not None else self._settings.max_results,
            expand=self._expand,
            viability_threshold=self._settings.viability_threshold,
        )

    def analyze_template(self, template: HandTemplate, hand: PlayerHandState) -> HandAnalysis:
        return analyze_template(
            template,
            hand,
            expand=self._expand,
            viability_threshold=self._settings.viability_threshold,
        )

    def advise_call(
        self,
        templates: Sequence[HandTemplate],
        hand: PlayerHandState,
        discarded_tile: int,
    ) -> list[CallAdvice]:
        """
        Rank the hand as it stands and list the claims open for a discard.

        Every viable template is considered, not only the first max_results,
        so a claim is never hidden by truncation. Advice follows ranking order.
        """
        try:
            decode_tile(discarded_tile)
        except InvalidTileError:
            logger.warning("rejected discard", tile=discarded_tile)
            raise

        analyses = self.analyze(templates, hand, max_results=max(1, len(templates)))
        advice = advise_calls(discarded_tile, analyses)
        logger.debug("advised calls", tile=discarded_tile, viable=len(analyses), claims=len(advice))
        return advice

    def estimate(self, analysis: HandAnalysis, seen_tiles: Sequence[int]) -> ViabilityEstimate:
        """Heuristic completion estimate; seen tiles include the player's own."""
        return estimate_viability(analysis, seen_tiles, self._settings.remaining_draws)

    def invalidate_template(self, template_id: int) -> None:
        """Called by the card editor after a template is edited or deleted."""
        self._cache.invalidate(template_id)


def create_analyzer(settings: AnalysisSettings | None = None, *, log_level: int | None = None) -> HandAnalyzer:
    """Entry-point factory: load settings, set up logging into settings.log_dir and build an analyzer."""
    s = settings or AnalysisSettings()
    setup_logging(log_dir=s.log_dir, level=log_level)
    return HandAnalyzer(s)

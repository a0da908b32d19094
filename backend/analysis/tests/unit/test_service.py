"""Unit tests for the HandAnalyzer service."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from analysis.lib.builders import fixed, kong, pung
from analysis.lib.sample_card import build_sample_card
from analysis.logic.cache import ExpansionCache
from analysis.logic.display import generate_example_hand, parse_tiles
from analysis.logic.enums import ClaimType
from analysis.logic.exceptions import InvalidTileError
from analysis.logic.service import HandAnalyzer, create_analyzer
from analysis.logic.settings import AnalysisSettings
from analysis.logic.types import HandTemplate, PlayerHandState

CARD = build_sample_card()
CARD_BY_NAME = {template.name: template for template in CARD}


def _hand(tiles: str) -> PlayerHandState:
    return PlayerHandState(tiles=tuple(parse_tiles(tiles)))


class TestAnalyze:
    def test_complete_hand_ranks_first(self):
        template = CARD_BY_NAME["Consec Run #1"]
        hand = PlayerHandState(tiles=tuple(generate_example_hand(template.groups)))

        ranked = HandAnalyzer().analyze(CARD, hand)

        assert ranked[0].template.id == template.id
        assert ranked[0].distance == 0

    def test_truncates_to_settings_max_results(self):
        analyzer = HandAnalyzer(AnalysisSettings(max_results=3, viability_threshold=14))

        ranked = analyzer.analyze(CARD, _hand("1D 2D 3D"))

        assert len(ranked) == 3

    def test_explicit_max_results_overrides_settings(self):
        analyzer = HandAnalyzer(AnalysisSettings(viability_threshold=14))

        assert len(analyzer.analyze(CARD, _hand("1D"), max_results=5)) == 5

    def test_uses_cache_when_enabled(self):
        cache = ExpansionCache()
        analyzer = HandAnalyzer(AnalysisSettings(cache_enabled=True), cache)

        analyzer.analyze(CARD, _hand("1D"))

        assert len(cache) == len(CARD)

    def test_bypasses_cache_when_disabled(self):
        cache = ExpansionCache()
        analyzer = HandAnalyzer(AnalysisSettings(cache_enabled=False), cache)

        analyzer.analyze(CARD, _hand("1D"))

        assert len(cache) == 0

    def test_analyze_template_applies_threshold(self):
        template = HandTemplate(id=500, name="winds", groups=(kong(fixed(parse_tiles("NW")[0])),))

        strict = HandAnalyzer(AnalysisSettings(viability_threshold=3)).analyze_template(template, _hand(""))
        loose = HandAnalyzer(AnalysisSettings(viability_threshold=4)).analyze_template(template, _hand(""))

        assert not strict.is_viable
        assert loose.is_viable


class TestAdviseCall:
    def test_reports_claim_for_needed_discard(self):
        template = HandTemplate(id=600, name="bams", groups=(pung(fixed(parse_tiles("6B")[0])),))

        advice = HandAnalyzer().advise_call([template], _hand("6B"), parse_tiles("6B")[0])

        assert len(advice) == 1
        assert advice[0].claim_type is ClaimType.PUNG
        assert advice[0].new_distance == 1

    def test_considers_templates_beyond_max_results(self):
        near = HandTemplate(id=601, name="near", groups=(pung(fixed(parse_tiles("1D")[0])),))
        far = HandTemplate(id=602, name="far", groups=(pung(fixed(parse_tiles("9C")[0])),))
        analyzer = HandAnalyzer(AnalysisSettings(max_results=1))

        advice = analyzer.advise_call([near, far], _hand("1D 1D 1D"), parse_tiles("9C")[0])

        assert [a.template.id for a in advice] == [602]

    def test_rejects_invalid_discard(self, caplog):
        with caplog.at_level(logging.WARNING), pytest.raises(InvalidTileError):
            HandAnalyzer().advise_call(CARD, _hand("1D"), 0x1A)

        events = [r.msg for r in caplog.records if isinstance(r.msg, dict)]
        assert events[0]["event"] == "rejected discard"
        assert events[0]["tile"] == 0x1A

    def test_empty_card_gives_no_advice(self):
        assert HandAnalyzer().advise_call([], _hand("1D"), parse_tiles("1D")[0]) == []


class TestEstimateAndInvalidate:
    def test_estimate_uses_remaining_draws_setting(self):
        template = HandTemplate(id=700, name="craks", groups=(kong(fixed(parse_tiles("9C")[0])),))
        hand = _hand("9C")
        short_horizon = HandAnalyzer(AnalysisSettings(remaining_draws=5))
        long_horizon = HandAnalyzer(AnalysisSettings(remaining_draws=80))
        analysis = short_horizon.analyze_template(template, hand)

        short_estimate = short_horizon.estimate(analysis, hand.tiles)
        long_estimate = long_horizon.estimate(analysis, hand.tiles)
        assert short_estimate.probability < long_estimate.probability

    def test_invalidate_template_drops_cached_expansion(self):
        analyzer = HandAnalyzer()
        template = CARD_BY_NAME["Quints #1"]
        analyzer.analyze_template(template, _hand("1D"))
        assert template.id in analyzer.cache

        analyzer.invalidate_template(template.id)

        assert template.id not in analyzer.cache

    def test_edited_template_is_reevaluated_after_invalidation(self):
        analyzer = HandAnalyzer()
        before = HandTemplate(id=800, name="edit me", groups=(pung(fixed(parse_tiles("1D")[0])),))
        edited = before.model_copy(update={"groups": (pung(fixed(parse_tiles("2D")[0])),)})
        hand = _hand("2D 2D 2D")

        assert analyzer.analyze_template(before, hand).distance == 3
        analyzer.invalidate_template(before.id)

        assert analyzer.analyze_template(edited, hand).distance == 0


class TestCreateAnalyzer:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        """Allow file logging and put the root logger back after setup_logging replaced its handlers."""
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        with patch("shared.logging._is_test", return_value=False):
            yield
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_logs_to_settings_log_dir(self, tmp_path):
        log_dir = tmp_path / "analysis"

        analyzer = create_analyzer(AnalysisSettings(log_dir=str(log_dir)))

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename).parent == log_dir
        assert analyzer.settings.log_dir == str(log_dir)

    def test_reads_log_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ANALYSIS_LOG_DIR", str(tmp_path / "env-logs"))

        create_analyzer()

        assert (tmp_path / "env-logs").is_dir()

    def test_no_file_without_log_dir(self, monkeypatch):
        monkeypatch.delenv("ANALYSIS_LOG_DIR", raising=False)

        create_analyzer(AnalysisSettings(), log_level=logging.WARNING)

        root = logging.getLogger()
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert root.level == logging.WARNING

import pytest
from pydantic import ValidationError

from analysis.logic.settings import AnalysisSettings


class TestAnalysisSettings:
    def test_defaults(self, monkeypatch):
        for name in ("VIABILITY_THRESHOLD", "MAX_RESULTS", "CACHE_ENABLED", "REMAINING_DRAWS", "LOG_DIR"):
            monkeypatch.delenv(f"ANALYSIS_{name}", raising=False)
        settings = AnalysisSettings()
        assert settings.viability_threshold == 6
        assert settings.max_results == 10
        assert settings.cache_enabled is True
        assert settings.remaining_draws == 50
        assert settings.log_dir is None

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_VIABILITY_THRESHOLD", "4")
        monkeypatch.setenv("ANALYSIS_MAX_RESULTS", "25")
        monkeypatch.setenv("ANALYSIS_CACHE_ENABLED", "false")
        settings = AnalysisSettings()
        assert settings.viability_threshold == 4
        assert settings.max_results == 25
        assert settings.cache_enabled is False

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError, match="viability_threshold"):
            AnalysisSettings(viability_threshold=-1)

    def test_max_results_zero_rejected(self):
        with pytest.raises(ValidationError, match="max_results"):
            AnalysisSettings(max_results=0)

    def test_remaining_draws_zero_rejected(self):
        with pytest.raises(ValidationError, match="remaining_draws"):
            AnalysisSettings(remaining_draws=0)

    def test_log_dir_empty_rejected(self):
        with pytest.raises(ValidationError, match="log_dir"):
            AnalysisSettings(log_dir="")

    def test_settings_are_frozen(self):
        settings = AnalysisSettings()
        with pytest.raises(ValidationError):
            settings.max_results = 3

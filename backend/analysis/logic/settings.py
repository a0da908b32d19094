"""Analysis configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VIABILITY_THRESHOLD = 6
DEFAULT_MAX_RESULTS = 10
DEFAULT_REMAINING_DRAWS = 50


class AnalysisSettings(BaseSettings):
    """
    Tunables for ranking and call advice.

    All fields default to the values the card analyzer has always used.
    """

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_", frozen=True)

    # templates further than this many tiles away are not viable
    viability_threshold: int = Field(default=DEFAULT_VIABILITY_THRESHOLD, ge=0)
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1)
    cache_enabled: bool = True
    # draw horizon for the heuristic completion probability
    remaining_draws: int = Field(default=DEFAULT_REMAINING_DRAWS, ge=1)
    log_dir: str | None = Field(default=None, min_length=1)

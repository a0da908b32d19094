"""Profile card analysis with cProfile.

Rank the sample card against a batch of generated hands, measure wall-clock
time across multiple iterations, and save a .prof file for detailed analysis.

Usage:
    uv run python bin/profile_analysis.py --iterations 5
    uv run python bin/profile_analysis.py --hands 200 --seed 7
    uv run python bin/profile_analysis.py --no-cache
    uv run python bin/profile_analysis.py --load
    uv run python bin/profile_analysis.py --load path/to/analysis.prof
"""

from __future__ import annotations

import argparse
import cProfile
import logging
import pstats
import random
import statistics
import sys
import time
from pathlib import Path

from analysis.lib.sample_card import build_sample_card
from analysis.logic.service import HandAnalyzer, create_analyzer
from analysis.logic.settings import AnalysisSettings
from analysis.logic.tiles import generate_full_tile_set
from analysis.logic.types import HandTemplate, PlayerHandState

PROFILE_DIR = Path(__file__).resolve().parent.parent / "backend" / "profiles"
HAND_SIZE = 13


def generate_hands(count: int, seed: int) -> list[PlayerHandState]:
    """Deal `count` 13-tile racks from a shuffled full set."""
    rng = random.Random(seed)
    hands = []
    for _ in range(count):
        wall = generate_full_tile_set()
        rng.shuffle(wall)
        hands.append(PlayerHandState(tiles=tuple(wall[:HAND_SIZE])))
    return hands


def _run(analyzer: HandAnalyzer, card: tuple[HandTemplate, ...], hands: list[PlayerHandState]) -> int:
    ranked = 0
    for hand in hands:
        ranked += len(analyzer.analyze(card, hand))
    return ranked


def profile_analysis(num_hands: int, seed: int, iterations: int, *, cache_enabled: bool) -> None:
    """Profile ranking the sample card with cProfile and timed iterations."""
    card = build_sample_card()
    hands = generate_hands(num_hands, seed)
    settings = AnalysisSettings(cache_enabled=cache_enabled, viability_threshold=14)
    print(f"Card templates: {len(card)}")
    print(f"Hands: {len(hands)} (seed {seed})")
    print(f"Expansion cache: {'on' if cache_enabled else 'off'}")
    print()

    # Suppress logging during profiling to keep output clean
    analyzer = create_analyzer(settings, log_level=logging.CRITICAL)

    # Cold run with a fresh cache, profiled
    profiler = cProfile.Profile()
    profiler.enable()
    ranked = _run(HandAnalyzer(settings), card, hands)
    profiler.disable()

    # Timed iterations share one analyzer so the cache stays warm
    elapsed_times = []
    for _ in range(iterations):
        start = time.perf_counter()
        _run(analyzer, card, hands)
        elapsed_times.append(time.perf_counter() - start)

    PROFILE_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = time.strftime("%Y-%m-%d_%H-%M-%S")
    profile_file = PROFILE_DIR / f"analysis_{timestamp}.prof"
    profiler.dump_stats(str(profile_file))

    _print_performance_stats(len(hands), ranked, elapsed_times, profile_file)
    _print_top_functions(profiler)


def _print_performance_stats(
    num_hands: int,
    ranked: int,
    elapsed_times: list[float],
    profile_file: Path,
) -> None:
    median_time = statistics.median(elapsed_times)

    print("=" * 60)
    print("PERFORMANCE")
    print("=" * 60)
    print(f"Hands analyzed: {num_hands}")
    print(f"Viable results: {ranked}")
    print(f"Iterations: {len(elapsed_times)}")
    print(f"Median time: {median_time:.3f}s")
    print(f"Min time: {min(elapsed_times):.3f}s")
    print(f"Max time: {max(elapsed_times):.3f}s")
    print(f"Throughput: {num_hands / median_time:.0f} hands/sec (based on median)")

    if len(elapsed_times) > 1:
        print(f"All runs: {', '.join(f'{t:.3f}s' for t in elapsed_times)}")

    print(f"Profile saved to: {profile_file}")
    print()


def _is_analysis_code(filename: str) -> bool:
    """Return True if filename belongs to the analysis core (not tests/libs)."""
    if "analysis/" not in filename:
        return False
    return "analysis/tests/" not in filename


def _short_path(filename: str) -> str:
    if "analysis/" in filename:
        return "analysis/" + filename.split("analysis/", 1)[1]
    return filename


def _format_func(key: tuple[str, int, str]) -> str:
    filename, lineno, func_name = key
    return f"{_short_path(filename)}:{lineno}({func_name})"


def _collect_analysis_entries(
    stats: pstats.Stats,
    sort_key: str = "cumulative",
    limit: int = 30,
) -> list[tuple[tuple[str, int, str], int, int, float, float]]:
    """Collect analysis-only profile entries sorted by the given key."""
    entries = []
    for key in stats.stats:
        if not _is_analysis_code(key[0]):
            continue
        cc, nc, tt, ct, _ = stats.stats[key]
        entries.append((key, cc, nc, tt, ct))

    sort_index = 3 if sort_key == "tottime" else 4  # tt or ct
    entries.sort(key=lambda e: e[sort_index], reverse=True)
    return entries[:limit]


def _print_entries_table(
    entries: list[tuple[tuple[str, int, str], int, int, float, float]],
) -> None:
    print(f"{'ncalls':>9}  {'tottime':>8}  {'percall':>8}  {'cumtime':>8}  {'percall':>8}  filename:lineno(function)")
    for key, cc, nc, tt, ct in entries:
        calls = str(nc) if cc == nc else f"{nc}/{cc}"
        tt_pc = tt / nc if nc else 0
        ct_pc = ct / cc if cc else 0
        print(f"{calls:>9}  {tt:>8.3f}  {tt_pc:>8.3f}  {ct:>8.3f}  {ct_pc:>8.3f}  {_format_func(key)}")


def _print_top_functions(profiler: cProfile.Profile, limit: int = 30) -> None:
    stats = pstats.Stats(profiler)
    entries = _collect_analysis_entries(stats, "cumulative", limit)
    print(f"Top {limit} analysis functions by cumulative time:")
    _print_entries_table(entries)
    print()


def _find_latest_profile() -> Path | None:
    if not PROFILE_DIR.exists():
        return None
    profiles = sorted(PROFILE_DIR.glob("*.prof"), key=lambda p: p.stat().st_mtime)
    return profiles[-1] if profiles else None


def load_profile(profile_path: Path | None, limit: int) -> None:
    """Load a .prof file and display cumulative and self time for analysis code."""
    if profile_path is None:
        profile_path = _find_latest_profile()
    if profile_path is None or not profile_path.exists():
        path_msg = str(profile_path) if profile_path else PROFILE_DIR
        print(f"No profile found: {path_msg}", file=sys.stderr)
        sys.exit(1)

    print(f"Loading profile: {profile_path.name}")
    stats = pstats.Stats(str(profile_path))
    print()

    cum_entries = _collect_analysis_entries(stats, "cumulative", limit)
    print(f"Top {limit} analysis functions by cumulative time:")
    _print_entries_table(cum_entries)
    print()

    tot_entries = _collect_analysis_entries(stats, "tottime", limit)
    print(f"Top {limit} analysis functions by total (self) time:")
    _print_entries_table(tot_entries)
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile card analysis with cProfile")
    parser.add_argument(
        "--hands",
        type=int,
        default=100,
        help="number of generated hands to rank (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="seed for dealing hands (default: 0)",
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=3,
        help="number of timed iterations (default: 3)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="expand every template on every call",
    )
    parser.add_argument(
        "--load",
        nargs="?",
        const="latest",
        metavar="PROF_FILE",
        help="load a .prof file for detailed analysis (default: latest)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=30,
        help="number of functions to display (default: 30)",
    )
    args = parser.parse_args()

    if args.load is not None:
        profile_path = None if args.load == "latest" else Path(args.load)
        load_profile(profile_path, args.limit)
        return

    if args.iterations < 1 or args.hands < 1:
        print("Iterations and hands must be at least 1", file=sys.stderr)
        sys.exit(1)

    profile_analysis(args.hands, args.seed, args.iterations, cache_enabled=not args.no_cache)


if __name__ == "__main__":
    main()

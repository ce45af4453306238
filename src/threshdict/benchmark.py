"""
Benchmarking module for choosing a ThresholdDict strategy threshold.

Times linear scans against bisection for dictionaries of increasing size and
reports the smallest size at which bisection wins, which is a sensible
``strategy_threshold`` for the machine the benchmark runs on.

Usage::

    python -m threshdict.benchmark --sizes 1 4 16 64 --repeat 5 --number 1000
"""

import argparse
import logging
import statistics
import sys
import timeit
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from textwrap import dedent
from typing import Final, Literal

import psutil

from threshdict.config import config
from threshdict.structures import ThresholdDict

logger = logging.getLogger(__name__)

type Strategy = Literal["linear", "binary"]

STRATEGIES: Final[tuple[Strategy, ...]] = ("linear", "binary")
DEFAULT_SIZES: Final[list[int]] = list(config["benchmark"]["sizes"])
DEFAULT_REPEAT: Final[int] = config["benchmark"]["repeat"]
DEFAULT_NUMBER: Final[int] = config["benchmark"]["number"]
# Distance between consecutive boundary keys in the generated dictionaries.
KEY_STEP: Final = 10


@dataclass
class BenchmarkResult:
    """Timings of one search strategy on one dictionary size."""

    size: int
    strategy: Strategy
    repeat_count: int
    number_per_repeat: int
    times: list[float]
    memory_rss_mb: float

    @property
    def avg_time(self) -> float:
        """Average execution time per query."""
        return statistics.mean(self.times) / self.number_per_repeat

    @property
    def min_time(self) -> float:
        """Minimum execution time per query."""
        return min(self.times) / self.number_per_repeat

    @property
    def median_time(self) -> float:
        """Median execution time per query."""
        return statistics.median(self.times) / self.number_per_repeat


def build_dict(size: int) -> ThresholdDict[int, int]:
    return ThresholdDict.from_ordered(
        [(i * KEY_STEP, i) for i in range(1, size + 1)], default=-1
    )


def query_keys(size: int) -> list[int]:
    """Keys spread over every bracket, including one past the last boundary."""
    return list(range(0, (size + 1) * KEY_STEP, KEY_STEP // 2))


def benchmark_strategy(
    size: int,
    strategy: Strategy,
    repeat: int = DEFAULT_REPEAT,
    number: int = DEFAULT_NUMBER,
) -> BenchmarkResult:
    """
    Time ``number`` passes over the query keys, ``repeat`` times, using one
    search strategy directly (bypassing the size-based dispatch).
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unsupported strategy: {strategy}.")
    if size < 1 or repeat < 1 or number < 1:
        raise ValueError("size, repeat and number must all be positive")

    dictionary = build_dict(size)
    search = getattr(dictionary, f"{strategy}_search")
    keys = query_keys(size)

    def run() -> None:
        for key in keys:
            search(key)

    logger.debug("Benchmarking %s search, size=%d", strategy, size)
    times = timeit.repeat(run, repeat=repeat, number=number)
    # per query rather than per pass over the keys
    times = [t / len(keys) for t in times]

    memory_info = psutil.Process().memory_info()
    return BenchmarkResult(
        size=size,
        strategy=strategy,
        repeat_count=repeat,
        number_per_repeat=number,
        times=times,
        memory_rss_mb=memory_info.rss / 1024 / 1024,
    )


def run_benchmarks(
    sizes: Iterable[int] = DEFAULT_SIZES,
    repeat: int = DEFAULT_REPEAT,
    number: int = DEFAULT_NUMBER,
) -> list[BenchmarkResult]:
    results: list[BenchmarkResult] = []
    for size in sorted(set(sizes)):
        for strategy in STRATEGIES:
            results.append(benchmark_strategy(size, strategy, repeat, number))
    return results


def suggest_strategy_threshold(results: Iterable[BenchmarkResult]) -> int:
    """
    Return the smallest size at which binary search's median time beats the
    linear scan's, or one past the largest size if it never does.
    """
    medians: dict[int, dict[str, float]] = {}
    for result in results:
        medians.setdefault(result.size, {})[result.strategy] = result.median_time

    if not medians:
        raise ValueError("No benchmark results to suggest a threshold from")

    for size in sorted(medians):
        timings = medians[size]
        if "linear" in timings and "binary" in timings:
            if timings["binary"] < timings["linear"]:
                return size
    return max(medians) + 1


def format_results(results: Sequence[BenchmarkResult]) -> str:
    lines = [f"{'size':>6} {'strategy':>8} {'median (ns)':>12} {'min (ns)':>10}"]
    for r in results:
        lines.append(
            f"{r.size:>6} {r.strategy:>8} "
            f"{r.median_time * 1e9:>12.1f} {r.min_time * 1e9:>10.1f}"
        )
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark ThresholdDict linear vs. binary search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=dedent("""
            Example:
              python -m threshdict.benchmark --sizes 2 8 32 --repeat 3
        """),
    )
    parser.add_argument(
        "--sizes", type=int, nargs="+", default=DEFAULT_SIZES,
        help="Dictionary sizes to benchmark",
    )
    parser.add_argument(
        "--repeat", type=int, default=DEFAULT_REPEAT,
        help="Number of timing repetitions per size and strategy",
    )
    parser.add_argument(
        "--number", type=int, default=DEFAULT_NUMBER,
        help="Passes over the query keys per repetition",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    if args.verbose:
        # structures sets its own level from LOG_LEVEL
        logging.getLogger("threshdict.structures").setLevel(logging.DEBUG)

    try:
        results = run_benchmarks(args.sizes, args.repeat, args.number)
    except ValueError:
        logger.exception("Benchmark failed")
        return 1

    print(format_results(results))
    print(f"Suggested strategy_threshold: {suggest_strategy_threshold(results)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_RUNS = 10
PERCENTILE = 90


def nearest_rank(sorted_times: Sequence[int], percentile: int) -> int:
    """Nearest-rank percentile: the element at 1-based rank ceil(p * N / 100)."""
    n = len(sorted_times)
    rank = -(-percentile * n // 100)
    return sorted_times[max(rank, 1) - 1]


@dataclass(frozen=True)
class BenchmarkResults:
    times: tuple[int, ...]
    fastest: int
    slowest: int
    average: int
    ninetieth_percentile: int

    @classmethod
    def from_times(cls, times: Sequence[int]) -> "BenchmarkResults":
        """
        由每次运行的耗时（毫秒，按运行顺序）计算统计量。
        average 为截断整除的均值。
        """
        if not times:
            raise ValueError("at least one run is required")
        sorted_times = sorted(times)
        return cls(
            times=tuple(times),
            fastest=sorted_times[0],
            slowest=sorted_times[-1],
            average=sum(times) // len(times),
            ninetieth_percentile=nearest_rank(sorted_times, PERCENTILE),
        )

    def format_report(self) -> str:
        return "\n".join(
            [
                "RESULTS:",
                f"Fastest: {self.fastest}ms",
                f"Slowest: {self.slowest}ms",
                f"Average: {self.average}ms",
                f"90th percentile: {self.ninetieth_percentile}ms",
                "Run times: " + ", ".join(f"{t}ms" for t in self.times),
            ]
        )


def benchmark(
    fn: Callable[[], object],
    runs: int = DEFAULT_RUNS,
    timer: Callable[[], float] = time.perf_counter,
) -> BenchmarkResults:
    """
    串行执行 fn 共 runs 次，记录每次调用的耗时（截断为整数毫秒）。
    - 不做 warmup，不剔除离群值
    - 只计时 fn() 本身
    """
    if runs < 1:
        raise ValueError(f"runs must be positive, got {runs}")

    times = []
    for i in range(runs):
        t0 = timer()
        fn()
        t1 = timer()
        duration_ms = int((t1 - t0) * 1000.0)
        logger.debug("run %d/%d: %d ms", i + 1, runs, duration_ms)
        times.append(duration_ms)

    return BenchmarkResults.from_times(times)

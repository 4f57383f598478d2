# simulations/common.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import math
import time

from mmpa import DEFAULT_THRESHOLD, ResultMatrix


@dataclass(frozen=True)
class CohortSpec:
    """
    Parameters of a synthetic cohort shared across all methods.
    """
    n: int
    prevalence: float  # fraction of subjects above the threshold
    threshold: float = DEFAULT_THRESHOLD
    score_noise: float = 0.5  # stddev of the score's noise, in log10 units

    def __post_init__(self) -> None:
        if self.n <= 0:
            raise ValueError("n must be > 0")
        if not 0.0 <= self.prevalence <= 1.0:
            raise ValueError("prevalence must be in [0, 1]")
        if self.threshold <= 0:
            raise ValueError("threshold must be > 0")
        if self.score_noise < 0:
            raise ValueError("score_noise must be >= 0")


@dataclass(frozen=True)
class SummaryStats:
    """
    Basic summary stats over per-permutation ATR values.
    """
    min: float
    max: float
    mean: float
    std: float  # population stddev


def summarize(values: Sequence[float]) -> SummaryStats:
    """
    Compute min/max/mean/std (population stddev) over a non-empty sequence.
    """
    if not values:
        raise ValueError("values must be non-empty")

    n = len(values)
    mean = math.fsum(values) / n
    var = math.fsum((v - mean) ** 2 for v in values) / n

    return SummaryStats(min=min(values), max=max(values), mean=mean, std=math.sqrt(var))


@dataclass
class ExperimentResult:
    """
    Common return type for all simulations.
    """
    method: str
    spec: CohortSpec
    matrix: ResultMatrix

    stats: SummaryStats = field(init=False)
    runtime_s: Optional[float] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Sanity: the matrix should describe this cohort
        if self.matrix.n != self.spec.n:
            raise ValueError(
                f"cohort size mismatch: expected {self.spec.n}, got {self.matrix.n}"
            )
        self.stats = summarize(self.matrix.atr())


class Timer:
    """
    Tiny timing helper for simulations.
    Usage:
        with Timer() as t:
            ...
        elapsed = t.elapsed_s
    """
    def __init__(self) -> None:
        self._start: Optional[float] = None
        self.elapsed_s: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.time()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._start is not None:
            self.elapsed_s = time.time() - self._start


def common_x_range(results: List[ExperimentResult]) -> Tuple[float, float]:
    """
    Shared (xmin, xmax) of ATR across results, for same-axis histograms.
    """
    if not results:
        raise ValueError("results must be non-empty")

    xmin = min(r.stats.min for r in results)
    xmax = max(r.stats.max for r in results)
    if xmin == xmax:
        # matplotlib rejects an empty histogram range
        xmax = xmin + 1.0
    return xmin, xmax


def format_stats_line(r: ExperimentResult) -> str:
    """
    Human-friendly one-liner for printing in compare tools.
    """
    s = r.stats
    return (
        f"{r.method}: ATR min={s.min:.2f}, max={s.max:.2f}, mean={s.mean:.2f}, std={s.std:.2f}"
        + (f", runtime={r.runtime_s:.3f}s" if r.runtime_s is not None else "")
    )

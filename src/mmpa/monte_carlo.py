import logging
import math
import numbers
import random
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Union

from .errors import (
    DimensionMismatchError,
    InvalidConfigurationError,
    InvalidPoolSizeError,
)
from .partitioner import partition, pool_count
from .resolver import (
    DEFAULT_THRESHOLD,
    Method,
    SplitPolicy,
    Subject,
    parse_method,
    parse_split,
    resolve_pool,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolingConfig:
    """
    Parameters of one Monte Carlo run, independent of the data.

    method and split accept their string tags and are normalized to enums.
    """
    pool_size: int
    perm_num: int
    method: Union[str, Method] = Method.MMPA
    threshold: float = DEFAULT_THRESHOLD
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL

    def __post_init__(self) -> None:
        if isinstance(self.pool_size, bool) or not isinstance(self.pool_size, int) or self.pool_size <= 0:
            raise InvalidPoolSizeError(self.pool_size)
        if isinstance(self.perm_num, bool) or not isinstance(self.perm_num, int) or self.perm_num <= 0:
            raise InvalidConfigurationError(f"perm_num must be > 0, got {self.perm_num!r}")
        if (
            isinstance(self.threshold, bool)
            or not isinstance(self.threshold, numbers.Real)
            or not math.isfinite(self.threshold)
            or self.threshold < 0
        ):
            raise InvalidConfigurationError(f"threshold must be finite and >= 0, got {self.threshold!r}")

        object.__setattr__(self, "method", parse_method(self.method))
        object.__setattr__(self, "split", parse_split(self.split))


@dataclass
class ResultMatrix:
    """
    Assays consumed per pool (rows) and per permutation (columns).

    counts[i][j] is the number of assays pool i needed under permutation j.
    """
    method: Method
    n: int
    pool_size: int
    counts: List[List[int]]

    @property
    def num_pools(self) -> int:
        return len(self.counts)

    @property
    def perm_num(self) -> int:
        return len(self.counts[0]) if self.counts else 0

    @property
    def shape(self):
        return self.num_pools, self.perm_num

    def __getitem__(self, i: int) -> List[int]:
        """Copy of row i; matrix[i][j] reads a cell."""
        return list(self.counts[i])

    def __len__(self) -> int:
        return len(self.counts)

    def __iter__(self) -> Iterator[List[int]]:
        return (list(r) for r in self.counts)

    def row(self, i: int) -> List[int]:
        return list(self.counts[i])

    def column(self, j: int) -> List[int]:
        return [r[j] for r in self.counts]

    def totals(self) -> List[int]:
        """Total assays per permutation."""
        return [sum(self.column(j)) for j in range(self.perm_num)]

    def atr(self) -> List[float]:
        """Average tests required per 100 individuals, one value per permutation."""
        return [100.0 * t / self.n for t in self.totals()]

    def mean_atr(self) -> float:
        values = self.atr()
        return sum(values) / len(values)

    def to_list(self) -> List[List[int]]:
        return [list(r) for r in self.counts]


def _subjects(values: Sequence[float], scores: Sequence[float]) -> List[Subject]:
    if len(values) != len(scores):
        raise DimensionMismatchError(
            "values and scores must have the same length",
            expected=len(values),
            got=len(scores),
        )

    subjects = []
    for i, (v, s) in enumerate(zip(values, scores)):
        v = float(v)
        s = float(s)
        if not math.isfinite(v) or v < 0:
            raise InvalidConfigurationError(f"values[{i}] must be finite and >= 0, got {v!r}")
        if not math.isfinite(s):
            raise InvalidConfigurationError(f"scores[{i}] must be finite, got {s!r}")
        subjects.append(Subject(value=v, score=s))
    return subjects


def _make_rng(rng: Optional[random.Random], seed: Optional[int]) -> random.Random:
    if rng is not None and seed is not None:
        raise InvalidConfigurationError("pass either rng or seed, not both")
    if rng is not None:
        return rng
    return random.Random(seed)


def simulate(
    values: Sequence[float],
    scores: Sequence[float],
    pool_size: int,
    perm_num: int,
    method: Union[str, Method],
    threshold: Optional[float] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL,
) -> ResultMatrix:
    """
    Monte Carlo estimate of the assays a pooling strategy consumes.

    Every iteration shuffles the subject indices with `rng`, cuts the
    permutation into pools of `pool_size` and resolves each pool with
    `method`. The only state carried between iterations is the rng itself,
    so a seeded rng reproduces the matrix exactly.

    Parameters
    ----------
    values, scores:
        Parallel sequences of measurements (non-negative) and risk scores.
    pool_size:
        Pool size K, 1 <= K <= len(values).
    perm_num:
        Number of random permutations (columns of the result).
    method:
        'minipool', 'mpa' or 'mmpa' (case-insensitive), or a Method.
    threshold:
        Positivity cutoff; DEFAULT_THRESHOLD when None.
    rng:
        Caller-owned random source. Mutually exclusive with `seed`.
    seed:
        Convenience: seed for a fresh random.Random.
    split:
        Subdivision policy for MPA / mMPA.

    Returns
    -------
    ResultMatrix
    """
    subjects = _subjects(values, scores)
    config = PoolingConfig(
        pool_size=pool_size,
        perm_num=perm_num,
        method=method,
        threshold=DEFAULT_THRESHOLD if threshold is None else threshold,
        split=split,
    )
    n = len(subjects)
    if config.pool_size > n:
        raise InvalidConfigurationError(
            f"pool size {config.pool_size} exceeds the number of subjects ({n})"
        )
    rng = _make_rng(rng, seed)

    logger.debug(
        "Simulating %s: n=%d, K=%d, perm_num=%d, threshold=%g, split=%s",
        config.method.value, n, config.pool_size, config.perm_num,
        config.threshold, config.split.value,
    )

    num_pools = pool_count(n, config.pool_size)
    counts = [[0] * config.perm_num for _ in range(num_pools)]
    order = list(range(n))

    start = time.perf_counter()
    for j in range(config.perm_num):
        rng.shuffle(order)
        for i, pool in enumerate(partition(order, config.pool_size)):
            members = [subjects[idx] for idx in pool]
            counts[i][j] = resolve_pool(members, config.method, config.threshold, config.split).assays

    result = ResultMatrix(method=config.method, n=n, pool_size=config.pool_size, counts=counts)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Finished %s: shape=%s, mean ATR=%.2f, elapsed=%.3fs",
            config.method.value, result.shape, result.mean_atr(), time.perf_counter() - start,
        )
    return result


def pooling_mc(
    values: Sequence[float],
    scores: Sequence[float],
    K: int = 5,
    perm_num: int = 100,
    method: Union[str, Method] = "mmpa",
    threshold: Optional[float] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL,
) -> ResultMatrix:
    """
    Assays per pool (rows) for `perm_num` random poolings (columns).

    Thin entry point over simulate(); see there for the parameters.
    """
    return simulate(
        values,
        scores,
        pool_size=K,
        perm_num=perm_num,
        method=method,
        threshold=threshold,
        rng=rng,
        seed=seed,
        split=split,
    )


def compare_methods(
    values: Sequence[float],
    scores: Sequence[float],
    pool_size: int,
    perm_num: int,
    seed: int,
    methods: Iterable[Union[str, Method]] = tuple(Method),
    threshold: Optional[float] = None,
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL,
) -> Dict[Method, ResultMatrix]:
    """
    Run several methods from the same seed.

    Each run draws the same permutations, so column j of every matrix
    describes the same pooling of the cohort.
    """
    results: Dict[Method, ResultMatrix] = {}
    for m in methods:
        parsed = parse_method(m)
        results[parsed] = simulate(
            values,
            scores,
            pool_size=pool_size,
            perm_num=perm_num,
            method=parsed,
            threshold=threshold,
            seed=seed,
            split=split,
        )
    return results

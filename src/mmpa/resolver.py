import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple, Union

from .errors import InvalidConfigurationError, InvalidMethodError, InvalidPoolError


# Virological failure cutoff (copies/mL) used when no threshold is given.
DEFAULT_THRESHOLD = 1000.0


class Method(str, Enum):
    """Pool-resolution strategies."""

    MINIPOOL = "minipool"
    MPA = "mpa"
    MMPA = "mmpa"


class SplitPolicy(str, Enum):
    """
    How MPA / mMPA subdivide a positive (sub-)pool.

    SEQUENTIAL peels the first member off at every level, so members are
    individually assayed in order until the deduced load of the rest clears.
    HALVING assays the first ceil(m/2) members and deduces the other half.
    """

    SEQUENTIAL = "sequential"
    HALVING = "halving"


@dataclass(frozen=True)
class Subject:
    """
    One tested individual.

    value is the (non-negative) measurement, score the auxiliary risk marker.
    """

    value: float
    score: float = 0.0

    def is_positive(self, threshold: float) -> bool:
        return self.value > threshold


@dataclass(frozen=True)
class PoolResolution:
    """
    Outcome of resolving a single pool.

    assays:
        Total assays consumed, the pooled assay included.
    tested:
        In-pool positions individually assayed after the pooled assay.
    positives:
        In-pool positions resolved as above the threshold.
    """

    assays: int
    tested: Tuple[int, ...]
    positives: Tuple[int, ...]


PoolMember = Union[Subject, Tuple[float, float]]
Resolver = Callable[[List[Tuple[int, Subject]], float, SplitPolicy], PoolResolution]


# ------------------------------------------------------------
# Tag parsing
# ------------------------------------------------------------

def parse_method(method: Union[str, Method]) -> Method:
    """Map a case-insensitive tag ('minipool', 'mpa', 'mmpa') to a Method."""
    if isinstance(method, Method):
        return method
    if not isinstance(method, str):
        raise InvalidMethodError(method, available=sorted(m.value for m in Method))
    try:
        return Method(method.strip().lower())
    except ValueError:
        raise InvalidMethodError(method, available=sorted(m.value for m in Method)) from None


def parse_split(split: Union[str, SplitPolicy]) -> SplitPolicy:
    if isinstance(split, SplitPolicy):
        return split
    try:
        return SplitPolicy(str(split).strip().lower())
    except ValueError:
        raise InvalidConfigurationError(
            f"unknown split policy {split!r}. Available: {sorted(p.value for p in SplitPolicy)}"
        ) from None


# ------------------------------------------------------------
# Strategies
# ------------------------------------------------------------

def _load(members: Sequence[Tuple[int, Subject]]) -> float:
    return math.fsum(s.value for _, s in members)


def _split_point(size: int, split: SplitPolicy) -> int:
    if split is SplitPolicy.SEQUENTIAL:
        return 1
    return (size + 1) // 2


def _narrow(
    members: List[Tuple[int, Subject]],
    threshold: float,
    split: SplitPolicy,
) -> PoolResolution:
    """
    Resolve an ordered pool by assaying head sub-pools and deducing tails.

    Each positive sub-pool of m > 1 members costs exactly one assay (its
    head); the tail's load is the parent load minus the head load. A
    sub-pool whose load is <= threshold is cleared as a whole, and a
    positive single-member sub-pool is resolved positive, since its value
    is then known exactly. At most m - 1 splits follow the pooled assay.
    """
    assays = 1  # the pooled assay on `members`
    tested: List[int] = []
    positives: List[int] = []

    stack = [members]
    while stack:
        group = stack.pop()
        # Deduced loads are summed directly so rounding cannot flip a comparison.
        if _load(group) <= threshold:
            continue
        if len(group) == 1:
            positives.append(group[0][0])
            continue

        cut = _split_point(len(group), split)
        head, tail = group[:cut], group[cut:]
        assays += 1
        if len(head) == 1:
            tested.append(head[0][0])

        # Head is popped first.
        stack.append(tail)
        stack.append(head)

    return PoolResolution(
        assays=assays,
        tested=tuple(sorted(tested)),
        positives=tuple(sorted(positives)),
    )


def resolve_minipool(
    members: List[Tuple[int, Subject]],
    threshold: float,
    split: SplitPolicy = SplitPolicy.SEQUENTIAL,
) -> PoolResolution:
    """
    Plain mini-pooling: one pooled assay, then retest everyone if positive.

    split is accepted for a uniform signature and ignored.
    """
    if _load(members) <= threshold:
        return PoolResolution(assays=1, tested=(), positives=())

    return PoolResolution(
        assays=1 + len(members),
        tested=tuple(pos for pos, _ in members),
        positives=tuple(pos for pos, s in members if s.is_positive(threshold)),
    )


def resolve_mpa(
    members: List[Tuple[int, Subject]],
    threshold: float,
    split: SplitPolicy = SplitPolicy.SEQUENTIAL,
) -> PoolResolution:
    """Mini-pooling with algorithm: narrow the pool in its given order."""
    return _narrow(members, threshold, split)


def resolve_mmpa(
    members: List[Tuple[int, Subject]],
    threshold: float,
    split: SplitPolicy = SplitPolicy.SEQUENTIAL,
) -> PoolResolution:
    """
    Marker-assisted MPA: narrow the pool in descending score order.

    sorted() is stable, so equal scores keep their in-pool order and a pool
    of tied scores resolves exactly like MPA.
    """
    ranked = sorted(members, key=lambda item: -item[1].score)
    return _narrow(ranked, threshold, split)


# ------------------------------------------------------------
# Registry / dispatch
# ------------------------------------------------------------

RESOLVERS: Dict[Method, Resolver] = {
    Method.MINIPOOL: resolve_minipool,
    Method.MPA: resolve_mpa,
    Method.MMPA: resolve_mmpa,
}


def resolve_pool(
    pool: Sequence[PoolMember],
    method: Union[str, Method],
    threshold: float = DEFAULT_THRESHOLD,
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL,
) -> PoolResolution:
    """
    Resolve one pool and report assays, follow-up tests and positives.

    Parameters
    ----------
    pool:
        Ordered members, as Subject instances or (value, score) pairs.
    method:
        'minipool', 'mpa' or 'mmpa' (case-insensitive), or a Method.
    threshold:
        A member is positive when its value exceeds this.
    split:
        Subdivision policy for MPA / mMPA.

    Returns
    -------
    PoolResolution
    """
    fn = RESOLVERS[parse_method(method)]
    policy = parse_split(split)

    if len(pool) == 0:
        raise InvalidPoolError("cannot resolve an empty pool")

    members = [
        (pos, m if isinstance(m, Subject) else Subject(*m))
        for pos, m in enumerate(pool)
    ]
    # Clearing a pool by its load is only sound for non-negative values.
    for pos, s in members:
        if not math.isfinite(s.value) or s.value < 0:
            raise InvalidConfigurationError(f"pool[{pos}] value must be finite and >= 0, got {s.value!r}")
        if not math.isfinite(s.score):
            raise InvalidConfigurationError(f"pool[{pos}] score must be finite, got {s.score!r}")
    return fn(members, threshold, policy)


def resolve(
    pool: Sequence[PoolMember],
    method: Union[str, Method],
    threshold: float = DEFAULT_THRESHOLD,
    split: Union[str, SplitPolicy] = SplitPolicy.SEQUENTIAL,
) -> int:
    """Number of assays needed to classify every member of `pool`."""
    return resolve_pool(pool, method, threshold, split).assays

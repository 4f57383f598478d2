"""
Monte Carlo estimates of assay usage under pooled testing.

Three pool-resolution strategies are compared:

    minipool   pooled assay, then retest everyone in a positive pool
    mpa        mini-pooling with algorithm: narrow a positive pool by
               sub-pool assays and load deduction
    mmpa       marker-assisted MPA: same, ranked by a risk score

Usage:
    from mmpa import pooling_mc
    matrix = pooling_mc(values, scores, K=5, perm_num=100, method="mmpa", seed=1)
    matrix.mean_atr()
"""

from .errors import (
    DimensionMismatchError,
    InvalidConfigurationError,
    InvalidMethodError,
    InvalidPoolError,
    InvalidPoolSizeError,
    PoolingError,
)
from .monte_carlo import PoolingConfig, ResultMatrix, compare_methods, pooling_mc, simulate
from .partitioner import partition, pool_count
from .resolver import (
    DEFAULT_THRESHOLD,
    Method,
    PoolResolution,
    SplitPolicy,
    Subject,
    parse_method,
    parse_split,
    resolve,
    resolve_pool,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "DimensionMismatchError",
    "InvalidConfigurationError",
    "InvalidMethodError",
    "InvalidPoolError",
    "InvalidPoolSizeError",
    "Method",
    "PoolResolution",
    "PoolingConfig",
    "PoolingError",
    "ResultMatrix",
    "SplitPolicy",
    "Subject",
    "compare_methods",
    "parse_method",
    "parse_split",
    "partition",
    "pool_count",
    "pooling_mc",
    "resolve",
    "resolve_pool",
    "simulate",
]

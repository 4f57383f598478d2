"""Exceptions raised by the pooled-testing simulator."""

from typing import Optional


class PoolingError(Exception):
    """Base exception for all mmpa errors."""

    pass


class InvalidMethodError(PoolingError, ValueError):
    """Raised when a pool-resolution method tag is not recognized."""

    def __init__(self, method: object, available: Optional[list] = None):
        self.method = method
        message = f"unknown method {method!r}"
        if available:
            message = f"{message}. Available: {available}"
        super().__init__(message)


class InvalidPoolSizeError(PoolingError, ValueError):
    """Raised when the pool size is not a positive integer."""

    def __init__(self, pool_size: object):
        self.pool_size = pool_size
        super().__init__(f"pool size must be > 0, got {pool_size!r}")


class DimensionMismatchError(PoolingError, ValueError):
    """Raised when values and scores are not parallel sequences."""

    def __init__(
        self,
        message: str,
        expected: Optional[int] = None,
        got: Optional[int] = None,
    ):
        self.expected = expected
        self.got = got
        if expected is not None and got is not None:
            message = f"{message} (expected {expected}, got {got})"
        super().__init__(message)


class InvalidConfigurationError(PoolingError, ValueError):
    """Raised when simulation parameters are inconsistent with the data."""

    pass


class InvalidPoolError(PoolingError, RuntimeError):
    """Raised when the resolver receives an empty pool.

    The driver never builds empty pools, so this signals a bug rather than
    bad input.
    """

    pass

from typing import List, Sequence

from .errors import InvalidPoolSizeError


def pool_count(n: int, pool_size: int) -> int:
    """Number of pools a permutation of n subjects is split into (ceil(n / K))."""
    if pool_size <= 0:
        raise InvalidPoolSizeError(pool_size)
    return -(-n // pool_size)


def partition(permutation: Sequence[int], pool_size: int) -> List[List[int]]:
    """
    Split a permuted index sequence into consecutive pools of `pool_size`.

    The last pool holds the remainder (1..pool_size members). Pools keep the
    permuted order, which is the order MPA narrows in.
    """
    if pool_size <= 0:
        raise InvalidPoolSizeError(pool_size)

    order = list(permutation)
    return [order[i:i + pool_size] for i in range(0, len(order), pool_size)]

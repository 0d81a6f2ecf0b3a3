import random
from typing import Callable, List, Sequence, TypeVar

T = TypeVar('T')

RandomFn = Callable[[], float]


def fisher_yates(items: Sequence[T], random_fn: RandomFn = random.random) -> List[T]:
    """Return a shuffled copy of ``items``.

    ``random_fn`` must return floats in [0, 1); passing a fixed function makes
    the permutation reproducible. With ``lambda: 0`` every step swaps with
    index 0.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(random_fn() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result

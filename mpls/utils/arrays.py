# -*- coding: utf-8 -*-
"""
Small array helpers shared by the initial-solution and local-search heuristics.

  - arg_min / arg_max      index of the extremum (first index on ties, None if empty)
  - random_binary_array    0/1 vector with an exact number of ones
"""

from __future__ import annotations
from typing import Optional, Sequence, Union

import numpy as np


def arg_min(values: Sequence[float]) -> Optional[int]:
    if len(values) == 0:
        return None
    return int(np.argmin(values))


def arg_max(values: Sequence[float]) -> Optional[int]:
    if len(values) == 0:
        return None
    return int(np.argmax(values))


def random_binary_array(
    array: Union[int, np.ndarray],
    number_of_ones: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Return a 0/1 int8 vector holding exactly `number_of_ones` ones.

    `array` is either a length (start from all zeros) or an existing 0/1 vector
    that is adjusted with as few flips as possible: ones are added at random
    zero positions, or removed at random one positions. The input vector is
    not modified.

    Raises
    ------
    ValueError
        If `number_of_ones` is negative or exceeds the vector length.
    """
    if isinstance(array, (int, np.integer)):
        result = np.zeros(int(array), dtype=np.int8)
    else:
        result = np.array(array, dtype=np.int8, copy=True)

    if number_of_ones < 0 or number_of_ones > result.size:
        raise ValueError(
            f"number_of_ones must be between 0 and {result.size}, got {number_of_ones}."
        )

    current = int(result.sum())
    delta = number_of_ones - current
    if delta == 0:
        return result

    digit = 1 if delta > 0 else 0
    candidates = np.flatnonzero(result != digit)
    chosen = rng.permutation(candidates)[:abs(delta)]
    result[chosen] = digit
    return result

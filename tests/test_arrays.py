# -*- coding: utf-8 -*-
import numpy as np
import pytest

from mpls.utils.arrays import arg_max, arg_min, random_binary_array


def test_arg_extrema_on_empty_input():
    assert arg_min([]) is None
    assert arg_max([]) is None


def test_arg_extrema_pick_first_index_on_ties():
    assert arg_min([3.0, 1.0, 1.0]) == 1
    assert arg_max([2.0, 5.0, 5.0]) == 1


@pytest.mark.parametrize("ones", range(0, 11))
def test_random_binary_array_has_exact_number_of_ones(ones):
    rng = np.random.default_rng(0)
    result = random_binary_array(10, ones, rng)
    assert result.dtype == np.int8
    assert result.shape == (10,)
    assert int(result.sum()) == ones
    assert set(np.unique(result)).issubset({0, 1})


def test_random_binary_array_removes_only_existing_ones():
    base = np.array([1, 1, 1, 0, 0], dtype=np.int8)
    result = random_binary_array(base, 1, np.random.default_rng(3))
    assert int(result.sum()) == 1
    assert np.all(result <= base)
    # input untouched
    np.testing.assert_array_equal(base, [1, 1, 1, 0, 0])


def test_random_binary_array_keeps_existing_ones_when_adding():
    base = np.array([1, 0, 0, 0], dtype=np.int8)
    result = random_binary_array(base, 3, np.random.default_rng(5))
    assert int(result.sum()) == 3
    assert np.all(result >= base)


def test_random_binary_array_is_reproducible_with_seed():
    a = random_binary_array(50, 17, np.random.default_rng(42))
    b = random_binary_array(50, 17, np.random.default_rng(42))
    np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize("ones", [-1, 11])
def test_random_binary_array_rejects_out_of_range_counts(ones):
    with pytest.raises(ValueError):
        random_binary_array(10, ones, np.random.default_rng(0))

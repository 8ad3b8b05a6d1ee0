# -*- coding: utf-8 -*-
import math

import numpy as np
import pytest

from mpls.business_objects import ResourceKind
from mpls.planning.state import AllocationState
from mpls.quality_metrics.core import (
    capture_metrics,
    compute_average_available,
    compute_variance,
    is_pair_overloaded,
    pairwise_overallocation_deviation,
    pairwise_variance_coefficient,
    summarize_metrics,
)

CAPACITY = np.array([[10, 10], [10, 10]])
DEMAND = np.array([[5, 5]])


def test_average_available_is_balanced_headroom():
    avg = compute_average_available(CAPACITY, DEMAND, [2])
    np.testing.assert_allclose(avg, [5.0, 5.0])


def test_variance_is_zero_for_balanced_placement():
    avg = compute_average_available(CAPACITY, DEMAND, [2])
    assert compute_variance(np.array([[1], [1]]), DEMAND, CAPACITY, avg, np.ones(2)) == 0.0


def test_variance_of_unbalanced_placement():
    avg = compute_average_available(CAPACITY, DEMAND, [1])  # 7.5 per resource
    score = compute_variance(np.array([[1], [0]]), DEMAND, CAPACITY, avg, np.ones(2))
    # headroom 5 and 10 around 7.5 -> sample std sqrt(12.5), normalized by 7.5, two resources
    assert score == pytest.approx(2 * math.sqrt(12.5) / 7.5)


def test_variance_applies_resource_weights():
    avg = compute_average_available(CAPACITY, DEMAND, [1])
    unweighted = compute_variance(np.array([[1], [0]]), DEMAND, CAPACITY, avg, np.ones(2))
    weighted = compute_variance(np.array([[1], [0]]), DEMAND, CAPACITY, avg, np.array([1.0, 0.0]))
    assert weighted == pytest.approx(unweighted / 2)


def test_variance_is_invariant_under_row_permutation():
    rng = np.random.default_rng(11)
    capacity = rng.integers(20, 40, size=(6, 2))
    demand = rng.integers(1, 5, size=(4, 2))
    matrix = rng.integers(0, 2, size=(6, 4))
    desired = matrix.sum(axis=0)
    avg = compute_average_available(capacity, demand, desired)

    order = rng.permutation(6)
    original = compute_variance(matrix, demand, capacity, avg, np.ones(2))
    permuted = compute_variance(matrix[order], demand, capacity[order], avg, np.ones(2))
    assert permuted == pytest.approx(original)


def test_variance_on_single_machine_is_nan():
    capacity = np.array([[10, 10]])
    avg = compute_average_available(capacity, DEMAND, [1])
    assert math.isnan(compute_variance(np.array([[1]]), DEMAND, capacity, avg, np.ones(2)))


def test_pairwise_variance_coefficient():
    state = AllocationState(CAPACITY, DEMAND, matrix=[[1], [0]], average_available=[7.5, 7.5])
    # headroom 5 and 10 -> population std 2.5 per resource, / 7.5
    assert pairwise_variance_coefficient(state, 0, 1) == pytest.approx(2 * 2.5 / 7.5)


def test_overallocation_deviation_and_overload_flag():
    state = AllocationState([[4, 4], [10, 10]], [[6, 6]], matrix=[[1], [0]])
    # machine 0 is over by 2 of 4 on both resources (ratio 0.5), machine 1 is not
    assert pairwise_overallocation_deviation(state, 0, 1) == pytest.approx(0.5)
    assert is_pair_overloaded(state, 0, 1)

    state.move(0, 0, 1)
    assert pairwise_overallocation_deviation(state, 0, 1) == 0.0
    assert not is_pair_overloaded(state, 0, 1)


def test_capture_and_summarize_metrics(make_machine, make_container):
    machines = [make_machine("m0"), make_machine("m1", cpu=20, memory=10)]
    containers = [make_container("web", cpu=5, memory=12)]
    kinds = (ResourceKind.CPU, ResourceKind.MEMORY)
    state = AllocationState.from_fleet(machines, containers, kinds, matrix=[[1], [0]])

    metrics = capture_metrics(state, machines, kinds)
    cpu = metrics[ResourceKind.CPU]
    assert [m.machine_name for m in cpu] == ["m0", "m1"]
    assert (cpu[0].allocated, cpu[0].total_available) == (5, 10)
    assert metrics[ResourceKind.MEMORY][0].difference == -2

    summary = summarize_metrics(metrics)
    assert summary["OU[cpu]"] == pytest.approx(5 / 30 * 100)
    assert summary["Overloaded[memory]"] == 1.0
    assert summary["Overloaded[cpu]"] == 0.0
    # headroom 5 and 20 -> population std 7.5
    assert summary["BL[cpu]"] == pytest.approx(7.5)

# -*- coding: utf-8 -*-
import numpy as np
import pytest

from mpls.business_objects import ResourceKind, StateValidationError
from mpls.planning.state import AllocationState


def _state(**kwargs) -> AllocationState:
    return AllocationState([[10, 10], [10, 10]], [[4, 2], [1, 3]], **kwargs)


def test_assign_unassign_keep_usage_in_sync():
    state = _state()
    state.assign(0, 0)
    state.assign(0, 1)
    np.testing.assert_array_equal(state.used[0], [5, 5])

    # assigning an occupied cell is a no-op
    state.assign(0, 0)
    np.testing.assert_array_equal(state.used[0], [5, 5])

    state.unassign(0, 0)
    np.testing.assert_array_equal(state.used[0], [1, 3])
    np.testing.assert_array_equal(state.used, state.matrix.astype(np.int64) @ state.demand)


def test_move_and_exchange_preserve_column_counts():
    state = _state(matrix=[[1, 0], [0, 1]])
    state.move(0, 0, 1)
    np.testing.assert_array_equal(state.matrix, [[0, 0], [1, 1]])

    state = _state(matrix=[[1, 0], [0, 1]])
    state.exchange(0, 0, 1, 1)
    np.testing.assert_array_equal(state.matrix, [[0, 1], [1, 0]])
    np.testing.assert_array_equal(state.column_counts(), [1, 1])
    np.testing.assert_array_equal(state.used, state.matrix.astype(np.int64) @ state.demand)


def test_columns_view_shares_the_matrix_buffer():
    state = _state()
    state.assign(1, 0)
    assert state.columns_view[0, 1] == 1
    assert state.columns_view.shape == (2, 2)


def test_load_rejects_wrong_shape():
    with pytest.raises(StateValidationError):
        _state(matrix=np.zeros((3, 2)))


def test_constructor_rejects_mismatched_resource_axes():
    with pytest.raises(StateValidationError):
        AllocationState([[10, 10]], [[1]])


def test_headroom_and_capacity_queries():
    state = AllocationState([[5, 5], [10, 10]], [[6, 1]], matrix=[[1], [0]])
    np.testing.assert_array_equal(state.headroom(0), [-1, 4])
    assert state.machine_score(0) == 3.0
    np.testing.assert_array_equal(state.headroom_scores(), [3.0, 20.0])
    assert not state.satisfies_capacity(0)
    assert state.satisfies_capacity(1)
    assert not state.all_capacities_satisfied()


def test_hard_constraint_queries():
    state = AllocationState([[5, 5], [10, 10]], [[6, 1]], matrix=[[1], [0]], hard_constraint_index=0)
    assert not state.hard_constraint_satisfied()
    assert not state.hard_constraint_satisfied(0)
    assert state.hard_constraint_satisfied(1)

    assert state.breaks_hard_constraint(1, 11)
    assert not state.breaks_hard_constraint(1, 10)
    # shrinking usage is always allowed, even on an overloaded machine
    assert not state.breaks_hard_constraint(0, -6)


def test_hard_constraint_disabled_without_index():
    state = AllocationState([[5, 5]], [[6, 1]], matrix=[[1]])
    assert state.hard_constraint_satisfied()
    assert not state.breaks_hard_constraint(0, 100)


def test_from_fleet_uses_zero_for_unlisted_kinds(make_machine, make_container):
    machines = [make_machine("m0", cpu=8, memory=16)]
    containers = [make_container("web", cpu=2, memory=4)]
    state = AllocationState.from_fleet(
        machines, containers, (ResourceKind.MEMORY, ResourceKind.GPU)
    )
    np.testing.assert_array_equal(state.capacity, [[16, 0]])
    np.testing.assert_array_equal(state.demand, [[4, 0]])

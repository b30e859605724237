from hypothesis import given, strategies as st

from raftlogkit.consistency import ConsistencyChecker


def _checker(*items):
    checker = ConsistencyChecker()
    checker.replay(list(items), file_id=None)
    return checker


def test_contiguous_is_clean():
    checker = _checker((1, [1, 2, 3]), (1, [4, 5]))
    assert checker.finish() == {}


def test_hole_reports_last_valid_index():
    checker = _checker((1, [1, 2, 3]), (1, [6, 7]))
    assert checker.finish() == {1: 3}


def test_first_hole_wins():
    checker = _checker((1, [1, 2]), (1, [5]), (1, [9]))
    assert checker.finish() == {1: 2}


def test_items_without_entries_are_ignored():
    checker = _checker((1, [1, 2]), (1, []), (2, []), (1, [3]))
    assert checker.finish() == {}


def test_overlap_is_not_corruption():
    checker = _checker((1, [5, 6]), (1, [3, 4]))
    assert checker.finish() == {}


def test_groups_are_independent():
    checker = _checker((1, [1, 2]), (2, [10]), (1, [3]), (2, [12]))
    assert checker.finish() == {2: 10}


def test_replay_across_calls():
    checker = ConsistencyChecker()
    checker.replay([(1, [1, 2])], file_id=1)
    checker.replay([(1, [8])], file_id=2)
    assert checker.finish() == {1: 2}


def test_merge_detects_hole_between():
    left = _checker((1, [1, 2, 3]))
    right = _checker((1, [7, 8]))
    left.merge(right, "append")
    assert left.finish() == {1: 3}


def test_merge_contiguous():
    left = _checker((1, [1, 2, 3]))
    right = _checker((1, [4, 5]))
    left.merge(right, "append")
    assert left.finish() == {}


def test_merge_new_group_and_rhs_corruption():
    left = _checker((1, [1, 2]))
    right = _checker((2, [1]), (2, [5]))
    left.merge(right, "rewrite")
    assert left.finish() == {2: 1}


def test_merge_keeps_existing_corruption():
    left = _checker((1, [1]), (1, [4]))
    right = _checker((1, [9]))
    left.merge(right, "append")
    assert left.finish() == {1: 1}


def test_merge_then_replay_uses_merged_last_index():
    left = _checker((1, [1, 2]))
    right = _checker((1, [3, 4]))
    left.merge(right, "append")
    left.replay([(1, [5])], file_id=None)
    assert left.finish() == {}


def test_finish_returns_copy():
    checker = _checker((1, [1]), (1, [5]))
    result = checker.finish()
    result.clear()
    assert checker.finish() == {1: 1}


@given(
    st.lists(
        st.tuples(st.integers(min_value=1, max_value=5), st.integers(min_value=1, max_value=4)),
        max_size=30,
    )
)
def test_contiguous_appends_never_corrupt(batches):
    next_index: dict[int, int] = {}
    items = []
    for group, count in batches:
        start = next_index.get(group, 1)
        items.append((group, list(range(start, start + count))))
        next_index[group] = start + count
    checker = _checker(*items)
    assert checker.finish() == {}
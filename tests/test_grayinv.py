"""Tests for grayinv: selection, mapping, matrix helpers, engine, harness."""
import numpy as np
import pytest

import grayinv
from grayinv import Selection, IndexMapping, ReplacementError, IncrementalInverse
from grayinv.mapping import UNASSIGNED
from grayinv.matrix import (
    submatrix, row_map, col_map, direct_inverse, sherman_morrison_update,
    random_universe, all_finite,
)
from grayinv.gray import GrayJoin
from grayinv.validate import check_inverse
from grayinv import benchmark
from grayinv import cli


def well_conditioned(n, seed=0):
    """Random universe with a dominant diagonal: every subset is invertible."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(n, n)) + n * np.eye(n)


def test_version():
    assert grayinv.__version__ == "0.1.0"


# === Selection ===

def test_selection_basic():
    s = Selection(0b1011, 4)
    assert s.positions() == [0, 1, 3]
    assert s.count() == 3
    assert len(s) == 3
    assert 2 not in s and 3 in s
    assert list(s) == [0, 1, 3]
    assert s.to_array().tolist() == [True, True, False, True]
    assert repr(s) == "Selection(0b1011, size=4)"


def test_selection_join():
    high = Selection(0b011, 3)
    low = Selection(0b0101, 4)
    joined = Selection.join(high, low)
    assert joined.size == 7
    assert joined.mask == 0b0110101
    assert joined.positions() == [0, 2, 4, 5]


def test_selection_from_positions():
    assert Selection.from_positions([3, 0], 5) == Selection(0b1001, 5)
    with pytest.raises(ValueError):
        Selection.from_positions([5], 5)


def test_selection_invalid():
    with pytest.raises(ValueError):
        Selection(0b10000, 4)
    with pytest.raises(ValueError):
        Selection(-1, 4)
    with pytest.raises(ValueError):
        Selection(1, 63)


def test_selection_immutable():
    s = Selection(0b11, 2)
    with pytest.raises(AttributeError):
        s.mask = 0
    assert hash(s) == hash(Selection(0b11, 2))


# === IndexMapping ===

def test_mapping_from_selection():
    m = IndexMapping.from_selection(Selection(0b1011, 4))
    assert m.backward.tolist() == [0, 1, 3]
    assert m.forward.tolist() == [0, 1, UNASSIGNED, 2]
    assert m.local(3) == 2
    assert m.is_consistent()
    with pytest.raises(KeyError):
        m.local(2)


def test_mapping_replace_reuses_slot():
    m = IndexMapping.from_selection(Selection(0b1011, 4))
    slot = m.replace(1, 2)
    assert slot == 1
    assert m.backward.tolist() == [0, 2, 3]
    assert m.forward[1] == UNASSIGNED
    assert m.forward[2] == 1
    assert m.selection() == Selection(0b1101, 4)
    assert m.is_consistent()


def test_mapping_replace_errors():
    m = IndexMapping.from_selection(Selection(0b0011, 4))
    with pytest.raises(ReplacementError):
        m.replace(2, 3)  # 2 not selected
    with pytest.raises(ReplacementError):
        m.replace(0, 1)  # 1 already selected


def test_mapping_consistency_after_many_replacements():
    join = GrayJoin()
    sels = join.take(140)
    m = IndexMapping.from_selection(sels[0])
    for prev, new in zip(sels, sels[1:]):
        removed, added = IndexMapping.diff(prev, new)
        m.replace(removed, added)
        assert m.is_consistent()
        assert m.selection() == new
        for pos in new.positions():
            assert m.backward[m.forward[pos]] == pos


def test_diff():
    assert IndexMapping.diff(Selection(0b0111, 4), Selection(0b1101, 4)) == (1, 3)


@pytest.mark.parametrize("prev,new", [
    (0b0111, 0b0111),   # unchanged
    (0b0011, 0b1100),   # two swaps
    (0b0011, 0b0111),   # only added
    (0b0111, 0b0011),   # only removed
])
def test_diff_rejects_non_single_replacement(prev, new):
    with pytest.raises(ReplacementError):
        IndexMapping.diff(Selection(prev, 4), Selection(new, 4))


def test_replacement_error_is_assertion():
    assert issubclass(ReplacementError, AssertionError)


# === Matrix helpers ===

def test_row_col_map():
    m = np.arange(16, dtype=float).reshape(4, 4)
    assert row_map(m, 2, [0, 3]).tolist() == [8.0, 11.0]
    assert col_map(m, 1, [3, 0]).tolist() == [13.0, 1.0]
    assert submatrix(m, [1, 3]).tolist() == [[5.0, 7.0], [13.0, 15.0]]


def test_sherman_morrison_matches_direct():
    rng = np.random.default_rng(7)
    A = rng.uniform(-1, 1, (6, 6)) + 6 * np.eye(6)
    u = rng.uniform(-1, 1, 6)
    v = rng.uniform(-1, 1, 6)
    updated = sherman_morrison_update(np.linalg.inv(A), u, v)
    assert np.allclose(updated, np.linalg.inv(A + np.outer(u, v)), atol=1e-12)


def test_sherman_morrison_in_place():
    A = well_conditioned(5)
    inv = np.linalg.inv(A)
    u = np.zeros(5)
    u[2] = 1.0
    v = np.full(5, 0.5)
    expected = np.linalg.inv(A + np.outer(u, v))
    out = sherman_morrison_update(inv, u, v, out=inv)
    assert out is inv
    assert np.allclose(inv, expected, atol=1e-12)


def test_random_universe():
    u = random_universe(11, 3)
    assert u.shape == (11, 11)
    assert u.min() >= -1.0 and u.max() < 1.0
    assert np.array_equal(u, random_universe(11, 3))


def test_all_finite():
    assert all_finite(np.eye(3))
    assert not all_finite(np.array([[1.0, np.inf]]))
    assert not all_finite(np.array([[np.nan]]))


# === Engine ===

def test_engine_3x3_replacement():
    """Replace one row/column pair of a 3x3 and compare with direct inverse."""
    universe = np.array([
        [4.0, 1.0, 0.0, 2.0],
        [1.0, 5.0, 1.0, 0.0],
        [0.0, 1.0, 6.0, 1.0],
        [2.0, 0.0, 1.0, 7.0],
    ])
    engine = IncrementalInverse(universe, Selection(0b0111, 4))
    slot = engine.replace(1, 3)
    assert slot == 1
    assert engine.mapping.backward.tolist() == [0, 3, 2]

    expected_matrix = universe[np.ix_([0, 3, 2], [0, 3, 2])]
    assert np.array_equal(engine.matrix, expected_matrix)
    assert np.allclose(engine.inverse, np.linalg.inv(expected_matrix),
                       rtol=1e-9, atol=1e-12)
    assert engine.selection == Selection(0b1101, 4)
    assert engine.updates == 1


def test_engine_round_trip():
    universe = well_conditioned(11, seed=1)
    engine = IncrementalInverse(universe, Selection(0b00001111111, 11))
    matrix0 = engine.matrix.copy()
    inverse0 = engine.inverse.copy()

    engine.replace(4, 9)
    assert not np.allclose(engine.inverse, inverse0)
    engine.replace(9, 4)

    assert np.array_equal(engine.matrix, matrix0)
    assert np.allclose(engine.inverse, inverse0, rtol=1e-9, atol=1e-12)


def test_engine_matches_direct_along_sequence():
    """Equivalence with direct inversion at every step of the joint sequence."""
    join = GrayJoin()
    universe = well_conditioned(join.size, seed=2)
    engine = IncrementalInverse(universe, join.next())
    for _ in range(join.total_combinations() - 1):
        selection = join.next()
        removed, added = engine.advance(selection)
        assert removed not in selection and added in selection
        assert engine.selection == selection
        assert engine.mapping.is_consistent()
        assert np.array_equal(
            engine.matrix, submatrix(universe, engine.mapping.backward))
        direct = np.linalg.inv(engine.matrix)
        assert np.allclose(engine.inverse, direct, rtol=1e-9, atol=1e-12)
    assert engine.updates == 139
    assert engine.is_finite()


def test_engine_advance_unchanged_is_noop():
    universe = well_conditioned(4)
    engine = IncrementalInverse(universe, Selection(0b0111, 4))
    assert engine.advance(Selection(0b0111, 4)) is None
    assert engine.updates == 0


def test_engine_advance_rejects_two_swaps():
    universe = well_conditioned(6)
    engine = IncrementalInverse(universe, Selection(0b000111, 6))
    with pytest.raises(ReplacementError):
        engine.advance(Selection(0b110001, 6))


def test_engine_invalid_universe():
    with pytest.raises(ValueError):
        IncrementalInverse(np.ones((3, 4)), Selection(0b011, 3))
    with pytest.raises(ValueError):
        IncrementalInverse(np.eye(5), Selection(0b011, 4))


def test_engine_singular_update_is_not_finite():
    """A replacement that makes the submatrix singular is reported, not raised."""
    universe = np.array([
        [1.0, 0.0, 1.0],
        [0.0, 1.0, 0.0],
        [1.0, 0.0, 1.0],
    ])
    engine = IncrementalInverse(universe, Selection(0b011, 3))
    with np.errstate(divide="ignore", invalid="ignore"):
        engine.replace(1, 2)
    assert not engine.is_finite()


# === Validation ===

def test_check_inverse():
    A = well_conditioned(5)
    report = check_inverse(A, np.linalg.inv(A))
    assert report["shape"] == (5, 5)
    assert report["finite"]
    assert report["ok"]
    assert report["residual"] < 1e-12


def test_check_inverse_rejects_wrong():
    A = well_conditioned(5)
    report = check_inverse(A, np.eye(5))
    assert report["finite"]
    assert not report["ok"]


def test_check_inverse_non_finite():
    report = check_inverse(np.eye(2), np.full((2, 2), np.nan))
    assert not report["finite"]
    assert not report["ok"]


def test_check_inverse_shape_mismatch():
    with pytest.raises(ValueError):
        check_inverse(np.eye(3), np.eye(2))


# === Benchmark harness ===

def test_direct_random():
    assert benchmark.direct_random(size=7, count=10, rng=0)


def test_direct_subsets():
    assert benchmark.direct_subsets(rng=0)


def test_sherman_variant():
    assert benchmark.sherman(rng=0)


def test_direct_random_parallel():
    from concurrent.futures import ProcessPoolExecutor
    with ProcessPoolExecutor(max_workers=2) as executor:
        assert benchmark.direct_random_parallel(executor, 2, size=7, count=9, rng=0)


def test_time_func_stops_at_first_failure():
    flags = iter([True, True, False, True])
    elapsed, success, completed = benchmark.time_func(lambda: next(flags), 4)
    assert not success
    assert completed == 2
    assert elapsed >= 0.0


def test_time_func_all_ok():
    elapsed, success, completed = benchmark.time_func(lambda: True, 5)
    assert success
    assert completed == 5


def test_run_benchmarks():
    results = benchmark.run_benchmarks(
        iterations=2, variants=["direct_random", "direct_subsets", "sherman"], seed=0)
    assert [r["name"] for r in results] == ["direct_random", "direct_subsets", "sherman"]
    for r in results:
        assert r["success"]
        assert r["completed"] == 2
        assert r["iterations"] == 2
        assert r["time"] >= 0.0


def test_make_benchmarks_unknown_variant():
    with pytest.raises(ValueError):
        benchmark.make_benchmarks(["eigen_openmp"])


# === CLI ===

def test_cli_parser():
    args = cli.build_parser().parse_args(["--large", "5,3", "--small", "3,2"])
    assert args.large == (5, 3)
    assert args.small == (3, 2)
    assert args.iterations == 10000
    assert args.variants == list(benchmark.VARIANTS)


def test_cli_main(capsys):
    code = cli.main(["--iterations", "1", "--variants", "sherman",
                     "direct_random", "--seed", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "sherman" in out
    assert "SUCCESS" in out


def test_check_sequence():
    result = cli.check_sequence(seed=0)
    assert result["steps"] == 140
    assert set(result) == {"steps", "rel_error", "cond", "ok"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

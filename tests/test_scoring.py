import numpy as np
import pytest

from simplexfit.errors import DimensionMismatch, InvalidDimension
from simplexfit.scoring import check_problem, residual_score, residual_scores


def test_exact_fit_scores_zero():
    X = [[1.0, 0.0], [0.0, 1.0], [0.5, 0.5]]
    Y = [0.25, 0.75, 0.5]
    assert residual_score(X, Y, [0.25, 0.75]) == 0.0


def test_sum_of_squares_not_mean():
    X = np.eye(2)
    assert residual_score(X, [0.3, 0.7], [0.5, 0.5]) == pytest.approx(0.08)


def test_row_order_does_not_matter():
    rng = np.random.default_rng(2)
    X = rng.random((6, 4))
    Y = rng.random(6)
    x = rng.dirichlet(np.ones(4))
    perm = rng.permutation(6)
    assert residual_score(X[perm], Y[perm], x) == pytest.approx(
        residual_score(X, Y, x), rel=1e-12
    )


def test_block_scores_match_single_scores():
    rng = np.random.default_rng(9)
    X, Y = check_problem(rng.random((3, 3)), rng.random(3))
    C = rng.dirichlet(np.ones(3), size=10)
    block = residual_scores(X, Y, C)
    assert block.tolist() == [residual_score(X, Y, c) for c in C]


def test_target_length_must_match_rows():
    with pytest.raises(DimensionMismatch):
        residual_score(np.full((3, 3), 1 / 3), [0.25] * 4, [1 / 3] * 3)


def test_candidate_length_must_match_columns():
    with pytest.raises(DimensionMismatch):
        residual_score(np.eye(3), [0.2, 0.3, 0.5], [0.5, 0.5])


@pytest.mark.parametrize("X, Y", [
    ([0.1, 0.2], [0.3, 0.7]),               # not a matrix
    (np.zeros((0, 3)), np.zeros(0)),        # no categories
    (np.zeros((2, 0)), np.zeros(2)),        # no groups
])
def test_empty_or_flat_problems_rejected(X, Y):
    with pytest.raises(InvalidDimension):
        check_problem(X, Y)


@pytest.mark.parametrize("X, Y", [
    ([[0.5, np.nan], [0.5, 0.5]], [0.5, 0.5]),
    ([[0.5, 0.5], [0.5, 0.5]], [np.inf, 0.5]),
])
def test_non_finite_entries_rejected(X, Y):
    with pytest.raises(ValueError, match="finite"):
        check_problem(X, Y)

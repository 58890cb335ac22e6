import numpy as np
import pandas as pd
import pytest

from simplexfit.config import SearchConfig
from simplexfit.mixing import reference_fit, search_labelled, solve_df, solve_single

MATRIX = pd.DataFrame(
    {"A": [0.57, 0.23, 0.20], "B": [0.40, 0.41, 0.19], "C": [0.36, 0.11, 0.53]},
    index=["c1", "c2", "c3"],
)
TARGET = pd.Series({"c1": 0.40, "c2": 0.25, "c3": 0.35})
CFG = SearchConfig(n_trials=1000, seed=12)


def test_labelled_search_uses_group_names():
    res = search_labelled(TARGET, MATRIX, CFG)
    assert res.labels == ("A", "B", "C")
    assert res.score < 1e-3


def test_target_order_is_aligned_to_matrix():
    shuffled = TARGET[["c3", "c1", "c2"]]
    assert search_labelled(shuffled, MATRIX, CFG).score == search_labelled(TARGET, MATRIX, CFG).score


def test_solve_single():
    out = solve_single(TARGET, MATRIX, CFG)
    assert list(out.index) == ["A", "B", "C", "score"]
    assert out[["A", "B", "C"]].sum() == pytest.approx(1.0)


def test_solve_single_missing_category_gives_nans():
    out = solve_single(TARGET.drop("c2"), MATRIX, CFG)
    assert out.isna().all()


def test_solve_df_adds_fraction_columns():
    df = pd.DataFrame(
        [[0.40, 0.25, 0.35], [0.45, 0.30, 0.25], [0.40, np.nan, 0.35]],
        columns=["c1", "c2", "c3"],
    )
    out = solve_df(df, MATRIX, CFG)
    assert list(out.columns) == ["c1", "c2", "c3", "A_frac", "B_frac", "C_frac", "score"]
    assert out.loc[:1, ["A_frac", "B_frac", "C_frac"]].sum(axis=1).tolist() == pytest.approx([1.0, 1.0])
    assert out.loc[2, ["A_frac", "B_frac", "C_frac", "score"]].isna().all()

    again = solve_df(df, MATRIX, CFG)
    pd.testing.assert_frame_equal(out, again)


def test_reference_fit_identity():
    frac, score = reference_fit(
        pd.DataFrame(np.eye(2), index=["c1", "c2"], columns=["A", "B"]),
        pd.Series({"c1": 0.3, "c2": 0.7}),
    )
    assert frac.tolist() == pytest.approx([0.3, 0.7], abs=1e-6)
    assert score == pytest.approx(0.0, abs=1e-10)


def test_reference_fit_on_simplex():
    frac, score = reference_fit(MATRIX, TARGET)
    assert frac.sum() == pytest.approx(1.0)
    assert (frac >= 0).all()
    assert score >= 0


def test_solve_df_empty_batch():
    df = pd.DataFrame(columns=["c1", "c2", "c3"], dtype=float)
    out = solve_df(df, MATRIX, CFG)
    assert out.empty
    assert list(out.columns) == ["c1", "c2", "c3", "A_frac", "B_frac", "C_frac", "score"]

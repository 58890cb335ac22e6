# ───────────────────────────────  simplexfit/mixing.py  ───────────────────────────────
"""
Labelled mixing-weight solves
-----------------------------

• Runs the random simplex search on a labelled matrix [category × group]
• Solves every target row of a DataFrame, one independent stream per row
• Bounded least-squares reference fit for judging how close the search got
"""

from typing import Tuple

import numpy as np
import pandas as pd
from scipy.optimize import lsq_linear

from simplexfit.config import SearchConfig
from simplexfit.scoring import residual_score
from simplexfit.search import SearchResult, run_search


# ---------------------------------------------------------------------------
# 0.  Labelled search
# ---------------------------------------------------------------------------
def search_labelled(target: pd.Series,
                    matrix: pd.DataFrame,
                    config: SearchConfig = SearchConfig(),
                    rng: np.random.Generator | None = None) -> SearchResult:
    """Run the search with ``target`` aligned to the rows of ``matrix``."""
    y = target.loc[matrix.index].to_numpy(dtype=float)
    kwargs = config.search_kwargs()
    if rng is not None:
        kwargs.pop("seed")
    return run_search(matrix.to_numpy(dtype=float), y, rng=rng,
                      labels=[str(g) for g in matrix.columns], **kwargs)


# ---------------------------------------------------------------------------
# 1.  Solve one target (Series) → fractions (Series)
# ---------------------------------------------------------------------------
def solve_single(target: pd.Series,
                 matrix: pd.DataFrame,
                 config: SearchConfig = SearchConfig(),
                 rng: np.random.Generator | None = None) -> pd.Series:
    """
    Returns a Series of mixing fractions for the groups (columns) of
    `matrix`, plus a ``score`` entry.  If any category is missing in the
    target, returns NaNs so the caller can flag or drop that row.
    """
    good = target.reindex(matrix.index)
    if good.isna().any():
        return pd.Series(np.nan, index=[str(g) for g in matrix.columns] + ["score"])

    res = search_labelled(good, matrix, config, rng)
    out = res.to_series()
    out["score"] = res.score
    return out


# ---------------------------------------------------------------------------
# 2.  Apply to an entire DataFrame of targets
# ---------------------------------------------------------------------------
def solve_df(df: pd.DataFrame,
             matrix: pd.DataFrame,
             config: SearchConfig = SearchConfig()) -> pd.DataFrame:
    """
    Adds one *_frac column per group and a ``score`` column.  Every row draws
    from its own generator spawned from ``config.seed``.
    """
    streams = np.random.SeedSequence(config.seed).spawn(len(df))
    rows = [
        solve_single(row, matrix, config, np.random.default_rng(ss))
        for (_, row), ss in zip(df.iterrows(), streams)
    ]
    columns = [str(g) for g in matrix.columns] + ["score"]
    frac = pd.DataFrame(rows, columns=columns).reset_index(drop=True)
    score = frac.pop("score")
    return pd.concat([df.reset_index(drop=True),
                      frac.add_suffix("_frac"),
                      score], axis=1)


# ---------------------------------------------------------------------------
# 3.  Bounded least-squares reference
# ---------------------------------------------------------------------------
def reference_fit(matrix: pd.DataFrame,
                  target: pd.Series) -> Tuple[pd.Series, float]:
    """
    Bounded least squares (0 ≤ x ≤ 1, BVLS) renormalised to Σx = 1, and the
    residual score of that vector.  NaNs when the fit collapses to zero.
    """
    A = matrix.to_numpy(dtype=float)
    b = target.loc[matrix.index].to_numpy(dtype=float)

    res = lsq_linear(A, b, bounds=(0, 1), method="bvls")

    f = res.x
    if f.sum() <= 0:                                       # nothing to normalise
        return pd.Series(np.nan, index=matrix.columns), float("nan")
    f = f / f.sum()                                        # normalise Σf = 1
    return pd.Series(f, index=matrix.columns), residual_score(A, b, f)

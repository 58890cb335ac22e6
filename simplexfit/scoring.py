# ─────────────────────────────  simplexfit/scoring.py  ─────────────────────────────
"""
Residual score of a candidate:  Σ_i (Y_i − Σ_j X_ij · x_j)²

Sum of squared residuals, neither averaged nor normalised.
"""

import numpy as np

from simplexfit.errors import DimensionMismatch, InvalidDimension


def check_problem(X, Y):
    """
    Coerce ``X`` (m × k) and ``Y`` (m) to float arrays and validate shapes.

    Raises ``InvalidDimension`` for an empty or non-2-D matrix and
    ``DimensionMismatch`` when ``Y`` does not have one entry per row of ``X``,
    ``ValueError`` for NaN or infinite entries.
    """
    X = np.asarray(X, dtype=float)
    Y = np.asarray(Y, dtype=float)

    if X.ndim != 2:
        raise InvalidDimension(f"matrix must be 2-D, got shape {X.shape}")
    m, k = X.shape
    if m < 1 or k < 1:
        raise InvalidDimension(f"matrix needs >= 1 row and column, got {m} × {k}")
    if Y.ndim != 1 or Y.shape[0] != m:
        raise DimensionMismatch(
            f"target has shape {Y.shape}, matrix has {m} rows"
        )
    if not (np.isfinite(X).all() and np.isfinite(Y).all()):
        raise ValueError("matrix and target must be finite (no NaN or inf)")
    return X, Y


def residual_scores(X: np.ndarray, Y: np.ndarray, C: np.ndarray) -> np.ndarray:
    """Scores for a block of candidates ``C`` [n × k]; inputs already checked."""
    # per-column accumulation: a row scores the same whatever the block size
    pred = np.zeros((C.shape[0], X.shape[0]))
    for j in range(X.shape[1]):
        pred += np.outer(C[:, j], X[:, j])
    resid = Y[None, :] - pred                          # n × m
    return (resid * resid).sum(axis=1)


def residual_score(X, Y, x) -> float:
    X, Y = check_problem(X, Y)
    x = np.asarray(x, dtype=float)
    if x.ndim != 1 or x.shape[0] != X.shape[1]:
        raise DimensionMismatch(
            f"candidate has shape {x.shape}, matrix has {X.shape[1]} columns"
        )
    return float(residual_scores(X, Y, x[None, :])[0])

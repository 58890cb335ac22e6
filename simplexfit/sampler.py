# ─────────────────────────────  simplexfit/sampler.py  ─────────────────────────────
"""
Random candidates on the probability simplex
--------------------------------------------

• ``sequential`` – stick-breaking with conditional uniform draws.  Slot j
  takes a uniform share of whatever is left, the last slot takes the rest.
  This is NOT uniform over the simplex: E[x_j] = 0.5**(j+1) for every slot
  but the last, so later groups are systematically smaller.  It is the
  default because documented example results were produced with it.
• ``uniform``    – sorted-uniform spacings, uniform over the simplex.

Both modes consume exactly k-1 uniform draws per candidate, so a batch of
n candidates is bit-identical to n consecutive single draws.
"""

import numpy as np

from simplexfit.errors import InvalidDimension

SAMPLERS = ("sequential", "uniform")


# ---------------------------------------------------------------------------
# 0.  Shared checks
# ---------------------------------------------------------------------------
def _check(k: int, mode: str) -> None:
    if k < 1:
        raise InvalidDimension(f"simplex dimension must be >= 1, got {k}")
    if mode not in SAMPLERS:
        raise ValueError(f"unknown sampler {mode!r}; expected one of {SAMPLERS}")


# ---------------------------------------------------------------------------
# 1.  Uniform block → candidates
# ---------------------------------------------------------------------------
def _sequential(u: np.ndarray) -> np.ndarray:
    n, d = u.shape
    x = np.zeros((n, d + 1))
    remaining = np.ones(n)
    for j in range(d):
        share = u[:, j] * remaining          # U(0, remaining)
        x[:, j] = share
        remaining = remaining - share
    x[:, d] = remaining                      # last slot absorbs the rest
    return x


def _uniform(u: np.ndarray) -> np.ndarray:
    n = u.shape[0]
    cuts = np.sort(u, axis=1)
    edges = np.hstack([np.zeros((n, 1)), cuts, np.ones((n, 1))])
    return np.diff(edges, axis=1)


_BUILDERS = {"sequential": _sequential, "uniform": _uniform}


# ---------------------------------------------------------------------------
# 2.  Public API
# ---------------------------------------------------------------------------
def sample_simplex_batch(n: int,
                         k: int,
                         rng: np.random.Generator,
                         mode: str = "sequential") -> np.ndarray:
    """
    Draw ``n`` candidates of length ``k``.

    Returns
    -------
    ndarray [n × k]   rows are nonnegative and sum to 1
    """
    _check(k, mode)
    u = rng.random((n, k - 1))
    return _BUILDERS[mode](u)


def sample_simplex(k: int,
                   rng: np.random.Generator,
                   mode: str = "sequential") -> np.ndarray:
    """Draw a single candidate of length ``k``."""
    return sample_simplex_batch(1, k, rng, mode)[0]

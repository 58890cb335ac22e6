# ─────────────────────────────  simplexfit/search.py  ─────────────────────────────
"""
Fixed-budget random search on the probability simplex
-----------------------------------------------------

• Draws ``n_trials`` candidates from one generator (sampler.py)
• Scores each against the target (scoring.py)
• Keeps every trial tied at the minimum score, in trial order

Candidates are drawn chunk by chunk from the single generator *before*
scoring, so splitting the work across threads never changes the result.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from numbers import Integral
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from simplexfit.errors import InvalidDimension
from simplexfit.sampler import SAMPLERS, sample_simplex_batch
from simplexfit.scoring import check_problem, residual_scores


@dataclass(frozen=True)
class TrialRecord:
    index: int                 # 0-based trial number
    score: float
    solution: np.ndarray


@dataclass(frozen=True)
class SearchResult:
    score: float
    records: Tuple[TrialRecord, ...]
    n_trials: int
    sampler: str
    labels: Optional[Tuple[str, ...]] = None

    @property
    def solution(self) -> np.ndarray:
        """First (lowest trial index) of the tied best candidates."""
        return self.records[0].solution

    @property
    def ties(self) -> int:
        return len(self.records)

    def first(self) -> "SearchResult":
        """Same result keeping only the earliest tied trial."""
        return replace(self, records=self.records[:1])

    def to_dict(self, single: bool = False):
        """``{"score", "solution"}`` or one such dict per tied trial."""
        out = [
            {"score": rec.score, "solution": rec.solution.tolist()}
            for rec in self.records
        ]
        if single or len(out) == 1:
            return out[0]
        return out

    def to_series(self) -> pd.Series:
        index = list(self.labels) if self.labels else range(len(self.solution))
        return pd.Series(self.solution, index=index, name="fraction")


# ---------------------------------------------------------------------------
# 0.  Argument checks (run before any random draw)
# ---------------------------------------------------------------------------
def _check_trials(n_trials) -> int:
    if isinstance(n_trials, bool) or not isinstance(n_trials, Integral):
        raise InvalidDimension(f"n_trials must be an integer, got {n_trials!r}")
    if n_trials < 1:
        raise InvalidDimension(f"n_trials must be >= 1, got {n_trials}")
    return int(n_trials)


def _chunks(n: int, size: int) -> List[Tuple[int, int]]:
    return [(lo, min(lo + size, n)) for lo in range(0, n, size)]


# ---------------------------------------------------------------------------
# 1.  Score one chunk → its own tie set
# ---------------------------------------------------------------------------
def _best_in_chunk(X, Y, C: np.ndarray, offset: int):
    scores = residual_scores(X, Y, C)
    best = scores.min()
    hits = np.flatnonzero(scores == best)
    return float(best), [
        TrialRecord(int(offset + i), float(scores[i]), C[i].copy()) for i in hits
    ]


def _merge(parts) -> Tuple[float, List[TrialRecord]]:
    best = min(score for score, _ in parts)
    records: List[TrialRecord] = []
    for score, recs in parts:               # parts are in chunk order
        if score == best:
            records.extend(recs)
    return best, records


# ---------------------------------------------------------------------------
# 2.  Driver
# ---------------------------------------------------------------------------
def run_search(X,
               Y,
               n_trials: int = 1000,
               rng: Optional[np.random.Generator] = None,
               *,
               seed: Optional[int] = None,
               sampler: str = "sequential",
               n_jobs: int = 1,
               chunk_size: Optional[int] = None,
               labels: Optional[Sequence[str]] = None) -> SearchResult:
    """
    Random search for x on the simplex minimising Σ (Y − X·x)².

    Parameters
    ----------
    X, Y       : matrix [m × k] and target [m]
    n_trials   : number of candidates to evaluate (>= 1)
    rng        : generator to draw from; built from ``seed`` when omitted
                 (passing both is an error)
    sampler    : "sequential" (default, biased) or "uniform"
    n_jobs     : threads used to score chunks
    chunk_size : candidates per chunk; all trials in one chunk when omitted
    labels     : optional group names carried on the result

    Returns
    -------
    SearchResult with every trial tied at the minimum score
    """
    n = _check_trials(n_trials)
    X, Y = check_problem(X, Y)
    if sampler not in SAMPLERS:
        raise ValueError(f"unknown sampler {sampler!r}; expected one of {SAMPLERS}")
    if labels is not None and len(labels) != X.shape[1]:
        raise ValueError(f"{len(labels)} labels for {X.shape[1]} groups")
    if rng is not None and seed is not None:
        raise ValueError("pass either rng or seed, not both")
    if rng is None:
        rng = np.random.default_rng(seed)

    k = X.shape[1]
    size = n if chunk_size is None else max(1, int(chunk_size))
    spans = _chunks(n, size)

    # draw in trial order from the one stream, then score
    blocks = ((lo, sample_simplex_batch(hi - lo, k, rng, sampler)) for lo, hi in spans)

    if n_jobs > 1 and len(spans) > 1:
        blocks = list(blocks)
        with ThreadPoolExecutor(max_workers=n_jobs) as pool:
            parts = list(pool.map(lambda b: _best_in_chunk(X, Y, b[1], b[0]), blocks))
    else:
        parts = [_best_in_chunk(X, Y, C, lo) for lo, C in blocks]

    best, records = _merge(parts)
    return SearchResult(
        score=best,
        records=tuple(records),
        n_trials=n,
        sampler=sampler,
        labels=tuple(labels) if labels is not None else None,
    )


# ---------------------------------------------------------------------------
# 3.  One-liner convenience
# ---------------------------------------------------------------------------
def approximate_simplex_solution(X, Y, n: int = 1000,
                                 rng_seed: Optional[int] = None,
                                 sampler: str = "sequential",
                                 single: bool = False):
    return run_search(X, Y, n, seed=rng_seed, sampler=sampler).to_dict(single=single)

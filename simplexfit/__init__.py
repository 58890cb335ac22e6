"""Randomized search for mixing weights on the probability simplex."""

from simplexfit.errors import DimensionMismatch, InvalidDimension
from simplexfit.sampler import sample_simplex, sample_simplex_batch
from simplexfit.scoring import residual_score
from simplexfit.search import SearchResult, approximate_simplex_solution, run_search

__all__ = [
    "DimensionMismatch",
    "InvalidDimension",
    "SearchResult",
    "approximate_simplex_solution",
    "residual_score",
    "run_search",
    "sample_simplex",
    "sample_simplex_batch",
]

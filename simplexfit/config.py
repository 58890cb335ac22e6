# simplexfit/config.py
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

ROOT         = Path(__file__).resolve().parents[1]
CONFIG_FILE  = ROOT / "config" / "search.yml"
PROBLEM_DIR  = ROOT / "data" / "problems"
RESULTS_DIR  = ROOT / "results"


@dataclass(frozen=True)
class SearchConfig:
    n_trials:   int = 1000
    seed:       Optional[int] = None
    sampler:    str = "sequential"          # sequential | uniform
    n_jobs:     int = 1
    chunk_size: Optional[int] = None
    single:     bool = False                # collapse ties to the first trial

    def updated(self, **overrides) -> "SearchConfig":
        """Copy with the non-None ``overrides`` applied."""
        _check_keys(overrides)
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def search_kwargs(self) -> dict:
        return dict(n_trials=self.n_trials, seed=self.seed, sampler=self.sampler,
                    n_jobs=self.n_jobs, chunk_size=self.chunk_size)


def _check_keys(raw: dict) -> None:
    known = {f.name for f in fields(SearchConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"unknown search settings: {', '.join(unknown)}")


def load_config(yml: Path | str | None = None, **overrides) -> SearchConfig:
    """
    Read search settings from YAML, e.g.::

        n_trials: 5000
        seed: 42
        sampler: sequential

    A missing file gives the defaults.  Keyword ``overrides`` that are not
    None win over the file.
    """
    path = Path(yml) if yml is not None else CONFIG_FILE
    raw = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    _check_keys(raw)
    return SearchConfig(**raw).updated(**overrides)

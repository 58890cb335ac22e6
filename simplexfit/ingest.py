# simplexfit/ingest.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd
import pandera.pandas as pa
import yaml
from pandera.errors import SchemaErrors

from simplexfit.errors import DimensionMismatch

TABLE_SUFFIXES = (".csv", ".xls", ".xlsx")
PROBLEM_SUFFIXES = (".yml", ".yaml") + TABLE_SUFFIXES


# ──────────────────────────────────────────────────────────
# 1.  One problem = matrix [category × group] + target [category]
# ──────────────────────────────────────────────────────────
@dataclass
class Problem:
    name: str
    matrix: pd.DataFrame
    target: pd.Series
    search: Dict = field(default_factory=dict)     # per-problem overrides

    @property
    def groups(self) -> List[str]:
        return [str(g) for g in self.matrix.columns]


def _proportions_schema(columns) -> pa.DataFrameSchema:
    # every cell is a proportion; no blanks allowed
    return pa.DataFrameSchema(
        {
            col: pa.Column(float, pa.Check.between(0, 1), nullable=False, coerce=True)
            for col in columns
        },
        strict=False,
    )


def validate_proportions(df: pd.DataFrame) -> pd.DataFrame:
    """Raise ``pandera.errors.SchemaErrors`` listing every bad cell."""
    return _proportions_schema(df.columns).validate(df, lazy=True)


def build_problem(name: str,
                  matrix: pd.DataFrame,
                  target: pd.Series,
                  search: Dict | None = None) -> Problem:
    matrix = matrix.copy()
    matrix.index = matrix.index.map(str)
    matrix.columns = matrix.columns.map(str)
    target = target.copy()
    target.index = target.index.map(str)

    if set(target.index) != set(matrix.index) or len(target) != len(matrix):
        raise DimensionMismatch(
            f"{name}: target categories {sorted(target.index)} "
            f"do not match matrix rows {sorted(matrix.index)}"
        )

    matrix = validate_proportions(matrix)
    target = validate_proportions(target.to_frame("target"))["target"]
    # align target to matrix row order
    return Problem(name, matrix, target.loc[matrix.index], dict(search or {}))


# ──────────────────────────────────────────────────────────
# 2.  YAML problem file
# ──────────────────────────────────────────────────────────
def load_yaml_problem(yml: Path | str) -> Problem:
    """
    Structure::

        name: survey-2021          # optional, defaults to file stem
        matrix:                    # group → {category: proportion}
          A: {c1: 0.57, c2: 0.23, c3: 0.20}
          B: {c1: 0.40, c2: 0.41, c3: 0.19}
        target: {c1: 0.40, c2: 0.25, c3: 0.35}
        search:                    # optional SearchConfig overrides
          n_trials: 5000
    """
    path = Path(yml)
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    for key in ("matrix", "target"):
        if key not in raw:
            raise ValueError(f"{path.name}: missing '{key}' section")

    matrix = pd.DataFrame(raw["matrix"])                 # category × group
    target = pd.Series(raw["target"], dtype=float)
    return build_problem(raw.get("name", path.stem), matrix, target, raw.get("search"))


# ──────────────────────────────────────────────────────────
# 3.  Tables: one row per category, one column per group + `target`
# ──────────────────────────────────────────────────────────
def _clean_sheet(df: pd.DataFrame, name: str) -> Problem:
    # a. trimmed headers; bookkeeping columns matched case-insensitively
    df = df.dropna(how="all").copy()
    df.columns = [str(c).strip() for c in df.columns]
    lowered = {c: c.lower().replace(" ", "_") for c in df.columns}

    # b. category label: explicit `category` column, else the first column
    cat_col = next((c for c, low in lowered.items() if low == "category"), df.columns[0])
    tgt_col = next((c for c, low in lowered.items() if low == "target"), None)
    if tgt_col is None:
        raise ValueError(f"{name}: no 'target' column")

    df = df.set_index(cat_col)
    df.index = df.index.map(lambda v: str(v).strip())
    target = df.pop(tgt_col)
    return build_problem(name, df, target)


def load_table_problems(path: Path | str) -> List[Problem]:
    """
    Read a CSV (one problem) or every worksheet of an Excel workbook.
    Blank or invalid sheets are reported and skipped.
    """
    path = Path(path)
    if path.suffix.lower() == ".csv":
        return [_clean_sheet(pd.read_csv(path), path.stem)]

    # Pandas returns Dict[str, DataFrame] when sheet_name=None
    all_sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")

    cleaned = []
    for sheet_name, df in all_sheets.items():
        print(f"▶ Sheet '{sheet_name}': {df.shape[0]} rows × {df.shape[1]} cols")

        if df.dropna(how="all").empty:
            print("  ↳ sheet is blank; skipping")
            continue

        try:
            cleaned.append(_clean_sheet(df, name=f"{path.stem}:{sheet_name}"))
        except SchemaErrors as err:
            print(f"  ↳ validation failed:\n{err.failure_cases.head()}")
            continue
        except ValueError as err:
            print(f"  ↳ skipped: {err}")
            continue

    if not cleaned:
        raise ValueError(f"No sheet in {path.name} passed QC")

    return cleaned


# ──────────────────────────────────────────────────────────
# 4.  Dispatch on suffix
# ──────────────────────────────────────────────────────────
def load_problems(path: Path | str) -> List[Problem]:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".yml", ".yaml"):
        return [load_yaml_problem(path)]
    if suffix in TABLE_SUFFIXES:
        return load_table_problems(path)
    raise ValueError(f"unsupported problem file: {path.name}")


def discover(problem_dir: Path | str) -> List[Path]:
    return sorted(
        p for p in Path(problem_dir).iterdir()
        if p.is_file() and p.suffix.lower() in PROBLEM_SUFFIXES
    )

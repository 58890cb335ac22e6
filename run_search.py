# run_search.py
import argparse
from pathlib import Path

import pandas as pd

from simplexfit.config import PROBLEM_DIR, RESULTS_DIR, load_config
from simplexfit.ingest import discover, load_problems
from simplexfit.mixing import reference_fit, search_labelled


def report(result, ref_score) -> None:
    print(f"  ↳ best score {result.score:.6g} after {result.n_trials} trials "
          f"({result.sampler}, {result.ties} tied)")
    for group, frac in result.to_series().items():
        print(f"      {group:<12} {frac:.4f}")
    print(f"  ↳ bounded least-squares reference score {ref_score:.6g}")


def summary_rows(problem, result, ref_score):
    for rec in result.records:
        row = {"problem": problem.name, "trial": rec.index, "score": rec.score,
               "reference_score": ref_score}
        row.update({f"{g}_frac": v for g, v in zip(problem.groups, rec.solution)})
        yield row


def main(argv=None):
    parser = argparse.ArgumentParser(description="Random simplex search over problem files")
    parser.add_argument("problem_dir", nargs="?", default=str(PROBLEM_DIR))
    parser.add_argument("--config", default=None, help="YAML search settings")
    parser.add_argument("--out", default=None, help="parquet file for all results")
    parser.add_argument("--save", action="store_true",
                        help=f"write results to {RESULTS_DIR.name}/simplex_search.parquet")
    parser.add_argument("--n-trials", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--sampler", choices=["sequential", "uniform"], default=None)
    args = parser.parse_args(argv)

    base = load_config(args.config)

    print("Starting simplex search...")
    rows = []
    for path in discover(args.problem_dir):
        print(f"Processing problem file: {path.name}")
        try:
            problems = load_problems(path)
        except Exception as e:
            print(f"Error loading {path.name}: {e}")
            continue

        for problem in problems:
            print(f"▶ {problem.name}: {len(problem.matrix)} categories × "
                  f"{len(problem.groups)} groups")
            try:
                # file-level overrides first, command line last
                config = base.updated(**problem.search).updated(
                    n_trials=args.n_trials, seed=args.seed, sampler=args.sampler)
                result = search_labelled(problem.target, problem.matrix, config)
                _, ref_score = reference_fit(problem.matrix, problem.target)
            except Exception as e:
                print(f"Error solving {problem.name}: {e}")
                continue
            if config.single:
                result = result.first()
            report(result, ref_score)
            rows.extend(summary_rows(problem, result, ref_score))

    out = Path(args.out) if args.out else None
    if out is None and args.save:
        out = RESULTS_DIR / "simplex_search.parquet"
    if out is not None and rows:
        out.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows).to_parquet(out, index=False)
        print(f"✔ Saved {len(rows)} rows → {out}")
    print("Simplex search complete.")
    return rows


if __name__ == "__main__":
    main()

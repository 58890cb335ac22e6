import shutil

import pandas as pd

import run_search
from simplexfit.config import PROBLEM_DIR


def test_cli_solves_every_problem(tmp_path, capsys):
    for path in PROBLEM_DIR.iterdir():
        shutil.copy(path, tmp_path / path.name)
    (tmp_path / "broken.yml").write_text("matrix: {A: {c1: 1.0}}\n", encoding="utf-8")
    out = tmp_path / "results" / "all.parquet"

    rows = run_search.main([str(tmp_path), "--n-trials", "300", "--seed", "3",
                            "--out", str(out)])

    printed = capsys.readouterr().out
    assert "Error loading broken.yml" in printed
    assert "three-groups" in printed
    assert {r["problem"] for r in rows} == {"three-groups", "two_groups"}

    saved = pd.read_parquet(out)
    assert len(saved) == len(rows)
    assert (saved["score"] >= 0).all()


def test_cli_single_mode_and_default_save_location(tmp_path, monkeypatch, capsys):
    problems = tmp_path / "problems"
    problems.mkdir()
    # one group: every trial is [1.0] and ties at score 0
    (problems / "flat.yml").write_text(
        "matrix:\n"
        "  A: {c1: 0.5, c2: 0.5}\n"
        "target: {c1: 0.5, c2: 0.5}\n"
        "search:\n"
        "  n_trials: 20\n"
        "  single: true\n",
        encoding="utf-8",
    )
    results = tmp_path / "results"
    monkeypatch.setattr(run_search, "RESULTS_DIR", results)

    rows = run_search.main([str(problems), "--save"])

    assert len(rows) == 1
    assert rows[0]["trial"] == 0
    assert "1 tied" in capsys.readouterr().out

    saved = pd.read_parquet(results / "simplex_search.parquet")
    assert len(saved) == 1
    assert saved.loc[0, "score"] == 0.0

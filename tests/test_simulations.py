"""Tests for the synthetic-cohort experiment harness."""

from __future__ import annotations

import pytest

from simulations.cohorts import generate_cohort
from simulations.common import CohortSpec, common_x_range, format_stats_line, summarize
from simulations.compare import main
from simulations.run import run_all, run_experiment


def test_cohort_spec_rejects_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        CohortSpec(n=0, prevalence=0.1)
    with pytest.raises(ValueError):
        CohortSpec(n=10, prevalence=1.5)
    with pytest.raises(ValueError):
        CohortSpec(n=10, prevalence=0.1, threshold=0.0)
    with pytest.raises(ValueError):
        CohortSpec(n=10, prevalence=0.1, score_noise=-1.0)


def test_generate_cohort_is_seeded_and_well_formed() -> None:
    spec = CohortSpec(n=200, prevalence=0.2)
    a = generate_cohort(spec, seed=7)
    b = generate_cohort(spec, seed=7)

    assert a == b
    assert len(a.values) == len(a.scores) == 200
    assert all(v >= 0 for v in a.values)
    # suppressed subjects stay well below the cutoff
    assert all(v > spec.threshold or v <= spec.threshold / 10 for v in a.values)
    assert 0 < a.positives(spec.threshold) < 200


def test_noiseless_scores_rank_by_value() -> None:
    cohort = generate_cohort(CohortSpec(n=50, prevalence=0.3, score_noise=0.0), seed=1)
    by_score = sorted(range(50), key=lambda i: cohort.scores[i])
    by_value = sorted(range(50), key=lambda i: cohort.values[i])
    assert [cohort.values[i] for i in by_score] == [cohort.values[i] for i in by_value]


def test_summarize_population_stats() -> None:
    s = summarize([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
    assert s.min == 2.0
    assert s.max == 9.0
    assert s.mean == pytest.approx(5.0)
    assert s.std == pytest.approx(2.0)

    with pytest.raises(ValueError):
        summarize([])


def test_run_experiment_reports_atr_stats() -> None:
    r = run_experiment("MMPA", n=100, prevalence=0.1, pool_size=5, perm_num=20, seed=3)

    assert r.method == "mmpa"
    assert r.matrix.shape == (20, 20)
    assert 20.0 <= r.stats.min <= r.stats.mean <= r.stats.max <= 120.0
    assert r.meta["split"] == "sequential"
    assert r.runtime_s is not None
    assert format_stats_line(r).startswith("mmpa: ATR min=")


def test_run_all_shares_cohort_and_orders_methods() -> None:
    results = run_all(n=120, prevalence=0.15, pool_size=6, perm_num=15, seed=5)

    assert [r.method for r in results] == ["minipool", "mpa", "mmpa"]
    assert len({r.meta["positives"] for r in results}) == 1
    mini, mpa, mmpa = (r.stats.mean for r in results)
    assert mmpa <= mpa <= mini

    xmin, xmax = common_x_range(results)
    assert xmin <= min(r.stats.min for r in results)
    assert xmax >= max(r.stats.max for r in results)


def test_common_x_range_widens_degenerate_range() -> None:
    r = run_experiment("mpa", n=20, prevalence=0.0, pool_size=5, perm_num=4, seed=1)
    assert common_x_range([r]) == (20.0, 21.0)


def test_compare_cli_without_plot(capsys: pytest.CaptureFixture[str]) -> None:
    code = main([
        "--n", "60",
        "--prevalence", "0.1",
        "--pool-size", "4",
        "--perms", "5",
        "--split", "halving",
        "--methods", "mpa", "mmpa",
        "--no-plot",
    ])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert [line.split(":")[0] for line in out] == ["mpa", "mmpa"]

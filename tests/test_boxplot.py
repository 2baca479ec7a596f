"""Tests for quartiles, whiskers and outliers."""

import random

import pytest

from core.boxplot import boxplot_stats, quantile, summarize


def test_quantile_interpolates():
    arr = [1.0, 2.0, 3.0, 4.0]
    assert quantile(arr, 0.25) == pytest.approx(1.75)
    assert quantile(arr, 0.5) == pytest.approx(2.5)
    assert quantile(arr, 0.75) == pytest.approx(3.25)


def test_quantile_edges():
    assert quantile([], 0.5) is None
    assert quantile([4.0], 0.75) == 4.0
    assert quantile([1.0, 9.0], 1.0) == 9.0
    assert quantile([1.0, 9.0], 0.0) == 1.0


def test_summarize_flags_outliers():
    stat = summarize("3", [3.0, 1.0, 100.0, 2.0, 4.0])
    assert stat.q1 == 2.0
    assert stat.median == 3.0
    assert stat.q3 == 4.0
    assert stat.low_fence == -1.0
    assert stat.high_fence == 7.0
    assert stat.outliers == (100.0,)
    assert stat.whisker_min == 1.0
    assert stat.whisker_max == 4.0
    assert stat.count == 5


def test_summarize_single_value():
    stat = summarize("1", [0.7])
    assert stat.q1 == stat.median == stat.q3 == 0.7
    assert stat.iqr == 0.0
    assert stat.whisker_min == stat.whisker_max == 0.7
    assert stat.outliers == ()


def test_summarize_constant_group_with_spike():
    stat = summarize("1", [0.5, 0.5, 0.5, 0.5, 0.9])
    assert stat.iqr == 0.0
    assert stat.outliers == (0.9,)
    assert stat.whisker_min == stat.whisker_max == 0.5


def test_boxplot_stats_groups_ascending(make_row):
    rows = [make_row(task_complexity=k, accuracy_score=0.1 * k) for k in [3, 1, 2, 3, 1]]
    stats = boxplot_stats(rows, "task_complexity", "accuracy_score")
    assert [s.label for s in stats] == ["1", "2", "3"]
    assert [s.count for s in stats] == [2, 1, 2]


def test_boxplot_stats_ordering_invariants(make_row):
    rng = random.Random(3)
    rows = [
        make_row(task_complexity=rng.randint(1, 10), accuracy_score=rng.betavariate(2, 5) if rng.random() > 0.05 else rng.random())
        for _ in range(500)
    ]
    for s in boxplot_stats(rows, "task_complexity", "accuracy_score"):
        assert s.whisker_min <= s.q1 <= s.median <= s.q3 <= s.whisker_max
        for v in s.outliers:
            assert v < s.low_fence or v > s.high_fence


def test_boxplot_stats_empty():
    assert boxplot_stats([], "task_complexity", "accuracy_score") == []

from __future__ import annotations

import pytest

from grade_report.models.thresholds import ThresholdSet
from grade_report.services.aggregation import (
    EmptyResultError,
    aggregate,
    coerce_rows,
    summarize,
)

DEFAULTS = ThresholdSet(40, 60, 70)


def _rows(pairs):
    return [{"Grade": g, "Group": grp} for g, grp in pairs]


def test_reference_dataset_overall(sample_rows):
    result = aggregate(sample_rows, "Grade", "Group", DEFAULTS)
    o = result.overall
    assert o.n == 4
    assert o.passing_count == 3
    assert o.failed_count == 1
    assert o.passing_rate == 75.0
    assert o.merit_rate == 25.0
    assert o.distinction_rate == 25.0
    assert o.overall_passing_rate_fixed == 75.0
    assert (o.pass_band_count, o.merit_band_count, o.distinction_band_count) == (1, 1, 1)
    assert o.mean == 55.0
    assert o.sd == 15.81
    assert o.max == 75.0
    assert o.min == 35.0


def test_text_grades_are_coerced_and_non_numeric_skipped():
    rows = _rows([("85%", "A"), ("N/A", "A"), (None, "B"), ("1,000", "B"), ("", "B")])
    result = aggregate(rows, "Grade", "Group", DEFAULTS)
    assert result.overall.n == 2
    assert result.skipped_rows == [2, 3, 5]
    assert [r.row_number for r in result.rows] == [1, 4]


def test_identical_grades_have_zero_sd():
    result = aggregate(_rows([(50, "A"), (50, "A")]), "Grade", "Group", DEFAULTS)
    g = result.groups[0]
    assert g.group == "A"
    assert g.stats.mean == 50.0
    assert g.stats.sd == 0.0


def test_single_grade():
    s = summarize([42.0], DEFAULTS)
    assert s.n == 1
    assert s.sd == 0.0
    assert s.max == s.min == 42.0
    assert s.passing_rate == 100.0


def test_groups_sorted_and_partition_overall():
    rows = _rows([(90, "C"), (20, "A"), (55, None), (65, "B"), (41, "A"), (70, "C")])
    result = aggregate(rows, "Grade", "Group", DEFAULTS)
    labels = [g.group for g in result.groups]
    assert labels == sorted(labels)
    assert "(missing)" in labels
    assert sum(g.stats.n for g in result.groups) == result.overall.n
    for g in result.groups:
        assert g.stats.passing_count + g.stats.failed_count == g.stats.n


def test_threshold_boundaries_are_inclusive_lower():
    s = summarize([40.0, 60.0, 70.0, 39.99], DEFAULTS)
    assert s.passing_count == 3
    assert s.merit_rate == 25.0  # only 60 is in [60, 70)
    assert s.distinction_rate == 25.0
    assert (s.pass_band_count, s.merit_band_count, s.distinction_band_count) == (1, 1, 1)


def test_merit_equal_to_distinction_gives_zero_merit():
    rows = _rows([(65, "A"), (80, "A"), (30, "A")])
    result = aggregate(rows, "Grade", "Group", ThresholdSet(40, 70, 70))
    assert result.overall.merit_rate == 0.0
    assert result.overall.distinction_rate == pytest.approx(33.3)


def test_fixed_bands_ignore_user_thresholds():
    rows = _rows([(45, "A"), (62, "A"), (75, "A"), (10, "A")])
    strict = aggregate(rows, "Grade", "Group", ThresholdSet(90, 95, 99)).overall
    assert strict.passing_count == 0
    assert strict.overall_passing_rate_fixed == 75.0
    assert (strict.pass_band_count, strict.merit_band_count, strict.distinction_band_count) == (1, 1, 1)


def test_unordered_thresholds_are_normalized():
    rows = _rows([(55, "A"), (65, "A")])
    result = aggregate(rows, "Grade", "Group", ThresholdSet(60, 50, 120))
    # normalized to (60, 60, 100): 65 is a merit, nothing reaches distinction
    assert result.overall.passing_count == 1
    assert result.overall.merit_rate == 50.0
    assert result.overall.distinction_rate == 0.0


def test_rates_round_half_up():
    # 1/8 = 12.5%, 1/6 = 16.666..%, 1/16 = 6.25%
    assert summarize([80] + [0] * 7, DEFAULTS).distinction_rate == 12.5
    assert summarize([80] + [0] * 5, DEFAULTS).distinction_rate == 16.7
    assert summarize([80] + [0] * 15, DEFAULTS).distinction_rate == 6.3


def test_no_numeric_grades_raises():
    with pytest.raises(EmptyResultError):
        aggregate(_rows([("N/A", "A"), (None, "B")]), "Grade", "Group", DEFAULTS)


def test_summarize_empty_raises():
    with pytest.raises(EmptyResultError):
        summarize([], DEFAULTS)


def test_aggregate_is_pure():
    rows = _rows([(50, "A"), (70, "B")])
    first = aggregate(rows, "Grade", "Group", DEFAULTS)
    second = aggregate(rows, "Grade", "Group", DEFAULTS)
    assert first == second
    assert rows == _rows([(50, "A"), (70, "B")])


def test_coerce_rows_numbers_rows_from_one():
    coerced, skipped = coerce_rows(_rows([("x", "A"), (10, 2.0)]), "Grade", "Group")
    assert skipped == [1]
    assert coerced[0].row_number == 2
    assert coerced[0].group == "2"


def test_records_follow_column_order(sample_rows):
    from grade_report.models.summary import GROUP_COLUMNS, SUMMARY_COLUMNS

    result = aggregate(sample_rows, "Grade", "Group", DEFAULTS)
    assert list(result.overall_records()[0]) == list(SUMMARY_COLUMNS)
    assert list(result.group_records()[0]) == list(GROUP_COLUMNS)


def test_very_large_grades_still_summarize():
    rows = _rows([("1e30", "A"), (50, "A")])
    result = aggregate(rows, "Grade", "Group", DEFAULTS)
    assert result.overall.n == 2
    assert result.overall.mean == pytest.approx(5e29)
    assert result.overall.sd == pytest.approx(5e29)
    assert result.overall.max == 1e30


def test_sum_beyond_float_range_gives_finite_mean():
    result = aggregate(_rows([(1e308, "A"), (1e308, "A")]), "Grade", "Group", DEFAULTS)
    assert result.overall.mean == pytest.approx(1e308)
    assert result.overall.sd == 0.0


def test_opposite_extremes_do_not_raise():
    s = summarize([-1.7e308, 1.7e308], DEFAULTS)
    assert s.mean == 0.0
    assert s.sd >= 1e308

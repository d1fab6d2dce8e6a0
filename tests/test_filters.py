"""
Tests for the row filters.
"""

import logging
from datetime import date

import polars as pl
from polars.testing import assert_frame_equal

from tabstats.staging.filters import (
    apply_filters,
    drop_duplicate_rows,
    exclude_categories,
    filter_date_range,
)


def _frame():
    return pl.DataFrame({
        "d": [date(2021, 3, 1), date(2020, 1, 6), None, date(2019, 12, 31), date(2020, 1, 6)],
        "c": ["robbery", "assault", "robbery", "unknown", "theft"],
    })


class TestFilterDateRange:

    def test_inclusive_bounds_and_sorted(self):
        out = filter_date_range(_frame(), "d", date(2020, 1, 6), date(2021, 3, 1))

        assert out.get_column("d").to_list() == [date(2020, 1, 6), date(2020, 1, 6), date(2021, 3, 1)]
        # equal dates keep their input order
        assert out.get_column("c").to_list() == ["assault", "theft", "robbery"]

    def test_open_bounds(self):
        assert filter_date_range(_frame(), "d", None, date(2019, 12, 31)).height == 1
        assert filter_date_range(_frame(), "d", date(2020, 1, 1), None).height == 3

    def test_null_dates_never_pass(self):
        out = filter_date_range(_frame(), "d", None, None)
        assert out.height == 4
        assert out.get_column("d").null_count() == 0

    def test_inverted_range_is_empty(self):
        out = filter_date_range(_frame(), "d", date(2021, 1, 1), date(2020, 1, 1))
        assert out.is_empty()
        assert out.schema == _frame().schema

    def test_single_day(self):
        out = filter_date_range(_frame(), "d", date(2019, 12, 31), date(2019, 12, 31))
        assert out.get_column("c").to_list() == ["unknown"]


class TestDropDuplicates:

    def test_keeps_first_occurrence_in_place(self):
        df = pl.DataFrame({"a": [1, 2, 1, 3, 2], "b": ["x", "y", "x", "z", "q"]})
        out = drop_duplicate_rows(df)
        expected = pl.DataFrame({"a": [1, 2, 3, 2], "b": ["x", "y", "z", "q"]})
        assert_frame_equal(out, expected)

    def test_idempotent(self):
        df = pl.DataFrame({"a": [1, 1, 2]})
        once = drop_duplicate_rows(df)
        assert_frame_equal(drop_duplicate_rows(once), once)


class TestExcludeCategories:

    def test_excluded_removed(self):
        out = exclude_categories(_frame(), "c", ["unknown", "theft"])
        assert out.get_column("c").to_list() == ["robbery", "assault", "robbery"]

    def test_nothing_excluded(self):
        assert_frame_equal(exclude_categories(_frame(), "c", []), _frame())


class TestApplyFilters:

    def test_order_of_stages(self, caplog):
        df = pl.DataFrame({
            "d": [date(2020, 1, 2), date(2020, 1, 1), date(2020, 1, 2), date(2030, 1, 1), date(2020, 1, 3)],
            "c": ["a", "b", "a", "a", "unknown"],
        })

        with caplog.at_level(logging.INFO):
            out = apply_filters(df, "d", date(2020, 1, 1), date(2020, 12, 31), "c", ["unknown"])

        assert out.rows() == [(date(2020, 1, 1), "b"), (date(2020, 1, 2), "a")]
        assert "out of range: 1, duplicates: 1, excluded: 1" in caplog.text

    def test_no_category_column(self):
        out = apply_filters(_frame(), "d", None, None)
        assert out.height == 4


def test_single_day_range_keeps_only_that_day():
    df = pl.DataFrame({"d": [date(2020, 1, 1), date(2020, 1, 2), date(2020, 1, 3)]})
    out = filter_date_range(df, "d", date(2020, 1, 2), date(2020, 1, 2))
    assert out.get_column("d").to_list() == [date(2020, 1, 2)]


def test_range_bounds_hold():
    df = _frame()
    start, end = date(2020, 1, 1), date(2020, 12, 31)
    out = filter_date_range(df, "d", start, end)
    assert out.get_column("d").min() >= start
    assert out.get_column("d").max() <= end

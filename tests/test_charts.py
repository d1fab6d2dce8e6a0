"""
Chart tests (Agg backend, see conftest.py).
"""

import matplotlib.pyplot as plt
import pytest

from tabstats.analysis.aggregate import AggregationBucket as B
from tabstats.analysis.report import build_year_result
from tabstats.models.parameters import PlottingParameters
from tabstats.pipeline import prepare_dataset
from tabstats.ploting.charts import plot_bucket_counts, plot_category_counts, render_year
from tabstats.ploting.plotting_config import (
    MEAN_LINE_COLOR,
    PlotStyle,
    get_color_cycle,
    save_figure,
    setup_publication_style,
)
from tabstats.staging.loader import load_csv

WEEKDAYS = [B("Monday", 3), B("Tuesday", 1), B("Sunday", 2)]


class TestPlotBucketCounts:

    def test_bar_with_mean_line(self):
        fig, ax = plot_bucket_counts(WEEKDAYS, "Weekdays")

        assert len(ax.patches) == 3
        assert [p.get_height() for p in ax.patches] == [3, 1, 2]
        mean_line = ax.lines[-1]
        assert list(mean_line.get_ydata()) == [2.0, 2.0]
        assert mean_line.get_linestyle() == "--"
        assert mean_line.get_color() == MEAN_LINE_COLOR
        assert ax.get_legend().get_texts()[0].get_text() == "Mean: 2.0"
        assert [t.get_text() for t in ax.get_xticklabels()] == ["Monday", "Tuesday", "Sunday"]

    def test_unknown_bucket_left_out_of_mean(self):
        buckets = WEEKDAYS + [B("unknown", 9)]
        fig, ax = plot_bucket_counts(buckets, "Weekdays")

        assert len(ax.patches) == 4
        assert list(ax.lines[-1].get_ydata()) == [2.0, 2.0]
        assert ax.get_legend().get_texts()[0].get_text() == "Mean: 2.0"

    def test_line(self):
        fig, ax = plot_bucket_counts(WEEKDAYS, "Weekdays", kind="line")
        assert len(ax.lines) == 2
        assert list(ax.lines[0].get_ydata()) == [3, 1, 2]

    def test_invalid_kind(self):
        with pytest.raises(ValueError):
            plot_bucket_counts(WEEKDAYS, "Weekdays", kind="pie")

    def test_empty_buckets(self):
        fig, ax = plot_bucket_counts([], "Nothing")
        assert [t.get_text() for t in ax.texts] == ["No data"]

    def test_saved(self, tmp_path):
        out = tmp_path / "nested" / "weekday.png"
        plot_bucket_counts(WEEKDAYS, "Weekdays", out_path=out, dpi=72)
        assert out.exists()

    def test_figure_closed_unless_shown(self):
        before = len(plt.get_fignums())
        plot_bucket_counts(WEEKDAYS, "Weekdays")
        assert len(plt.get_fignums()) == before


class TestPlotCategoryCounts:

    def test_bars_and_annotations(self):
        buckets = [B("midtown", 1), B("downtown", 2)]
        fig, ax = plot_category_counts(buckets, "Top 2")

        assert [p.get_width() for p in ax.patches] == [1, 2]
        assert [t.get_text() for t in ax.get_yticklabels()] == ["midtown", "downtown"]
        notes = [t.get_text() for t in ax.texts]
        assert notes == ["1  (33.3%)", "2  (66.7%)"]

    def test_empty(self):
        fig, ax = plot_category_counts([], "Top 0")
        assert [t.get_text() for t in ax.texts] == ["No data"]


class TestRenderYear:

    @pytest.fixture
    def result_2020(self, crime_csv, crime_profile):
        raw = load_csv(crime_csv, crime_profile.columns)
        df = prepare_dataset(raw, crime_profile, crime_profile.start, crime_profile.end)
        return build_year_result(df, 2020, crime_profile)

    def test_saves_every_chart(self, tmp_path, result_2020):
        plotting = PlottingParameters(output_dir=tmp_path, dpi=72)
        figures = render_year(result_2020, plotting, label_name="serious")

        assert set(figures) == {
            "weekday", "month", "top_categories", "labelled_weekday", "labelled_month",
        }
        for name in figures:
            assert (tmp_path / "2020" / f"2020_{name}.png").exists()

    def test_labelled_titles(self, result_2020):
        figures = render_year(result_2020, PlottingParameters(), label_name="serious")
        title = figures["labelled_weekday"].axes[0].get_title()
        assert title == "Serious records per weekday (2020)"

    def test_no_files_without_output_dir(self, tmp_path, monkeypatch, result_2020):
        cwd = tmp_path / "cwd"
        cwd.mkdir()
        monkeypatch.chdir(cwd)
        render_year(result_2020, PlottingParameters())
        assert list(cwd.iterdir()) == []
        assert list(tmp_path.rglob("*.png")) == []

    def test_svg_format(self, tmp_path, result_2020):
        render_year(result_2020, PlottingParameters(output_dir=tmp_path, format="svg", dpi=72))
        assert (tmp_path / "2020" / "2020_month.svg").exists()


class TestPlottingConfig:

    def test_unknown_theme(self):
        with pytest.raises(ValueError) as exc_info:
            setup_publication_style("neon")
        assert "Available themes" in str(exc_info.value)

    def test_plot_style_is_temporary(self):
        size = plt.rcParams["font.size"]
        with PlotStyle("presentation", dpi=150):
            assert plt.rcParams["font.size"] == 14
            assert plt.rcParams["savefig.dpi"] == 150
        assert plt.rcParams["font.size"] == size

    def test_color_cycle(self):
        assert get_color_cycle("minimal", n_colors=10)[8] == get_color_cycle("minimal")[0]
        with pytest.raises(ValueError):
            get_color_cycle("rainbow")

    def test_save_figure_formats(self, tmp_path):
        fig, ax = plt.subplots()
        saved = save_figure(fig, tmp_path / "fig", dpi=72, formats=["png", "svg"])
        plt.close(fig)
        assert [p.name for p in saved] == ["fig.png", "fig.svg"]
        assert all(p.exists() for p in saved)

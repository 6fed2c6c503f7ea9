"""Tests for core data models."""

import json
from dataclasses import FrozenInstanceError

import pytest

from dataprofile.models import (
    AnalysisReport,
    AnalysisState,
    CategoricalFrequency,
    Dataset,
    DuplicateRows,
    FeatureAnalysis,
    Histogram,
    MissingValues,
    NumericStatistics,
    OutlierSummary,
    Summary,
)
from dataprofile.parser import build_dataset


def _report(features: dict) -> AnalysisReport:
    return AnalysisReport(
        summary=Summary(
            total_rows=3,
            total_columns=2,
            missing_values=MissingValues(total=1, percentage=100 / 6, by_column={"n": 0, "c": 1}),
            data_types={"n": "numeric", "c": "categorical"},
        ),
        quality_score=95.5,
        duplicates=DuplicateRows(rows=(2,), count=1, percentage=100 / 3),
        outliers=OutlierSummary(outliers={"n": (1,)}, total_outliers=1),
        features=features,
    )


class TestDataset:
    """Tests for the Dataset container."""

    def test_counts(self):
        dataset = build_dataset(["a", "b"], [["1", "2"], ["3", "4"], ["5", "6"]])
        assert dataset.row_count == 3
        assert dataset.column_count == 2

    def test_header_only(self):
        dataset = Dataset(columns=("a", "b"))
        assert dataset.row_count == 0
        assert dataset.column_count == 2

    def test_column_values(self):
        dataset = build_dataset(["a", "b"], [["1", "x"], ["2", ""]])
        assert dataset.column_values("b") == ["x", ""]

    def test_unknown_column(self):
        dataset = build_dataset(["a"], [["1"]])
        with pytest.raises(KeyError):
            dataset.column_values("missing")

    def test_frozen(self):
        dataset = Dataset(columns=("a",))
        with pytest.raises(FrozenInstanceError):
            dataset.columns = ("b",)

    def test_records_read_only(self):
        dataset = build_dataset(["a"], [["1"]])
        with pytest.raises(TypeError):
            dataset.records[0]["a"] = "2"

    def test_to_frame(self):
        dataset = build_dataset(["a", "b"], [["1", "x"], ["2", ""]])
        frame = dataset.to_frame()
        assert list(frame.columns) == ["a", "b"]
        assert list(frame.index) == [0, 1]
        assert frame["a"].tolist() == ["1", "2"]
        assert frame["b"].dtype == object

    def test_to_frame_empty(self):
        frame = Dataset(columns=("a", "b")).to_frame()
        assert list(frame.columns) == ["a", "b"]
        assert len(frame) == 0


class TestOutlierSummary:
    def test_defaults(self):
        summary = OutlierSummary()
        assert summary.outliers == {}
        assert summary.total_outliers == 0
        assert summary.columns == []

    def test_columns_follow_outlier_keys(self):
        summary = OutlierSummary(outliers={"x": (1,), "y": (0, 2)}, total_outliers=3)
        assert summary.columns == ["x", "y"]


class TestDistributionKinds:
    def test_histogram(self):
        assert Histogram(bins=(1,), labels=("0.00 - 1.00",)).kind == "histogram"

    def test_categorical(self):
        assert CategoricalFrequency(values=("a",), counts=(1,)).kind == "categorical"


class TestAnalysisReportToDict:
    """Serialization into the nested export layout."""

    @pytest.fixture
    def report(self) -> AnalysisReport:
        return _report({
            "n": FeatureAnalysis(
                type="numeric",
                unique_values=3,
                null_count=0,
                statistics=NumericStatistics(min=1.0, max=9.0, mean=4.0, median=2.0, std_dev=3.5),
                distribution=Histogram(bins=(2, 1), labels=("1.00 - 5.00", "5.00 - 9.00")),
            ),
            "c": FeatureAnalysis(
                type="categorical",
                unique_values=1,
                null_count=1,
                statistics=None,
                distribution=CategoricalFrequency(values=("a",), counts=(2,)),
            ),
        })

    def test_top_level_keys(self, report):
        data = report.to_dict()
        assert list(data) == ["summary", "quality", "duplicates", "outliers", "featureAnalysis"]
        assert data["quality"] == 95.5

    def test_summary(self, report):
        summary = report.to_dict()["summary"]
        assert summary["totalRows"] == 3
        assert summary["totalColumns"] == 2
        assert summary["missingValues"]["total"] == 1
        assert summary["missingValues"]["byColumn"] == {"n": 0, "c": 1}
        assert summary["dataTypes"] == {"n": "numeric", "c": "categorical"}

    def test_duplicates_and_outliers(self, report):
        data = report.to_dict()
        assert data["duplicates"] == {"rows": [2], "count": 1, "percentage": pytest.approx(100 / 3)}
        assert data["outliers"] == {"outliers": {"n": [1]}, "totalOutliers": 1, "columns": ["n"]}

    def test_numeric_feature(self, report):
        feature = report.to_dict()["featureAnalysis"]["n"]
        assert feature["type"] == "numeric"
        assert feature["uniqueValues"] == 3
        assert feature["nullCount"] == 0
        assert feature["statistics"] == {
            "min": 1.0, "max": 9.0, "mean": 4.0, "median": 2.0, "stdDev": 3.5,
        }
        assert feature["distribution"] == {
            "type": "histogram",
            "bins": [2, 1],
            "labels": ["1.00 - 5.00", "5.00 - 9.00"],
        }

    def test_categorical_feature(self, report):
        feature = report.to_dict()["featureAnalysis"]["c"]
        assert feature["statistics"] is None
        assert feature["distribution"] == {"type": "categorical", "values": ["a"], "counts": [2]}

    def test_json_serializable(self, report):
        text = json.dumps(report.to_dict())
        assert json.loads(text)["featureAnalysis"]["n"]["distribution"]["bins"] == [2, 1]


class TestAnalysisState:
    """Tests for the AnalysisState TypedDict."""

    def test_create_minimal_state(self):
        dataset = Dataset(columns=("a",))
        state: AnalysisState = {"dataset": dataset}
        assert state["dataset"] is dataset

    def test_state_has_expected_keys(self):
        expected_keys = {
            "dataset", "analysis_config", "data_types", "summary", "missing",
            "duplicates", "outliers", "quality_score", "features", "report",
        }
        assert set(AnalysisState.__annotations__.keys()) == expected_keys

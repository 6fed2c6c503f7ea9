"""Core data models for the tabular profiling engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Union

import pandas as pd
from typing_extensions import TypedDict

from dataprofile.config import AnalysisConfig

ColumnType = Literal["numeric", "datetime", "categorical"]

NUMERIC: ColumnType = "numeric"
DATETIME: ColumnType = "datetime"
CATEGORICAL: ColumnType = "categorical"

# One row, keyed by header name. Cells are raw strings; "" means missing.
Record = Mapping[str, str]


@dataclass(frozen=True)
class Dataset:
    """Ordered, immutable sequence of records sharing one header."""

    columns: tuple[str, ...]
    records: tuple[Record, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.records)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def column_values(self, column: str) -> list[str]:
        """Return the raw cells of *column* in row order."""
        if column not in self.columns:
            raise KeyError(column)
        return [record[column] for record in self.records]

    def to_frame(self) -> pd.DataFrame:
        """Return the dataset as an ``object``-dtype DataFrame of raw strings.

        The index is the 0-based row index used throughout the report.
        """
        return pd.DataFrame(
            {col: self.column_values(col) for col in self.columns},
            columns=list(self.columns),
            dtype=object,
        )


# ---------------------------------------------------------------------------
# Report parts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MissingValues:
    total: int = 0
    percentage: float = 0.0
    by_column: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Summary:
    total_rows: int
    total_columns: int
    missing_values: MissingValues
    data_types: dict[str, ColumnType] = field(default_factory=dict)


@dataclass(frozen=True)
class DuplicateRows:
    rows: tuple[int, ...] = ()
    count: int = 0
    percentage: float = 0.0


@dataclass(frozen=True)
class OutlierSummary:
    """Flagged row indices per column; columns without outliers are absent."""

    outliers: dict[str, tuple[int, ...]] = field(default_factory=dict)
    total_outliers: int = 0

    @property
    def columns(self) -> list[str]:
        return list(self.outliers)


@dataclass(frozen=True)
class NumericStatistics:
    min: float
    max: float
    mean: float
    median: float
    std_dev: float


@dataclass(frozen=True)
class Histogram:
    bins: tuple[int, ...]
    labels: tuple[str, ...]

    kind = "histogram"


@dataclass(frozen=True)
class CategoricalFrequency:
    values: tuple[str, ...]
    counts: tuple[int, ...]

    kind = "categorical"


Distribution = Union[Histogram, CategoricalFrequency]


@dataclass(frozen=True)
class FeatureAnalysis:
    type: ColumnType
    unique_values: int
    null_count: int
    statistics: Optional[NumericStatistics]
    distribution: Distribution


@dataclass(frozen=True)
class AnalysisReport:
    """Complete profile of one dataset. Replaced, never patched."""

    summary: Summary
    quality_score: float
    duplicates: DuplicateRows
    outliers: OutlierSummary
    features: dict[str, FeatureAnalysis] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable nested dict for rendering/export layers."""
        return {
            "summary": {
                "totalRows": self.summary.total_rows,
                "totalColumns": self.summary.total_columns,
                "missingValues": {
                    "total": self.summary.missing_values.total,
                    "percentage": self.summary.missing_values.percentage,
                    "byColumn": dict(self.summary.missing_values.by_column),
                },
                "dataTypes": dict(self.summary.data_types),
            },
            "quality": self.quality_score,
            "duplicates": {
                "rows": list(self.duplicates.rows),
                "count": self.duplicates.count,
                "percentage": self.duplicates.percentage,
            },
            "outliers": {
                "outliers": {col: list(rows) for col, rows in self.outliers.outliers.items()},
                "totalOutliers": self.outliers.total_outliers,
                "columns": self.outliers.columns,
            },
            "featureAnalysis": {
                col: _feature_to_dict(feature) for col, feature in self.features.items()
            },
        }


def _feature_to_dict(feature: FeatureAnalysis) -> dict[str, Any]:
    stats = feature.statistics
    dist = feature.distribution
    if isinstance(dist, Histogram):
        distribution = {"type": dist.kind, "bins": list(dist.bins), "labels": list(dist.labels)}
    else:
        distribution = {"type": dist.kind, "values": list(dist.values), "counts": list(dist.counts)}
    return {
        "type": feature.type,
        "uniqueValues": feature.unique_values,
        "nullCount": feature.null_count,
        "statistics": None if stats is None else {
            "min": stats.min,
            "max": stats.max,
            "mean": stats.mean,
            "median": stats.median,
            "stdDev": stats.std_dev,
        },
        "distribution": distribution,
    }


class AnalysisState(TypedDict, total=False):
    """State carried through the analysis graph for a single run."""

    # Input
    dataset: Dataset
    analysis_config: AnalysisConfig

    # Summary
    data_types: dict[str, str]
    summary: Optional[Summary]

    # Quality inputs
    missing: Optional[MissingValues]
    duplicates: Optional[DuplicateRows]
    outliers: Optional[OutlierSummary]
    quality_score: float

    # Per-column analysis
    features: dict[str, FeatureAnalysis]

    # Output
    report: Optional[AnalysisReport]

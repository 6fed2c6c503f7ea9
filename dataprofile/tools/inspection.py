"""Inspection tools: cell parsing, type inference and quality metrics."""

from __future__ import annotations

import math
import re
import warnings
from typing import Iterable, Optional

import pandas as pd

from dataprofile.config import DEFAULT_CONFIG, AnalysisConfig
from dataprofile.models import (
    CATEGORICAL,
    DATETIME,
    NUMERIC,
    ColumnType,
    Dataset,
    DuplicateRows,
    MissingValues,
)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_YEAR_RE = re.compile(r"\d{4}")


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------


def is_missing(value: Optional[str]) -> bool:
    """A cell is missing when it is None or an empty string."""
    return value is None or value == ""


def parse_number(value: Optional[str]) -> Optional[float]:
    """Parse *value* as a finite real number, or return None.

    Accepts an optional sign, digits with an optional fraction and an optional
    exponent. ``nan``, ``inf``, hex literals and digit separators are rejected.
    """
    if value is None:
        return None
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def numeric_values(values: Iterable[Optional[str]]) -> list[float]:
    """Return the parseable numbers among *values*, in order."""
    parsed = (parse_number(v) for v in values)
    return [v for v in parsed if v is not None]


def is_date(value: Optional[str]) -> bool:
    """Return True if *value* holds a 4-digit year and parses as a date."""
    if is_missing(value) or not _YEAR_RE.search(value):
        return False
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        try:
            parsed = pd.to_datetime(value, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return False
    return not pd.isna(parsed)


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------


def type_sample(values: Iterable[Optional[str]], sample_size: int) -> list[str]:
    """Return the first *sample_size* non-empty values in order."""
    sample: list[str] = []
    for value in values:
        if is_missing(value):
            continue
        sample.append(value)
        if len(sample) >= sample_size:
            break
    return sample


def infer_type(values: Iterable[Optional[str]], sample_size: int = DEFAULT_CONFIG.sample_size) -> ColumnType:
    """Classify a column as numeric, datetime or categorical.

    Only the first *sample_size* non-empty values are inspected. The numeric
    check runs before the datetime check. An empty sample is categorical.
    """
    sample = type_sample(values, sample_size)
    if not sample:
        return CATEGORICAL
    if all(parse_number(v) is not None for v in sample):
        return NUMERIC
    if all(is_date(v) for v in sample):
        return DATETIME
    return CATEGORICAL


def infer_types(dataset: Dataset, config: AnalysisConfig = DEFAULT_CONFIG) -> dict[str, ColumnType]:
    """Infer the type of every column, keyed in header order."""
    return {
        col: infer_type(dataset.column_values(col), config.sample_size)
        for col in dataset.columns
    }


# ---------------------------------------------------------------------------
# Quality metrics
# ---------------------------------------------------------------------------


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def count_missing(dataset: Dataset) -> MissingValues:
    """Count missing cells overall and per column."""
    by_column = {
        col: sum(1 for v in dataset.column_values(col) if is_missing(v))
        for col in dataset.columns
    }
    total = sum(by_column.values())
    cells = dataset.row_count * dataset.column_count
    return MissingValues(total=total, percentage=_percentage(total, cells), by_column=by_column)


def find_duplicates(dataset: Dataset) -> DuplicateRows:
    """Flag every row that repeats an earlier row exactly.

    The first occurrence of each distinct row is never flagged.
    """
    if dataset.row_count == 0:
        return DuplicateRows()
    mask = dataset.to_frame().duplicated(keep="first")
    rows = tuple(int(i) for i in mask[mask].index)
    return DuplicateRows(rows=rows, count=len(rows), percentage=_percentage(len(rows), dataset.row_count))


def quality_score(
    missing_percentage: float,
    duplicate_percentage: float,
    total_outliers: int,
    row_count: int,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> float:
    """Heuristic 0-100 score penalizing missingness, duplication and outliers."""
    score = 100.0
    score -= missing_percentage * config.missing_weight
    score -= duplicate_percentage * config.duplicate_weight
    if row_count:
        score -= (total_outliers / row_count) * config.outlier_weight
    return max(0.0, min(100.0, score))

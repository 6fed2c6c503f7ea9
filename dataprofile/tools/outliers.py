"""IQR-based outlier detection over raw parseable cells."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from dataprofile.config import DEFAULT_CONFIG, AnalysisConfig
from dataprofile.models import Dataset, OutlierSummary
from dataprofile.tools.inspection import parse_number


def quantile(values: Sequence[float], q: float) -> float:
    """Linear-interpolation quantile at rank ``(n - 1) * q`` of sorted *values*."""
    if len(values) == 0:
        raise ValueError("quantile of an empty sequence")
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"q must be within [0, 1], got {q}")
    return float(np.quantile(np.asarray(values, dtype=float), q, method="linear"))


def iqr_bounds(values: Sequence[float], multiplier: float = DEFAULT_CONFIG.iqr_multiplier) -> tuple[float, float]:
    """Return ``(Q1 - k*IQR, Q3 + k*IQR)`` for *values*."""
    q1 = quantile(values, 0.25)
    q3 = quantile(values, 0.75)
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def column_outliers(cells: Sequence[str], multiplier: float = DEFAULT_CONFIG.iqr_multiplier) -> list[int]:
    """Return row indices whose parsed value lies strictly outside the IQR bounds.

    Cells that do not parse as a finite number are not considered at all.
    """
    parsed = [(index, parse_number(cell)) for index, cell in enumerate(cells)]
    numbered = [(index, value) for index, value in parsed if value is not None]
    if not numbered:
        return []

    lower_bound, upper_bound = iqr_bounds([value for _, value in numbered], multiplier)
    return [index for index, value in numbered if value < lower_bound or value > upper_bound]


def detect_outliers(dataset: Dataset, config: AnalysisConfig = DEFAULT_CONFIG) -> OutlierSummary:
    """Detect outliers in every column holding at least one parseable number.

    Runs independently of the inferred column type. Columns without outliers
    are omitted; a row flagged in two columns counts twice in the total.
    """
    outliers: dict[str, tuple[int, ...]] = {}
    for col in dataset.columns:
        indices = column_outliers(dataset.column_values(col), config.iqr_multiplier)
        if indices:
            outliers[col] = tuple(indices)

    total = sum(len(indices) for indices in outliers.values())
    return OutlierSummary(outliers=outliers, total_outliers=total)

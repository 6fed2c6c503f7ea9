"""EDA tools: per-column statistics and distributions."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np

from dataprofile.config import DEFAULT_CONFIG, AnalysisConfig
from dataprofile.models import (
    CategoricalFrequency,
    ColumnType,
    Dataset,
    Distribution,
    FeatureAnalysis,
    Histogram,
    NumericStatistics,
)
from dataprofile.tools.inspection import infer_types, is_missing, numeric_values


def numeric_statistics(values: Sequence[float]) -> Optional[NumericStatistics]:
    """Return min, max, mean, median and population std dev, or None if empty."""
    if len(values) == 0:
        return None
    arr = np.asarray(values, dtype=float)
    return NumericStatistics(
        min=float(arr.min()),
        max=float(arr.max()),
        mean=float(arr.mean()),
        median=float(np.median(arr)),
        std_dev=float(arr.std()),
    )


def build_histogram(
    values: Sequence[float],
    bins: int = DEFAULT_CONFIG.histogram_bins,
    precision: int = DEFAULT_CONFIG.label_precision,
) -> Histogram:
    """Build a fixed-bin histogram spanning ``[min, max]`` of *values*.

    The bin index is ``floor((v - min) / width)`` clamped to the last bin, so
    the maximum lands in the last bin. When every value is equal the width is
    zero and all values land in bin 0. A range too wide for a float is
    binned on values scaled into ``[-1, 1]``.
    """
    if len(values) == 0:
        raise ValueError("histogram of an empty sequence")
    if bins < 1:
        raise ValueError(f"bins must be >= 1, got {bins}")

    arr = np.asarray(values, dtype=float)
    lo = float(arr.min())
    hi = float(arr.max())
    scale = 1.0
    if not np.isfinite(hi - lo):
        scale = max(abs(lo), abs(hi))

    scaled, scaled_lo = arr / scale, lo / scale
    width = (hi / scale - scaled_lo) / bins

    if width == 0:
        indices = np.zeros(len(arr), dtype=int)
    else:
        indices = np.clip(np.floor((scaled - scaled_lo) / width).astype(int), 0, bins - 1)
    counts = np.bincount(indices, minlength=bins)

    edges = [(scaled_lo + i * width) * scale for i in range(bins + 1)]
    labels = tuple(
        f"{edges[i]:.{precision}f} - {edges[i + 1]:.{precision}f}"
        for i in range(bins)
    )
    return Histogram(bins=tuple(int(c) for c in counts), labels=labels)


def build_frequency(values: Sequence[str]) -> CategoricalFrequency:
    """Count non-empty values, keeping the order of first appearance."""
    counts: dict[str, int] = {}
    for value in values:
        if is_missing(value):
            continue
        counts[value] = counts.get(value, 0) + 1
    return CategoricalFrequency(values=tuple(counts), counts=tuple(counts.values()))


def build_distribution(values: Sequence[str], config: AnalysisConfig = DEFAULT_CONFIG) -> Distribution:
    """Histogram when any cell parses as a number, frequency table otherwise."""
    numbers = numeric_values(values)
    if numbers:
        return build_histogram(numbers, config.histogram_bins, config.label_precision)
    return build_frequency(values)


def analyze_column(
    cells: Sequence[str],
    column_type: ColumnType,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> FeatureAnalysis:
    """Profile a single column of raw cells."""
    present = [cell for cell in cells if not is_missing(cell)]
    numbers = numeric_values(present)
    return FeatureAnalysis(
        type=column_type,
        unique_values=len(set(present)),
        null_count=len(cells) - len(present),
        statistics=numeric_statistics(numbers),
        distribution=build_distribution(present, config),
    )


def analyze_features(
    dataset: Dataset,
    types: Optional[Mapping[str, ColumnType]] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> dict[str, FeatureAnalysis]:
    """Profile every column, keyed in header order.

    Args:
        dataset: Dataset to profile.
        types: Previously inferred column types; inferred here when omitted.
        config: Analysis parameters.
    """
    if types is None:
        types = infer_types(dataset, config)
    return {
        col: analyze_column(dataset.column_values(col), types[col], config)
        for col in dataset.columns
    }

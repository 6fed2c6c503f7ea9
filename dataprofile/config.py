"""Configuration for the tabular profiling engine."""

from __future__ import annotations

from dataclasses import dataclass

# Raw input ceiling (in bytes), enforced before any decoding
MAX_INPUT_BYTES = 50 * 1024 * 1024  # 50MB

# Supported input formats, keyed by lower-case file extension
SUPPORTED_FORMATS = {"csv", "tsv", "xlsx", "xls"}

DELIMITERS = {
    "csv": ",",
    "tsv": "\t",
}

# pandas.read_excel engines per spreadsheet format
EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "xls": "xlrd",
}

# Analysis parameters
TYPE_SAMPLE_SIZE = 100
IQR_MULTIPLIER = 1.5
HISTOGRAM_BINS = 20
LABEL_PRECISION = 2

# Quality score weights
MISSING_WEIGHT = 0.5
DUPLICATE_WEIGHT = 0.3
OUTLIER_WEIGHT = 10.0


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable parameters for one analysis run."""

    sample_size: int = TYPE_SAMPLE_SIZE
    iqr_multiplier: float = IQR_MULTIPLIER
    histogram_bins: int = HISTOGRAM_BINS
    label_precision: int = LABEL_PRECISION
    missing_weight: float = MISSING_WEIGHT
    duplicate_weight: float = DUPLICATE_WEIGHT
    outlier_weight: float = OUTLIER_WEIGHT
    max_input_bytes: int = MAX_INPUT_BYTES

    def __post_init__(self) -> None:
        if self.sample_size < 1:
            raise ValueError(f"sample_size must be >= 1, got {self.sample_size}")
        if self.histogram_bins < 1:
            raise ValueError(f"histogram_bins must be >= 1, got {self.histogram_bins}")
        if self.iqr_multiplier < 0:
            raise ValueError(f"iqr_multiplier must be >= 0, got {self.iqr_multiplier}")
        if self.label_precision < 0:
            raise ValueError(f"label_precision must be >= 0, got {self.label_precision}")
        if self.max_input_bytes < 0:
            raise ValueError(f"max_input_bytes must be >= 0, got {self.max_input_bytes}")


DEFAULT_CONFIG = AnalysisConfig()

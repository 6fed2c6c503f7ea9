"""LangGraph analysis orchestrator: graph nodes and workflow builder.

Each node accepts an AnalysisState dict and returns the keys it updates. The
graph runs in a fixed order::

    summarize -> detect_issues -> score_quality -> profile_features -> assemble_report

Nodes only read the input Dataset and earlier node outputs, so every
:func:`analyze` call is independent of any other.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

from dataprofile.config import DEFAULT_CONFIG, AnalysisConfig
from dataprofile.exceptions import AnalysisError, EmptyDatasetError
from dataprofile.loader import load_bytes, load_file
from dataprofile.models import AnalysisReport, AnalysisState, Dataset, Summary
from dataprofile.tools.eda import analyze_features
from dataprofile.tools.inspection import count_missing, find_duplicates, infer_types, quality_score
from dataprofile.tools.outliers import detect_outliers

logger = logging.getLogger(__name__)

# Node names must not collide with AnalysisState keys
PHASE_ORDER = ["summarize", "detect_issues", "score_quality", "profile_features", "assemble_report"]


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def summarize_node(state: AnalysisState) -> dict[str, Any]:
    """Count rows, columns and missing cells and infer column types."""
    dataset = state["dataset"]
    types = infer_types(dataset, state["analysis_config"])
    missing = count_missing(dataset)
    summary = Summary(
        total_rows=dataset.row_count,
        total_columns=dataset.column_count,
        missing_values=missing,
        data_types=types,
    )
    logger.debug(
        "summarize: %d rows x %d columns, %d missing (%.1f%%)",
        summary.total_rows, summary.total_columns, missing.total, missing.percentage,
    )
    return {"data_types": types, "missing": missing, "summary": summary}


def detect_issues_node(state: AnalysisState) -> dict[str, Any]:
    """Detect duplicate rows and per-column outliers."""
    dataset = state["dataset"]
    duplicates = find_duplicates(dataset)
    outliers = detect_outliers(dataset, state["analysis_config"])
    logger.debug(
        "detect_issues: %d duplicate rows, %d outliers in %d columns",
        duplicates.count, outliers.total_outliers, len(outliers.columns),
    )
    return {"duplicates": duplicates, "outliers": outliers}


def score_quality_node(state: AnalysisState) -> dict[str, Any]:
    """Combine the quality inputs into a single bounded score."""
    score = quality_score(
        state["missing"].percentage,
        state["duplicates"].percentage,
        state["outliers"].total_outliers,
        state["dataset"].row_count,
        state["analysis_config"],
    )
    logger.debug("score_quality: %.2f", score)
    return {"quality_score": score}


def profile_features_node(state: AnalysisState) -> dict[str, Any]:
    """Profile every column using the types inferred by the summary node."""
    features = analyze_features(state["dataset"], state["data_types"], state["analysis_config"])
    return {"features": features}


def assemble_report_node(state: AnalysisState) -> dict[str, Any]:
    """Merge node outputs into the final report."""
    report = AnalysisReport(
        summary=state["summary"],
        quality_score=state["quality_score"],
        duplicates=state["duplicates"],
        outliers=state["outliers"],
        features=state["features"],
    )
    return {"report": report}


# ---------------------------------------------------------------------------
# Graph builder
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def build_graph() -> Any:
    """Build and compile the analysis workflow.

    Returns:
        A compiled LangGraph ``StateGraph`` over :class:`AnalysisState`.
    """
    from langgraph.graph import END, START, StateGraph

    graph = StateGraph(AnalysisState)

    graph.add_node("summarize", summarize_node)
    graph.add_node("detect_issues", detect_issues_node)
    graph.add_node("score_quality", score_quality_node)
    graph.add_node("profile_features", profile_features_node)
    graph.add_node("assemble_report", assemble_report_node)

    graph.add_edge(START, PHASE_ORDER[0])
    for current, following in zip(PHASE_ORDER, PHASE_ORDER[1:]):
        graph.add_edge(current, following)
    graph.add_edge(PHASE_ORDER[-1], END)

    return graph.compile()


def analyze(dataset: Dataset, config: Optional[AnalysisConfig] = None) -> AnalysisReport:
    """Run the full analysis over *dataset* and return a fresh report.

    Raises:
        EmptyDatasetError: If the dataset has no data rows.
    """
    if dataset.row_count == 0:
        raise EmptyDatasetError("Dataset has a header but no data rows")

    config = config or DEFAULT_CONFIG
    logger.info("Analyzing %d rows x %d columns", dataset.row_count, dataset.column_count)
    result = build_graph().invoke({"dataset": dataset, "analysis_config": config})
    report: AnalysisReport = result["report"]
    logger.info("Analysis complete: quality score %.1f", report.quality_score)
    return report


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class AnalysisSession:
    """Holds the currently loaded Dataset and its most recent report.

    A failed load leaves the previous dataset in place. Re-analysis replaces
    the report wholesale; :meth:`reset` discards both.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.dataset: Optional[Dataset] = None
        self.report: Optional[AnalysisReport] = None

    def load_bytes(self, raw: bytes, filename: str, strict: bool = False) -> Dataset:
        dataset = load_bytes(raw, filename, config=self.config, strict=strict)
        self.dataset, self.report = dataset, None
        return dataset

    def load_file(self, file_path: Union[str, Path], strict: bool = False) -> Dataset:
        dataset = load_file(file_path, config=self.config, strict=strict)
        self.dataset, self.report = dataset, None
        return dataset

    def analyze(self) -> AnalysisReport:
        if self.dataset is None:
            raise AnalysisError("No dataset loaded")
        self.report = analyze(self.dataset, self.config)
        return self.report

    def reset(self) -> None:
        self.dataset = None
        self.report = None

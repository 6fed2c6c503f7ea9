"""Report generator that serializes an AnalysisReport to Markdown or JSON."""

from __future__ import annotations

import json
import os
from typing import Optional

from dataprofile.models import AnalysisReport, FeatureAnalysis, Histogram


def _one_line(text: str) -> str:
    return " ".join(str(text).splitlines())


def _table_cell(text: str) -> str:
    """Escape text for a Markdown table cell."""
    return _one_line(text).replace("|", "\\|")


def _format_overview(report: AnalysisReport, source_name: Optional[str]) -> list[str]:
    summary = report.summary
    missing = summary.missing_values
    lines = ["## Dataset Overview\n"]
    if source_name:
        lines.append(f"- **Source**: {source_name}")
    lines.append(f"- **Total rows**: {summary.total_rows:,}")
    lines.append(f"- **Total columns**: {summary.total_columns}")
    lines.append(f"- **Missing values**: {missing.total} ({missing.percentage:.1f}%)")
    lines.append(f"- **Data quality score**: {round(report.quality_score)}%\n")

    lines.append("| Column | Type | Missing |")
    lines.append("|--------|------|---------|")
    for col, col_type in summary.data_types.items():
        lines.append(f"| {_table_cell(col)} | {col_type} | {missing.by_column.get(col, 0)} |")
    lines.append("")
    return lines


def _format_quality(report: AnalysisReport) -> list[str]:
    duplicates = report.duplicates
    outliers = report.outliers
    lines = ["## Quality Indicators\n"]
    lines.append("### Duplicate Rows\n")
    lines.append(f"- **{duplicates.count}** duplicate rows ({duplicates.percentage:.1f}%)")
    if duplicates.rows:
        lines.append(f"- Row indices: {', '.join(str(i) for i in duplicates.rows)}")
    lines.append("")

    lines.append("### Outliers\n")
    lines.append(
        f"- **{outliers.total_outliers}** outliers in {len(outliers.columns)} columns\n"
    )
    if outliers.outliers:
        lines.append("| Column | Outlier Count |")
        lines.append("|--------|---------------|")
        for col, indices in outliers.outliers.items():
            lines.append(f"| {_table_cell(col)} | {len(indices)} |")
        lines.append("")
    return lines


def _format_feature(col: str, feature: FeatureAnalysis) -> list[str]:
    """Format one column's analysis as a Markdown section."""
    lines = [f"### {_one_line(col)}\n"]
    lines.append(f"- **Data type**: {feature.type}")
    lines.append(f"- **Unique values**: {feature.unique_values}")
    lines.append(f"- **Missing values**: {feature.null_count}")

    stats = feature.statistics
    if stats is not None:
        lines.append(
            f"- **Statistics**: min {stats.min:.2f}, max {stats.max:.2f}, "
            f"mean {stats.mean:.2f}, median {stats.median:.2f}, std dev {stats.std_dev:.2f}"
        )
    lines.append("")

    dist = feature.distribution
    if isinstance(dist, Histogram):
        lines.append("| Range | Frequency |")
        lines.append("|-------|-----------|")
        for label, count in zip(dist.labels, dist.bins):
            lines.append(f"| {label} | {count} |")
    else:
        lines.append("| Value | Count |")
        lines.append("|-------|-------|")
        for value, count in zip(dist.values, dist.counts):
            lines.append(f"| {_table_cell(value)} | {count} |")
    lines.append("")
    return lines


def render_markdown(report: AnalysisReport, source_name: Optional[str] = None) -> str:
    """Render *report* as a Markdown document."""
    sections: list[str] = ["# Data Analysis Report\n"]
    sections.extend(_format_overview(report, source_name))
    sections.extend(_format_quality(report))

    sections.append("## Feature Analysis\n")
    for col, feature in report.features.items():
        sections.extend(_format_feature(col, feature))

    return "\n".join(sections)


def generate_report(
    report: AnalysisReport,
    output_dir: str,
    source_name: Optional[str] = None,
) -> str:
    """Generate a Markdown report and save to output_dir/report.md.

    Args:
        report: The analysis report to export.
        output_dir: Directory to save the report.
        source_name: Optional input file name shown in the overview.

    Returns:
        The path to the saved report file.
    """
    os.makedirs(output_dir, exist_ok=True)
    report_path = os.path.join(output_dir, "report.md")
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(render_markdown(report, source_name))
    return report_path


def write_json_report(report: AnalysisReport, output_dir: str) -> str:
    """Write ``report.to_dict()`` to output_dir/report.json and return the path."""
    os.makedirs(output_dir, exist_ok=True)
    report_path = os.path.join(output_dir, "report.json")
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2)
    return report_path

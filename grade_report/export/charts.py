from __future__ import annotations

import io
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend, charts are only written to files
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import PercentFormatter

from ..models.report import Report

"""Report charts (matplotlib).

- Grade Distribution: histogram of every graded row
- Boxplot by Group: one box per group, in group-summary order
- Group Rates: Passing / Merit / Distinction rate per group, taken from the
  group summary records so the chart always agrees with the tables
"""

__all__ = [
    "grade_histogram",
    "group_boxplot",
    "group_rates_chart",
    "build_charts",
    "figure_to_png",
    "save_charts",
]

PALETTE = ["#0066cc", "#2ecc71", "#f39c12", "#e74c3c", "#9b59b6", "#1abc9c"]


def _style(ax, title: str) -> None:
    ax.set_title(title, fontsize=12, fontweight="bold", pad=10)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def grade_histogram(report: Report) -> Figure:
    fig, ax = plt.subplots(figsize=(8, 3.8))
    ax.hist(report.grades(), bins="auto", color=PALETTE[0], edgecolor="white", rwidth=0.98)
    ax.set_xlabel("Grade")
    ax.set_ylabel("Count")
    _style(ax, "Grade Distribution")
    fig.tight_layout()
    return fig


def group_boxplot(report: Report) -> Figure:
    grouped = report.grades_by_group()
    labels = list(grouped)
    fig, ax = plt.subplots(figsize=(8, 3.8))
    ax.boxplot([grouped[g] for g in labels])
    ax.set_xticks(range(1, len(labels) + 1), labels)
    ax.set_ylabel("Grade")
    ax.tick_params(axis="x", rotation=30 if len(labels) > 6 else 0)
    _style(ax, "Boxplot by Group")
    fig.tight_layout()
    return fig


def group_rates_chart(report: Report) -> Figure:
    labels = [g.group for g in report.groups]
    series = [
        ("Passing Rate (%)", [g.stats.passing_rate for g in report.groups]),
        ("Merit Rate (%)", [g.stats.merit_rate for g in report.groups]),
        ("Distinction Rate (%)", [g.stats.distinction_rate for g in report.groups]),
    ]
    x = np.arange(len(labels))
    width = 0.8 / len(series)
    fig, ax = plt.subplots(figsize=(8, 4.2))
    for i, (name, values) in enumerate(series):
        ax.bar(x + (i - 1) * width, values, width, label=name, color=PALETTE[i])
    ax.set_xticks(x, labels)
    ax.set_ylim(0, 105)
    ax.yaxis.set_major_formatter(PercentFormatter(xmax=100, decimals=0))
    ax.legend(fontsize=8, frameon=False)
    ax.tick_params(axis="x", rotation=30 if len(labels) > 6 else 0)
    _style(ax, "Passing / Merit / Distinction Rates by Group")
    fig.tight_layout()
    return fig


def build_charts(report: Report) -> dict[str, Figure]:
    """All report charts keyed by file-name suffix."""
    return {
        "distribution": grade_histogram(report),
        "boxplot": group_boxplot(report),
        "rates": group_rates_chart(report),
    }


def figure_to_png(fig: Figure, dpi: int = 150) -> bytes:
    """Render a figure to PNG bytes and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()


def save_charts(report: Report, output_dir: Path, stem: str) -> dict[str, Path]:
    """Write every chart as <stem>_<name>.png; returns name -> path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: dict[str, Path] = {}
    for name, fig in build_charts(report).items():
        path = output_dir / f"{stem}_{name}.png"
        path.write_bytes(figure_to_png(fig))
        paths[name] = path
    return paths

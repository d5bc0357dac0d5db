#!/usr/bin/env python3
"""
plot_utils.py

Summaries and seaborn boxplots for the batch_results CSV written by
batch_run.py.

Typical workflow:

1) Run batch experiments:
       python batch_run.py

2) Plot results:
   - From Python:
        from plot_utils import plot_boxplots_from_csv

        plot_boxplots_from_csv(
            csv_path="outputs_batch/batch_results.csv",
            group_by=["routing.algorithm", "n_destinations"],
            metrics=["routing.runtime", "reference.gap"],
            output_dir="outputs_batch/plots",
            show=False,
        )

   - Or from the command line (using defaults at the bottom):
        python plot_utils.py
"""

import logging
from pathlib import Path
from typing import Sequence, Optional, Union, Dict

import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

import seaborn as sns

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
GROUP_LABEL_COL = "__group_label__"


def load_results(
    csv_path: PathLike,
    group_by: Sequence[str],
    metrics: Sequence[str],
) -> pd.DataFrame:
    """
    Read the batch CSV, check the requested columns exist and add a single
    group label column (values of group_by joined with " | ").
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)

    for col in list(group_by) + list(metrics):
        if col not in df.columns:
            raise ValueError(
                f"column '{col}' not found in CSV. "
                f"Available columns include: {list(df.columns)[:20]} ..."
            )

    df[GROUP_LABEL_COL] = df[list(group_by)].astype(str).agg(" | ".join, axis=1)
    return df


def summarize(df: pd.DataFrame, metric: str) -> pd.DataFrame:
    """Count, median and quartiles of one metric per group label."""
    sub = df[[GROUP_LABEL_COL, metric]].dropna()
    return (
        sub.groupby(GROUP_LABEL_COL)[metric]
        .agg(
            n="count",
            median="median",
            q1=lambda s: s.quantile(0.25),
            q3=lambda s: s.quantile(0.75),
        )
        .sort_index()
    )


def plot_boxplots_from_csv(
    csv_path: PathLike,
    group_by: Sequence[str],
    metrics: Sequence[str],
    output_dir: Optional[PathLike] = None,
    show: bool = False,
    figsize_per_group: float = 1.5,
    x_axis_label: Optional[str] = None,
    seaborn_style: str = "whitegrid",
    palette_name: str = "colorblind",
    title_template: Optional[str] = None,
    y_axis_labels: Optional[Dict[str, str]] = None,
    log_scale_metrics: Sequence[str] = ("routing.runtime",),
) -> Dict[str, pd.DataFrame]:
    """
    Make one seaborn boxplot per metric, grouped by the given columns.

    Parameters
    ----------
    csv_path : str or Path
        Path to the CSV file (e.g. 'outputs_batch/batch_results.csv').
    group_by : list[str]
        Column(s) to group by, e.g. ['routing.algorithm', 'n_destinations'].
        Multiple columns are joined into one label per row.
    metrics : list[str]
        Numeric columns to plot, e.g. ['routing.runtime', 'reference.gap'].
    output_dir : str or Path or None
        If given, each plot is saved there as PDF.
    show : bool
        Show plots interactively instead of closing them.
    log_scale_metrics : list[str]
        Metrics drawn with a log y-axis (runtimes span orders of magnitude
        between "closest" and "naive").

    Returns
    -------
    dict
        metric -> summary table (see summarize()), for every metric
        that had data.
    """
    TITLE_FONTSIZE = 18
    AXIS_LABEL_FONTSIZE = 16
    LEGEND_FONTSIZE = 11
    MAX_LEGEND_COLS = 10

    group_by = list(group_by)
    df = load_results(csv_path, group_by, metrics)

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    categories = sorted(df[GROUP_LABEL_COL].unique())
    x_label_text = x_axis_label if x_axis_label is not None else " | ".join(group_by)

    sns.set_style(seaborn_style)
    sns.set_context("paper", font_scale=1.2)

    # fixed category order -> stable colors across metrics
    palette = sns.color_palette(palette_name, n_colors=len(categories))
    palette_mapping = dict(zip(categories, palette))

    tables: Dict[str, pd.DataFrame] = {}
    for metric in metrics:
        sub = df[[GROUP_LABEL_COL, metric]].dropna()
        if sub.empty:
            logger.warning("No data for metric '%s' after dropping NaNs. Skipping.", metric)
            continue

        stats = summarize(df, metric)
        tables[metric] = stats
        logger.info("\n[STATS] %s\n%s", metric, stats.to_string(float_format=lambda x: f"{x:.4g}"))

        present = [c for c in categories if c in set(sub[GROUP_LABEL_COL])]
        width = max(6.0, figsize_per_group * max(1, len(present)))
        fig, ax = plt.subplots(figsize=(width, 6))

        sns.boxplot(
            data=sub,
            x=GROUP_LABEL_COL,
            y=metric,
            hue=GROUP_LABEL_COL,
            order=present,
            palette=palette_mapping,
            dodge=False,
            ax=ax,
        )

        if title_template is None:
            title_text = f"{metric} by {', '.join(group_by)}"
        else:
            title_text = title_template.format(metric=metric)

        ax.set_title(title_text, fontsize=TITLE_FONTSIZE, pad=28)
        ax.set_xlabel(x_label_text, fontsize=AXIS_LABEL_FONTSIZE)
        ax.set_ylabel(
            y_axis_labels.get(metric, metric) if y_axis_labels else metric,
            fontsize=AXIS_LABEL_FONTSIZE,
        )
        plt.setp(ax.get_xticklabels(), rotation=45, ha="right")

        if metric in log_scale_metrics:
            ax.set_yscale("log")

        handles = [mpatches.Patch(color=palette_mapping[c], label=c) for c in present]
        ax.legend(
            handles=handles,
            title="",
            loc="upper center",
            bbox_to_anchor=(0.5, 1.08),
            ncol=min(len(handles), MAX_LEGEND_COLS),
            frameon=False,
            fontsize=LEGEND_FONTSIZE,
        )

        fig.tight_layout(rect=[0, 0, 1, 0.99])

        if output_dir is not None:
            safe_metric = metric.replace(".", "_").replace(" ", "_")
            safe_groups = "_".join(g.replace(".", "_") for g in group_by)
            fname = output_dir / f"box_{safe_metric}_by_{safe_groups}.pdf"
            fig.savefig(fname, dpi=150, bbox_inches="tight")
            logger.info("Saved boxplot for '%s' to %s", metric, fname)

        if show:
            plt.show()
        else:
            plt.close(fig)

    return tables


# ---------------------------------------------------------------------
# Default behavior when running this file directly
# ---------------------------------------------------------------------
DEFAULT_CSV = "outputs_batch/batch_results.csv"
DEFAULT_GROUP_BY = ["routing.algorithm", "n_destinations"]
DEFAULT_METRICS = ["routing.runtime", "routing.length", "reference.gap"]
DEFAULT_OUTPUT_DIR = "outputs_batch/plots"


def _run_with_defaults() -> None:
    from logging_config import setup_logging

    setup_logging()
    plot_boxplots_from_csv(
        csv_path=DEFAULT_CSV,
        group_by=DEFAULT_GROUP_BY,
        metrics=DEFAULT_METRICS,
        output_dir=DEFAULT_OUTPUT_DIR,
        x_axis_label="algorithm | destinations",
        title_template="{metric}: naive vs closest",
        y_axis_labels={
            "routing.runtime": "Runtime (s)",
            "routing.length": "Route length (px)",
            "reference.gap": "Gap to exhaustive optimum",
        },
    )


if __name__ == "__main__":
    _run_with_defaults()

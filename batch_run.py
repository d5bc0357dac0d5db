#!/usr/bin/env python3
"""
Batch experiment runner.

This script is meant for *offline experiments* where you want to:

- Sweep over many scene / algorithm configurations.
- Solve one scene per configuration.
- Collect all metrics into a single CSV file for analysis.

High-level behavior
-------------------

1. Build the parameter grid from batch_config.PARAM_GRID.
2. For each combination in the grid:
   - Build Config + Scene.
   - Solve it (same engine call as main.py, but without run folders).
   - Optionally solve it exactly as well, for the optimality gap.
3. Use multiprocessing to parallelize runs across CPU cores.
4. Flatten the summary dict + parameters into a single row.
5. Append rows to `outputs_batch/batch_results.csv`.

If `outputs_batch/batch_results.csv` already exists:
- The script reads its header.
- Infers the column order from that header.
- Appends new experiment rows using the same schema.

Usage
-----

From the repo root:

    python batch_run.py

Then plot the resulting CSV with plot_utils.py.
"""

import csv
import itertools
import logging
import multiprocessing as mp
from pathlib import Path
from typing import Dict, Any, List, Optional

from batch_config import CPU_COUNT, PARAM_GRID, REFERENCE_MAX_DESTINATIONS
from config import Config
from engine import run, solve
from geometry import route_length
from logging_config import setup_logging
from scene import Scene

logger = logging.getLogger(__name__)


def iter_param_combinations(grid: Dict[str, List[Any]]):
    """Yield dicts for each combination in the parameter grid."""
    keys = list(grid.keys())
    value_lists = [grid[k] for k in keys]
    for combo in itertools.product(*value_lists):
        yield dict(zip(keys, combo))


def flatten_dict(
    d: Dict[str, Any],
    parent_key: str = "",
    sep: str = ".",
) -> Dict[str, Any]:
    """
    Turn nested dicts into a flat dict with dotted keys:

        {"a": {"b": 1}, "c": 2}  ->  {"a.b": 1, "c": 2}
    """
    items: Dict[str, Any] = {}
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k
        if isinstance(v, dict):
            items.update(flatten_dict(v, new_key, sep=sep))
        else:
            items[new_key] = v
    return items


# ---------------------------------------------------------------------
# One experiment
# ---------------------------------------------------------------------

def run_single_experiment(
    purpose: str,                # meta label, not used by the engine, just for CSV
    width: int,
    height: int,
    n_destinations: int,
    algorithm: str,
    seed: int,
    animated: bool = False,
) -> Dict[str, Any]:
    """
    Solve ONE scene with the given parameters and return a flat dict of metrics.

    This is main(), but:
      - no run_dir, no JSON files
      - returns metrics instead of writing files
    """
    cfg = Config(
        width=width,
        height=height,
        n_destinations=n_destinations,
        seed=seed,
        algorithm=algorithm,
        animated=animated,
    )
    scene = Scene.from_config(cfg)

    result = run(cfg.algorithm, scene.points, animated=cfg.animated)

    summary: Dict[str, Any] = {
        "routing": {
            "algorithm": result.algorithm,
            "length": result.length,
            "runtime": result.runtime,
            "frames": result.frames,
            "route": " ".join(str(i) for i in result.route),
        },
    }

    # exact reference for the same scene, if affordable; the columns are
    # always present so every row shares the header of the first one
    summary["reference"] = {"naive_length": None, "gap": None}
    if n_destinations <= REFERENCE_MAX_DESTINATIONS:
        if algorithm == "naive":
            best = result.length
        else:
            best_route = solve("naive", scene.points)
            best = route_length(scene.origin, scene.destinations, best_route)
        summary["reference"] = {
            "naive_length": best,
            "gap": (result.length / best - 1.0) if best > 0 else 0.0,
        }

    # 'purpose' comes from params and is merged outside.
    return flatten_dict(summary)


# ---------------------------------------------------------------------
# Worker for multiprocessing
# ---------------------------------------------------------------------

def run_one(params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Worker function for each process.

    - Calls run_single_experiment(**params).
    - Returns merged {params..., flat_summary...} dict.
    - If the run fails, returns None and logs the error.
    """
    params = dict(params)

    try:
        metrics = run_single_experiment(**params)
    except Exception:
        logger.exception("run_single_experiment failed for params=%s", params)
        # returning None tells the caller to skip this run
        return None

    if not isinstance(metrics, dict):
        raise TypeError("run_single_experiment must return a dict")

    merged: Dict[str, Any] = {**params, **metrics}
    return merged


# ---------------------------------------------------------------------
# Batch driver: incremental CSV writing in outputs_batch/
# ---------------------------------------------------------------------

def main_batch(out_dir: Path = Path("outputs_batch")) -> Optional[Path]:
    combos = list(iter_param_combinations(PARAM_GRID))
    total = len(combos)
    if total == 0:
        logger.warning("No parameter combinations to run. Check PARAM_GRID.")
        return None

    logger.info("Total experiments to run: %d", total)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "batch_results.csv"

    # If file already exists, read its header to get fieldnames
    fieldnames: Optional[List[str]] = None
    if out_path.exists():
        logger.info("Appending to existing CSV: %s", out_path)
        with out_path.open("r", newline="") as f:
            reader = csv.reader(f)
            existing_header = next(reader, [])
        fieldnames = existing_header or None

    # No header yet: run the first job synchronously to infer the columns.
    start_index = 0
    if fieldnames is None:
        first_row = None
        while first_row is None and start_index < total:
            first_row = run_one(combos[start_index])
            start_index += 1
        if first_row is None:
            logger.error("Every experiment failed; nothing written.")
            return None

        fieldnames = sorted(first_row.keys())
        # Ensure 'purpose' is the first column if present
        if "purpose" in fieldnames:
            fieldnames.remove("purpose")
            fieldnames = ["purpose"] + fieldnames

        with out_path.open("w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerow(first_row)
        logger.info("Created new CSV and wrote first row to %s", out_path)
    else:
        logger.info("Using existing header with %d columns.", len(fieldnames))

    remaining = combos[start_index:]
    if not remaining:
        logger.info("No remaining experiments to run; done.")
        return out_path

    n_procs = CPU_COUNT if CPU_COUNT is not None else mp.cpu_count()
    logger.info("Running remaining %d experiments using %d processes ...", len(remaining), n_procs)

    done = start_index
    with out_path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        with mp.Pool(processes=n_procs) as pool:
            for row in pool.imap_unordered(run_one, remaining):
                done += 1
                if row is not None:
                    writer.writerow(row)
                    f.flush()
                if done % 10 == 0 or done == total:
                    logger.info("Completed %d/%d experiments", done, total)

    logger.info("All done. Results in %s", out_path)
    return out_path


if __name__ == "__main__":
    setup_logging()
    main_batch()

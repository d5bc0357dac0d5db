# io_utils.py
from dataclasses import asdict
from pathlib import Path
from datetime import datetime
import json
from typing import Any
from config import Config
import uuid


def make_run_dir(cfg: Config, base: str = "outputs") -> Path:
    """
    Create (if needed) and return a unique directory for this run.

    Parameters
    ----------
    cfg : Config
        The configuration object for this run (canvas, destination count,
        algorithm, seed, ...).
    base : str, optional
        Base directory under which the run folder will be created, by default "outputs".

    Folder naming
    -------------
    The folder name encodes:
      - algorithm name
      - canvas size (width x height)
      - number of destinations
      - random seed
      - a timestamp + short UUID suffix to guarantee uniqueness

    Example:
        outputs/run_naive_W800xH600_Dst8_seed0_20251216-213012-ab12cd34/

    Returns
    -------
    Path
        The full path to the newly created run directory.
    """
    base_path = Path(base)
    base_path.mkdir(parents=True, exist_ok=True)

    parts = [
        cfg.algorithm,
        f"W{cfg.width}xH{cfg.height}",
        f"Dst{cfg.n_destinations}",
        f"seed{cfg.seed}",
    ]
    base_name = "run_" + "_".join(parts)

    # repeated runs with the same config must not overwrite each other
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    uid = uuid.uuid4().hex[:8]
    suffix = f"{ts}-{uid}"

    run_dir = base_path / f"{base_name}_{suffix}"

    # exist_ok=False => raise if directory somehow already exists
    run_dir.mkdir(exist_ok=False)
    return run_dir


def save_config(cfg: Config, run_dir: Path, filename: str = "config.json") -> None:
    """
    Serialize the Config object for this run into JSON, so the scene
    (seeded) and the solver settings can be reproduced.
    """
    data: dict[str, Any] = asdict(cfg)
    out_path = run_dir / filename
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def save_summary(summary: dict[str, Any], run_dir: Path, filename: str = "summary.json") -> None:
    """
    Save the summary of a run (scene, route, length, runtime, frames)
    as a JSON file.
    """
    out_path = run_dir / filename
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)

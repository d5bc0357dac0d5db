# batch_config.py
from __future__ import annotations

from typing import Dict, List, Any

# ---------------------------------------------------------------------------
# CPU usage for batch_run.py
# ---------------------------------------------------------------------------
# If CPU_COUNT is None, batch_run.py will use mp.cpu_count().
# Otherwise, it will use exactly this many worker processes.
#
# Example:
#   CPU_COUNT = 32       # use 32 processes
#   CPU_COUNT = None     # auto-detect from the machine
CPU_COUNT: int | None = None

# ---------------------------------------------------------------------------
# Exhaustive reference
# ---------------------------------------------------------------------------
# Every run is also solved with "naive" (exact) when it has at most this many
# destinations, so the CSV carries the optimality gap of "closest".
# Larger scenes get empty reference columns; set to -1 to skip them all.
REFERENCE_MAX_DESTINATIONS: int = 9

# ---------------------------------------------------------------------------
# Parameter grid for batch_run.py
# ---------------------------------------------------------------------------
# PARAM_GRID will run all permutations (Cartesian product) of the values.
#
# Example:
#   "n_destinations": [4, 6]
#   "algorithm": ["naive", "closest"]
# will generate 4 settings per seed.
#
# Be careful: experiment count grows exponentially in the number of values
# per key, i.e.  prod(len(v) for v in PARAM_GRID.values()), and "naive"
# itself is n! in the number of destinations.
PARAM_GRID: Dict[str, List[Any]] = {
    # --- meta ---
    "purpose": ["algorithm_comparison"],  # free-text label for this batch

    # --- scene parameters ---
    "width": [800],                         # canvas width in pixels
    "height": [600],                        # canvas height in pixels
    "n_destinations": [3, 4, 5, 6, 7, 8],   # destinations per scene (origin not counted)

    # --- algorithms ---
    "algorithm": ["naive", "closest"],
    "animated": [False],                    # True also counts the frames a UI would draw

    # --- randomness ---
    "seed": [i for i in range(10)],  # RNG seeds to generate different random scenes for each setting
}


# -----------------------------------------------------------------------
# Algorithm details, no modification is needed below
# -----------------------------------------------------------------------

    # Route algorithms (see tours/):
    #
    #   "naive"   - Exhaustive search over all n! visiting orders; exact,
    #               ties go to the first ordering in lexicographic order.
    #               Impractical past ~10 destinations.
    #
    #   "closest" - Greedy nearest neighbour from the origin; O(n^2),
    #               ties go to the lowest destination index. Not optimal.

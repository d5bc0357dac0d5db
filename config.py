from dataclasses import dataclass
from typing import Optional

@dataclass
class Config:
    # canvas size in pixels; origin sits at the centre
    width: int = 800
    height: int = 600

    n_destinations: int = 8
    seed: int = 0

    # "naive" (exhaustive) or "closest" (greedy nearest neighbour)
    algorithm: str = "naive"

    # animated mode: stream intermediate frames instead of only the final route
    animated: bool = False
    frame_every: Optional[int] = None   # naive only: extra frame every k candidates
    frame_delay: float = 0.0            # seconds awaited between frames in animate()

    # worker processes for the exhaustive solver (None / 1 = sequential)
    workers: Optional[int] = None

    # exhaustive search logs a warning above this many destinations (n!)
    naive_warn_threshold: int = 10

    # logging
    log_events: bool = True
    log_file: Optional[str] = None

# tours/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Tuple

from geometry import Point


@dataclass(frozen=True)
class Frame:
    """
    One emission of a search.

    route: indices into [origin, d1, ..., dn] (origin excluded).
           Intermediate routes may be partial; the final one is a
           complete permutation of 1..n.
    final: True only on the last frame of a search.
    step:  0-based position of this frame in the stream.
    """
    route: Tuple[int, ...]
    final: bool = False
    step: int = 0


class TourAlgorithm(Protocol):
    """
    Interface for tour / TSP solvers.

    Given:
      - origin
      - list of destinations (the point set without its origin)

    Yield:
      - intermediate frames if animate=True
      - None between frames when animate=True and a long stretch of
        work produced nothing to draw (a cancellation point, not a frame)
      - exactly one final frame, always last

    warn_threshold: per-call override of the size above which a slow
    search logs a warning; solvers without such a limit ignore it.

    Implementations keep no state between calls; everything a search
    needs lives inside the generator.
    """

    name: str

    def search(
        self,
        origin: Point,
        destinations: List[Point],
        animate: bool = False,
        frame_every: Optional[int] = None,
        warn_threshold: Optional[int] = None,
    ) -> Iterator[Optional[Frame]]:
        ...

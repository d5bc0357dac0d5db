# tours/nearest_neighbor.py
from __future__ import annotations

import logging
from math import inf
from typing import Iterator, List, Optional

from geometry import Point, distance_table
from .base import Frame, TourAlgorithm

logger = logging.getLogger(__name__)


class NearestNeighborTour(TourAlgorithm):
    """
    Simple TSP heuristic:

      - Start at the origin.
      - Repeatedly go to the nearest unvisited destination (Euclidean),
        ties going to the lowest index.
      - Stop once every destination is visited.

    Not guaranteed to be minimal. O(n^2) time.

    Animated runs yield one frame per selection; the frame for the last
    selection is the final one.
    """

    name = "closest"

    def search(
        self,
        origin: Point,
        destinations: List[Point],
        animate: bool = False,
        frame_every: Optional[int] = None,
        warn_threshold: Optional[int] = None,
    ) -> Iterator[Optional[Frame]]:
        n = len(destinations)
        if n == 0:
            yield Frame((), final=True, step=0)
            return

        d_start, d_dd = distance_table(origin, destinations)
        from_current: List[float] = d_start.tolist()
        d_rows: List[List[float]] = d_dd.tolist()

        visited = [False] * n
        order: List[int] = []

        for step in range(n):
            best_i: Optional[int] = None
            best_cost = inf

            # ascending scan + strict '<' keeps the lowest index on ties
            for i in range(n):
                if not visited[i] and from_current[i] < best_cost:
                    best_i = i
                    best_cost = from_current[i]

            if best_i is None:
                # only non-finite distances left (NaN / inf coordinates)
                best_i = visited.index(False)

            visited[best_i] = True
            order.append(best_i + 1)
            from_current = d_rows[best_i]

            final = step == n - 1
            if final:
                logger.debug("closest: route %s", order)
            if animate or final:
                yield Frame(tuple(order), final=final, step=step if animate else 0)


ALGORITHM = NearestNeighborTour()

# tours/exact_bruteforce.py
from __future__ import annotations

import logging
import multiprocessing as mp
from math import inf
from itertools import permutations
from typing import Iterator, List, Optional, Sequence, Tuple

from geometry import Point, Route, distance_table
from .base import Frame, TourAlgorithm

logger = logging.getLogger(__name__)


def _subtree_best(
    args: Tuple[int, Sequence[float], Sequence[Sequence[float]]],
) -> Tuple[float, Optional[Tuple[int, ...]]]:
    """
    Best ordering among the permutations that start with `first`,
    enumerated in lexicographic order. Module level so a process
    pool can pickle it.
    """
    first, d_start, d_dd = args
    n = len(d_start)
    rest = [i for i in range(n) if i != first]

    best_cost = inf
    best_perm: Optional[Tuple[int, ...]] = None
    for tail in permutations(rest):
        perm = (first,) + tail
        cost = _prefix_cost(perm, d_start, d_dd, best_cost)
        if cost < best_cost:
            best_cost = cost
            best_perm = perm
    return best_cost, best_perm


def _prefix_cost(
    perm: Sequence[int],
    d_start: Sequence[float],
    d_dd: Sequence[Sequence[float]],
    bound: float,
) -> float:
    """
    Length of perm, or inf as soon as the running total reaches `bound`
    (a candidate that only ties the current best can never replace it).
    """
    cost = d_start[perm[0]]
    if cost >= bound:
        return inf
    for i in range(len(perm) - 1):
        cost += d_dd[perm[i]][perm[i + 1]]
        # simple pruning
        if cost >= bound:
            return inf
    return cost


def _to_route(perm: Sequence[int]) -> Tuple[int, ...]:
    return tuple(i + 1 for i in perm)


class ExactBruteForceTour(TourAlgorithm):
    """
    Exact TSP-style path solver for small destination sets.

    Given:
      - origin
      - destinations [d1, ..., dn]

    It:
      - precomputes origin->destination and destination->destination
        distances once
      - brute-forces all n! permutations in lexicographic order
      - keeps the first permutation reaching the minimum length

    This is exponential in n, so anything much past ~10 destinations
    is impractical. We warn but still run it.
    """

    name = "naive"

    def __init__(self, warn_threshold: int = 10, checkpoint_every: int = 1000) -> None:
        self.warn_threshold: int = warn_threshold
        # animated runs hand control back (yield None) at least this often
        self.checkpoint_every: int = checkpoint_every

    def _check_size(self, n: int, warn_threshold: Optional[int] = None) -> None:
        limit = self.warn_threshold if warn_threshold is None else warn_threshold
        if n > limit:
            logger.warning(
                "Exhaustive search over %d destinations (%d! orderings); "
                "expect this to be slow.", n, n,
            )

    # ---- main solver ----

    def search(
        self,
        origin: Point,
        destinations: List[Point],
        animate: bool = False,
        frame_every: Optional[int] = None,
        warn_threshold: Optional[int] = None,
    ) -> Iterator[Optional[Frame]]:
        n = len(destinations)
        self._check_size(n, warn_threshold)

        if n == 0:
            yield Frame((), final=True, step=0)
            return

        d_start_arr, d_dd_arr = distance_table(origin, destinations)
        # plain lists are much faster than numpy scalars in the inner loop
        d_start: List[float] = d_start_arr.tolist()
        d_dd: List[List[float]] = d_dd_arr.tolist()

        best_cost = inf
        best_perm: Optional[Tuple[int, ...]] = None
        step = 0

        for count, perm in enumerate(permutations(range(n)), start=1):
            cost = _prefix_cost(perm, d_start, d_dd, best_cost)

            if cost < best_cost:
                best_cost = cost
                best_perm = perm
                if animate:
                    yield Frame(_to_route(best_perm), step=step)
                    step += 1
            elif (
                animate
                and frame_every
                and best_perm is not None
                and count % frame_every == 0
            ):
                yield Frame(_to_route(best_perm), step=step)
                step += 1
            elif animate and count % self.checkpoint_every == 0:
                # no frame to draw, but let the consumer check for cancellation
                yield None

        if best_perm is None:
            # every candidate had a non-finite length (NaN coordinates)
            best_perm = tuple(range(n))

        logger.debug("naive: best length %.3f over %d destinations", best_cost, n)
        yield Frame(_to_route(best_perm), final=True, step=step)

    def solve_parallel(
        self,
        origin: Point,
        destinations: List[Point],
        workers: int,
        warn_threshold: Optional[int] = None,
    ) -> Route:
        """
        Same answer as search(), with one pool task per first destination.
        Results are reduced in first-destination order with a strict '<',
        which reproduces the sequential first-in-enumeration tie-break.
        """
        n = len(destinations)
        self._check_size(n, warn_threshold)

        if n <= 1:
            return list(range(1, n + 1))

        d_start_arr, d_dd_arr = distance_table(origin, destinations)
        d_start = d_start_arr.tolist()
        d_dd = d_dd_arr.tolist()
        tasks = [(first, d_start, d_dd) for first in range(n)]

        with mp.Pool(processes=min(workers, n)) as pool:
            results = pool.map(_subtree_best, tasks)

        best_cost = inf
        best_perm: Optional[Tuple[int, ...]] = None
        for cost, perm in results:
            if perm is not None and cost < best_cost:
                best_cost = cost
                best_perm = perm

        if best_perm is None:
            best_perm = tuple(range(n))

        logger.debug(
            "naive (%d workers): best length %.3f over %d destinations",
            workers, best_cost, n,
        )
        return list(_to_route(best_perm))


ALGORITHM = ExactBruteForceTour()

# geometry.py
from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Any, List, Mapping, Sequence, Tuple

import numpy as np

from errors import InvalidPoints

# A route is a list of 1-based indices into [origin, d1, ..., dn].
# Index i refers to destinations[i - 1]; the origin (0) is implicit.
Route = List[int]


@dataclass(frozen=True)
class Point:
    """A position on the canvas, in pixels. No identity beyond x and y."""
    x: float
    y: float


def as_point(obj: Any, index: int = 0) -> Point:
    """
    Accepts:
      - a Point
      - an (x, y) pair
      - a mapping with "x" and "y" keys (the {x, y} objects the UI sends)
    """
    if isinstance(obj, Point):
        return obj
    try:
        if isinstance(obj, Mapping):
            return Point(float(obj["x"]), float(obj["y"]))
        if isinstance(obj, (str, bytes)):
            raise TypeError(obj)
        x, y = obj
        return Point(float(x), float(y))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidPoints(index, obj) from e


def as_points(points: Sequence[Any]) -> List[Point]:
    return [as_point(p, i) for i, p in enumerate(points)]


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance. NaN / inf coordinates propagate."""
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    return sqrt(dx * dx + dy * dy)


def route_length(origin: Point, destinations: Sequence[Point], route: Sequence[int]) -> float:
    """
    Total length of origin -> destinations[route[0] - 1] -> ... following route.
    Empty route -> 0.
    """
    length = 0.0
    last = origin
    for idx in route:
        dest = destinations[idx - 1]
        length += distance(last, dest)
        last = dest
    return length


def distance_table(
    origin: Point,
    destinations: Sequence[Point],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Precompute distances once per solve:
      d_start[i]  = |origin - destinations[i]|
      d_dd[i, j]  = |destinations[i] - destinations[j]|
    (0-based, callers shift to route indices.)
    """
    if not destinations:
        return np.zeros(0), np.zeros((0, 0))

    xy = np.array([(p.x, p.y) for p in destinations], dtype=float)
    o = np.array([origin.x, origin.y], dtype=float)

    d_start = np.sqrt(((xy - o) ** 2).sum(axis=1))
    diff = xy[:, None, :] - xy[None, :, :]
    d_dd = np.sqrt((diff ** 2).sum(axis=2))
    return d_start, d_dd

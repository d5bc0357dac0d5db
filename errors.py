# errors.py
from __future__ import annotations

from typing import Any, Iterable


class RouteError(Exception):
    """Base class for everything the route engine raises on bad input."""


class InvalidAlgorithm(RouteError, ValueError):
    def __init__(self, name: Any, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = sorted(known)
        super().__init__(
            f"Unknown algorithm: {name!r} (expected one of {self.known})"
        )


class EmptyInput(RouteError, ValueError):
    def __init__(self) -> None:
        super().__init__("Point set is empty; at least an origin is required.")


class InvalidPoints(RouteError, TypeError):
    """
    A point could not be read as {x, y}. Raised for the whole point set,
    with the offending index, before any search starts.
    """

    def __init__(self, index: int, value: Any) -> None:
        self.index = index
        self.value = value
        super().__init__(
            f"Point {index} needs to be a Point, an (x, y) pair or "
            f"a mapping with 'x' and 'y' keys, got {value!r}"
        )

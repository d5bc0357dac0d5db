import random
from typing import List

import pytest

from geometry import Point


def random_points(n: int, seed: int, size: int = 100) -> List[Point]:
    """[origin, d1..dn] with integer pixel coordinates."""
    rng = random.Random(seed)
    return [Point(rng.randrange(size), rng.randrange(size)) for _ in range(n + 1)]


@pytest.fixture
def square():
    # origin + the other three corners of a 10x10 square
    return [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


@pytest.fixture
def greedy_trap():
    # nearest neighbour walks right first and pays for it
    return [Point(0, 0), Point(1, 0), Point(-2, 0), Point(6, 0)]

# scene.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
import random

from config import Config
from geometry import Point


@dataclass
class Scene:
    """
    One routing instance on a width x height canvas:
      - origin: where the drone starts (canvas centre)
      - destinations: points to visit, each exactly once

    points = [origin, *destinations] is what the engine takes.
    """
    width: int
    height: int
    origin: Point
    destinations: List[Point] = field(default_factory=list)

    @classmethod
    def from_config(cls, cfg: Config) -> "Scene":
        rng = random.Random(cfg.seed)
        width, height = cfg.width, cfg.height

        origin = Point(width // 2, height // 2)

        # integer pixel positions, like clicks on the canvas; never on the origin
        destinations: List[Point] = []
        while len(destinations) < cfg.n_destinations:
            p = Point(rng.randrange(width), rng.randrange(height))
            if p == origin:
                continue
            destinations.append(p)

        return cls(width=width, height=height, origin=origin, destinations=destinations)

    @property
    def points(self) -> List[Point]:
        return [self.origin, *self.destinations]

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "origin": {"x": self.origin.x, "y": self.origin.y},
            "destinations": [{"x": p.x, "y": p.y} for p in self.destinations],
        }

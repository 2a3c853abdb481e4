"""Optimisation problems evaluated by the genetic algorithm."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Sequence

Range = tuple[float, float]
Evaluation = tuple[float, list[float]]


class Problem(ABC):
    """A problem with bounded real variables and optional constraints."""

    def __init__(self, name: str, num_variables: int, num_constraints: int = 0) -> None:
        self.name = name
        self.num_variables = num_variables
        self.num_constraints = num_constraints
        self.ranges: list[Range] = [(0.0, 1.0)] * num_variables

    @abstractmethod
    def evaluate(self, x: Sequence[float]) -> Evaluation:
        """Return the objective value and the constraint values for ``x``."""


class CannonProblem(Problem):
    """Find the angle and speed that land a projectile on a target.

    The objective is the distance between the landing point and the
    target centre.
    """

    GRAVITY = 9.81

    def __init__(self, center: float = 15.0) -> None:
        super().__init__("Cannon", 2)
        self.center = center
        self.ranges = [(0.0, 3.14159 / 2.0), (0.0, 30.0)]

    def evaluate(self, x: Sequence[float]) -> Evaluation:
        theta, speed = x[0], x[1]
        distance = speed * speed * math.sin(2 * theta) / self.GRAVITY
        return abs(distance - self.center), []
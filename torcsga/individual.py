"""Binary-coded individuals with decoding to real variables."""

from __future__ import annotations

import copy
import math
import random
from dataclasses import dataclass, field
from typing import Sequence

from .problems import Problem, Range


def gene_sizes(ranges: Sequence[Range], precision: int) -> list[int]:
    """Number of bits needed per variable for ``precision`` decimal digits."""
    return [
        math.ceil(math.log2(1 + (high - low) * 10**precision)) for low, high in ranges
    ]


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _format_number(value: float) -> str:
    return f"{value:g}"


@dataclass
class Individual:
    """A chromosome together with its decoded variables and fitness data."""

    chromosome: list[int] = field(default_factory=list)
    gene_sizes: list[int] = field(default_factory=list)
    x: list[float] = field(default_factory=list)
    ranges: list[Range] = field(default_factory=list)
    fitness: float = 0.0
    evaluation: float = 0.0
    constraints: list[float] = field(default_factory=list)
    expected: float = 0.0
    crossover_site: int = 0
    mutations: int = 0
    parents: tuple[int, int] = (0, 0)

    @property
    def chromosome_size(self) -> int:
        return len(self.chromosome)

    @classmethod
    def random(cls, problem: Problem, precision: int, rng: random.Random) -> Individual:
        """Create an individual with a random chromosome for ``problem``."""
        ranges = list(problem.ranges)
        sizes = gene_sizes(ranges, precision)
        individual = cls(
            chromosome=[rng.randint(0, 1) for _ in range(sum(sizes))],
            gene_sizes=sizes,
            x=[0.0] * problem.num_variables,
            ranges=ranges,
            constraints=[0.0] * problem.num_constraints,
        )
        individual.decode()
        return individual

    def _genes(self):
        start = 0
        for size, bounds in zip(self.gene_sizes, self.ranges):
            yield start, size, bounds
            start += size

    def decode(self) -> None:
        """Set ``x`` from the chromosome."""
        values = []
        for start, size, (low, high) in self._genes():
            integer = 0
            for bit in self.chromosome[start:start + size]:
                integer = integer * 2 + bit
            span = 2**size - 1
            values.append(low + (high - low) * integer / span if span else low)
        self.x = values

    def encode(self) -> None:
        """Set the chromosome from ``x``.

        Raises ValueError when a variable lies outside its range.
        """
        chromosome = list(self.chromosome)
        for value, (start, size, (low, high)) in zip(self.x, self._genes()):
            if size == 0:
                continue
            span = 2**size - 1
            integer = _round_half_away(span * (value - low) / (high - low))
            if not 0 <= integer <= span:
                raise ValueError(f"value {value} lies outside range [{low}, {high}]")
            chromosome[start:start + size] = [int(b) for b in format(integer, f"0{size}b")]
        self.chromosome = chromosome

    def copy_from(self, source: Individual) -> None:
        """Take over the genetic and evaluation data of ``source``."""
        self.chromosome = list(source.chromosome)
        self.x = list(source.x)
        self.fitness = source.fitness
        self.evaluation = source.evaluation
        self.constraints = list(source.constraints)
        self.ranges = list(source.ranges)

    def clone(self) -> Individual:
        """Return an independent copy of this individual."""
        return copy.deepcopy(self)

    def __str__(self) -> str:
        bits = "".join(str(b) for b in self.chromosome)
        values = "".join(_format_number(v) for v in self.x)
        return (
            f"{bits}   {values}   "
            f"{_format_number(self.fitness)}   {_format_number(self.expected)}"
        )
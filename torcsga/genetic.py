"""Simple binary genetic algorithm run on a ring of migrating islands."""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass
from itertools import accumulate
from pathlib import Path
from typing import Callable, Sequence, TextIO

from .individual import Individual
from .problems import Problem
from .stats import GAStatistics

Migrant = tuple[list[float], float]


def select_migrants(rng: random.Random, count: int) -> list[int]:
    """Population slots that send or receive migrants, in random order.

    The slots are always the first ``count`` of the population.
    """
    return rng.sample(range(count), count)


@dataclass(frozen=True)
class GAParams:
    """Parameters of a run."""

    pop_size: int = 16
    gmax: int = 4
    pc: float = 0.9
    pm: float = 0.1
    precision: int = 6
    migrants: int = 4
    epoch: int = 3

    def __post_init__(self) -> None:
        if self.pop_size < 1:
            raise ValueError("population size must be at least 1")
        if self.gmax < 1:
            raise ValueError("number of generations must be at least 1")
        if not 0 <= self.migrants <= self.pop_size:
            raise ValueError("number of migrants must lie between 0 and the population size")
        if self.epoch < 1:
            raise ValueError("epoch length must be at least 1")


class GeneticAlgorithm:
    """One island: roulette selection, one-point crossover, uniform mutation."""

    def __init__(
        self,
        problem: Problem,
        params: GAParams,
        rng: random.Random | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.problem = problem
        self.params = params
        self.rng = rng if rng is not None else random.Random()
        self.out = out if out is not None else sys.stdout
        self.pm = params.pm
        self.stats = GAStatistics()
        self.stats.reset(problem, params.precision, self.rng)
        self.population: list[Individual] = []
        self.offspring: list[Individual] = []
        self.parents: list[int] = []
        self.sum_expected = 0.0
        self.worst_time = 0.0

    def initialize(self) -> None:
        """Report the parameters, create and evaluate the first generation."""
        p = self.params
        self.stats.initial_report(self.out, p.pop_size, p.gmax, p.pc, p.pm)
        self.population = [
            Individual.random(self.problem, p.precision, self.rng) for _ in range(p.pop_size)
        ]
        self.offspring = [
            Individual.random(self.problem, p.precision, self.rng) for _ in range(p.pop_size)
        ]
        self.pm = 1.0 / self.population[0].chromosome_size
        self.evaluate(self.population)
        self.elitism(self.population, 1)
        self.stats.update(self.population)

    def evaluate(self, population: Sequence[Individual]) -> None:
        """Evaluate each individual and derive its fitness.

        An evaluation of zero means the race was not finished: the fitness
        then penalises the remaining distance plus the worst time seen.
        """
        for ind in population:
            evaluation, constraints = self.problem.evaluate(ind.x)
            ind.evaluation = evaluation
            ind.constraints = list(constraints)
            self.stats.evaluations += 1
            self.worst_time = max(self.worst_time, evaluation)
            if evaluation == 0.0:
                penalty = ind.constraints[0] if ind.constraints else 0.0
                denominator = penalty + self.worst_time
            else:
                denominator = evaluation
            ind.fitness = 1.0 / denominator if denominator else math.inf

    def select_parents(self, population: Sequence[Individual]) -> None:
        """Compute expected values and pick one parent per slot by roulette."""
        size = len(population)
        self.stats.avg_fitness = sum(ind.fitness for ind in population) / size
        avg = self.stats.avg_fitness
        for ind in population:
            ind.expected = ind.fitness / avg if avg != 0.0 else 0.0
        self.sum_expected = sum(ind.expected for ind in population)
        self.parents = [self.roulette(population) for _ in range(size)]

    def roulette(self, population: Sequence[Individual]) -> int:
        """Index chosen with probability proportional to its expected value."""
        target = self.rng.uniform(0.0, self.sum_expected)
        for index, total in enumerate(accumulate(ind.expected for ind in population)):
            if total >= target:
                return index
        return len(population) - 1

    def crossover(self, oldpop: Sequence[Individual], newpop: Sequence[Individual]) -> None:
        """Cross consecutive pairs of selected parents into ``newpop``."""
        for j in range(0, len(newpop) - 1, 2):
            mate1, mate2 = self.parents[j], self.parents[j + 1]
            child1, child2, site = self.one_point_crossover(
                oldpop[mate1].chromosome, oldpop[mate2].chromosome
            )
            for child, chromosome in ((newpop[j], child1), (newpop[j + 1], child2)):
                child.chromosome = chromosome
                child.crossover_site = site
                child.parents = (mate1 + 1, mate2 + 1)

    def one_point_crossover(
        self, parent1: Sequence[int], parent2: Sequence[int]
    ) -> tuple[list[int], list[int], int]:
        """Return both children and the crossover point (0 when not crossed)."""
        size = len(parent1)
        if self.flip(self.params.pc):
            site = self.rng.randint(0, size - 1)
            cut = size - site
            child1 = list(parent2[:cut]) + list(parent1[cut:])
            child2 = list(parent1[:cut]) + list(parent2[cut:])
            self.stats.crossovers += 1
            return child1, child2, site
        return list(parent1), list(parent2), 0

    def mutate(self, population: Sequence[Individual]) -> None:
        """Mutate every individual and put the best one at a random slot."""
        for ind in population:
            ind.mutations = self.uniform_mutation(ind.chromosome)
            ind.decode()
            if ind.mutations > 0:
                self.stats.mutations += 1
        slot = self.rng.randint(0, len(population) - 1)
        population[slot].copy_from(self.stats.best)
        self.stats.best_position = slot + 1

    def uniform_mutation(self, chromosome: list[int]) -> int:
        """Flip each bit in place with probability ``pm``; return the flips."""
        flips = 0
        for k, bit in enumerate(chromosome):
            if self.flip(self.pm):
                flips += 1
                chromosome[k] = 1 - bit
        return flips

    def elitism(self, population: Sequence[Individual], gen: int) -> None:
        """Record any individual better than the best found so far."""
        for position, ind in enumerate(population, start=1):
            if ind.fitness > self.stats.best.fitness:
                self.stats.best.copy_from(ind)
                self.stats.best_generation = gen
                self.stats.best_position = position

    def flip(self, prob: float) -> bool:
        """Biased coin toss: True with probability ``prob``."""
        return self.rng.random() <= prob

    def step(self, gen: int) -> None:
        """Produce, evaluate and report generation ``gen``."""
        self.select_parents(self.population)
        self.crossover(self.population, self.offspring)
        self.mutate(self.offspring)
        self.evaluate(self.offspring)
        self.elitism(self.offspring, gen)
        self.stats.update(self.offspring)
        self.stats.short_report(self.out, self.population, self.offspring, gen)
        self.population, self.offspring = self.offspring, self.population

    def emigrants(self) -> list[Migrant]:
        """Variables and fitness of the individuals that leave the island."""
        chosen = select_migrants(self.rng, self.params.migrants)
        return [
            (list(self.population[i].x), self.population[i].fitness) for i in chosen
        ]

    def immigrate(self, migrants: Sequence[Migrant]) -> None:
        """Overwrite individuals with the arriving migrants."""
        chosen = select_migrants(self.rng, len(migrants))
        for index, (x, fitness) in zip(chosen, migrants):
            ind = self.population[index]
            ind.x = list(x)
            ind.fitness = fitness
            ind.encode()


class Archipelago:
    """Islands that evolve in step and exchange migrants around a ring."""

    def __init__(
        self,
        problem_factory: Callable[[int], Problem],
        params: GAParams,
        num_islands: int = 1,
        seed: int | None = None,
        out: TextIO | None = None,
    ) -> None:
        if num_islands < 1:
            raise ValueError("at least one island is needed")
        master = random.Random(seed)
        self.params = params
        self.out = out
        self.islands = [
            GeneticAlgorithm(
                problem_factory(island), params, random.Random(master.getrandbits(64)), out
            )
            for island in range(num_islands)
        ]
        self.global_population: list[Individual] = []

    def _migrate(self) -> None:
        packets = [ga.emigrants() for ga in self.islands]
        for index, ga in enumerate(self.islands):
            ga.immigrate(packets[index - 1])

    def optimize(self) -> list[Individual]:
        """Run every island for all generations and gather the final populations."""
        for ga in self.islands:
            ga.initialize()
        for gen in range(2, self.params.gmax + 1):
            for ga in self.islands:
                ga.step(gen)
            if gen % self.params.epoch == 0:
                self._migrate()
        self.global_population = [
            ind.clone() for ga in self.islands for ind in ga.population
        ]
        return self.global_population

    def write_results(self, directory: str | Path = "salidafinal") -> tuple[Path, Path]:
        """Write the final variables and evaluations; return both file paths."""
        if not self.global_population:
            raise RuntimeError("optimize() must run before results can be written")
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        out = self.out if self.out is not None else sys.stdout
        out.write(f"Imprimiendo archivo  de salida: {len(self.global_population)}\n")
        out.flush()
        stats = self.islands[0].stats
        variables_path = directory / "pesos_pob.txt"
        evaluations_path = directory / "evals_pob.txt"
        with variables_path.open("w") as handle:
            stats.write_variables(handle, self.global_population)
        with evaluations_path.open("w") as handle:
            stats.write_evaluation(handle, self.global_population)
        return variables_path, evaluations_path
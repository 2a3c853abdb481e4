"""Population statistics and textual reports for the genetic algorithm."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Sequence, TextIO

from .individual import Individual
from .problems import Problem


def _digits(value: float) -> int:
    """Number of characters of the truncated integer part of ``value``."""
    return len(str(math.trunc(value)))


def _stream_number(value: float) -> str:
    """Format a number the way a default text stream prints it."""
    return f"{value:g}"


def _shortest(value: float) -> str:
    """Shortest round-trip representation, without a trailing ``.0``."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _bits(chromosome: Sequence[int]) -> str:
    return "".join(str(bit) for bit in chromosome)


def _join(values: Sequence[float], spec: str, sep: str) -> str:
    return sep.join(format(v, spec) for v in values)


def _rule(width: int) -> str:
    return "_" * max(width, 0)


@dataclass
class GAStatistics:
    """Accumulated statistics of a run and the best individual found."""

    max_fitness: float = 0.0
    min_fitness: float = 0.0
    avg_fitness: float = 0.0
    mutations: int = 0
    crossovers: int = 0
    evaluations: int = 0
    local_best: list[int] = field(default_factory=list)
    best: Individual = field(default_factory=Individual)
    best_position: int = 0
    best_generation: int = 0

    def reset(self, problem: Problem, precision: int, rng: random.Random) -> None:
        """Start over with a fresh best individual shaped for ``problem``."""
        self.best = Individual.random(problem, precision, rng)
        self.local_best = [0] * self.best.chromosome_size

    def update(self, population: Sequence[Individual]) -> None:
        """Compute fitness extremes, mean and each individual's expected value."""
        if not population:
            raise ValueError("population is empty")
        first = population[0]
        self.min_fitness = first.fitness
        self.max_fitness = first.fitness
        self.local_best = list(first.chromosome)
        for individual in population:
            if individual.fitness > self.max_fitness:
                self.max_fitness = individual.fitness
                self.local_best = list(individual.chromosome)
            if individual.fitness < self.min_fitness:
                self.min_fitness = individual.fitness

        self.avg_fitness = sum(ind.fitness for ind in population) / len(population)
        for individual in population:
            individual.expected = (
                individual.fitness / self.avg_fitness if self.avg_fitness != 0.0 else 0.0
            )

    def initial_report(
        self, out: TextIO, pop_size: int, gmax: int, pc: float, pm: float
    ) -> None:
        """Write the run parameters."""
        out.write("\n      Parámetros que se usarán en el algoritmo genético  \n")
        out.write(f" Tamaño de la población         =    {pop_size}\n")
        out.write(f" Longitud total del cromosoma   =    {self.best.chromosome_size}\n")
        out.write(f" Número máximo de generaciones  =    {gmax}\n")
        out.write(f" Probabilidad de cruza          =    {pc:.3f}\n")
        out.write(f" Probabilidad de mutación       =    {pm:.3f}\n")
        out.write("\n\n")

    def _accumulated(self, out: TextIO, gen: int) -> None:
        out.write(f"\n\tEstadísticas ACUMULADAS hasta la generación {gen}\n")
        out.write(f"La función f(x1,x2) se evaluó {self.evaluations} veces.\n")
        out.write(
            f"Cruzas totales= {self.crossovers}, Mutaciones totales= {self.mutations}\n"
        )
        out.write(f"Aptitud mínima = {_stream_number(self.min_fitness)}\n")
        out.write(f"Aptitud máxima = {_stream_number(self.max_fitness)}\n")
        out.write(f"Aptitud promedio = {_stream_number(self.avg_fitness)}\n")

    def report(
        self,
        out: TextIO,
        oldpop: Sequence[Individual],
        newpop: Sequence[Individual],
        gen: int,
    ) -> None:
        """Write a full report of the parent and child generations."""
        c_size = oldpop[0].chromosome_size
        n_vars = len(oldpop[0].x)
        len_pop = len(str(len(oldpop)))
        len_apt = _digits(self.best.fitness)

        out.write(f"{'REPORTE DE LA POBLACIÓN':^120}\n")
        out.write(f"PADRES: Generación número {gen - 1}\n")
        out.write(
            f"{'Num':^{len_pop + 2}}  {'Cromosoma':^{c_size}}  "
            f"{'Variables':^{n_vars * 10 + 1}}  {'Aptitud':^{len_apt + 4}}  "
            f"{'ValEsp':^6}"
        )
        out.write(f"\n{_rule(len_pop + 2 + c_size + n_vars * 7 + len_apt + 19)}\n")
        self.write_parents(out, oldpop)

        out.write(f"\n\nHIJOS: Generación número {gen}\n")
        out.write(
            f"{'Num':^{len_pop + 2}}  {'Padres':^9}  {'X':^4}  {'mut?':^5}  "
            f"{'Cromosoma':^{c_size}}  {' Variables':^{n_vars * 10 + 1}}  "
            f"{'Aptitud':^{len_apt + 4}}  {'ValEsp':^6}"
        )
        rule = _rule(len_pop + 2 + c_size + n_vars * 10 + len_apt + 43)
        out.write(f"\n{rule}\n")
        self.write_children(out, newpop)
        out.write(f"\n{rule}\n")

        self._accumulated(out, gen)
        out.write("El mejor individuo de la generación actual:\n")
        out.write(f"   Cadena = {_bits(self.local_best)}")
        out.write("\n\n")
        out.write("Mejor individuo global:\n")
        out.write(f"   Obtenido en la generacion núm: {self.best_generation}\n")
        out.write(f"   Posición actual: {self.best_position}\n")
        out.write(f"   Cadena = {_bits(self.best.chromosome)}")
        out.write(f"\n   Vector X = {_join(self.best.x, '24.20f', ', ')}")
        out.write(f"\n   Evaluación f(X) = {_stream_number(self.best.evaluation)}\n\n")
        out.flush()

    def short_report(
        self,
        out: TextIO,
        oldpop: Sequence[Individual],
        newpop: Sequence[Individual],
        gen: int,
    ) -> None:
        """Write the children's fitness and evaluation with the running totals."""
        len_pop = len(str(len(newpop)))
        len_apt = _digits(self.best.fitness)
        len_eval = _digits(self.best.evaluation)

        out.write(f"\n\nHIJOS: Generación número {gen}\n")
        out.write(
            f"{'Num ':^{len_pop + 3}}  {'Aptitud ':^{len_apt + 7}}  "
            f"{'Evaluación':^{len_eval + 9}}  "
        )
        if newpop and newpop[0].constraints:
            out.write("Restricción")
        rule = _rule(len_pop + 3 + len_apt + 7 + len_eval + 9 + 17)
        out.write(f"\n{rule}\n")
        self.write_short_children(out, newpop)
        out.write(f"{rule}\n")

        self._accumulated(out, gen)
        out.write("\n\n")
        out.write("Mejor individuo global:\n")
        out.write(f"   Obtenido en la generacion núm: {self.best_generation}\n")
        out.write(f"   Posición actual: {self.best_position}\n")
        out.write("   Cadena = ...")
        out.write(f"\n   Vector X = {_join(self.best.x, '9.3f', ', ')}")
        out.write(f"\n   Evaluación f(X) = {_stream_number(self.best.evaluation)}\n\n")
        out.flush()

    def write_parents(self, out: TextIO, population: Sequence[Individual]) -> None:
        """Write one line per parent: index, chromosome, x, fitness, expected value."""
        len_pop = len(str(len(population)))
        len_apt = _digits(self.best.fitness)
        for number, ind in enumerate(population, start=1):
            out.write(
                f"{number:0{len_pop}}    {_bits(ind.chromosome)}  "
                f"{_join(ind.x, '010.3f', ' ')}  "
                f"{ind.fitness:0{len_apt + 4}.3f}  {ind.expected:06.3f}\n"
            )

    def write_children(self, out: TextIO, population: Sequence[Individual]) -> None:
        """Write one line per child, including parents, crossover site and mutation."""
        len_pop = len(str(len(population)))
        len_apt = _digits(self.best.fitness)
        for number, ind in enumerate(population, start=1):
            mutated = "S" if ind.mutations >= 1 else "N"
            first, second = ind.parents
            out.write(
                f"{number:0{len_pop}}    ({first:03},{second:03})  "
                f"{ind.crossover_site:^4}  {mutated:^5}  "
                f"{_bits(ind.chromosome)}  {_join(ind.x, '010.3f', ' ')}  "
                f"{ind.fitness:0{len_apt + 4}.3f}  {ind.expected:06.3f}\n"
            )

    def write_short_children(
        self, out: TextIO, population: Sequence[Individual]
    ) -> None:
        """Write one line per child: index, fitness, evaluation and first constraint."""
        len_pop = len(str(len(population)))
        len_apt = _digits(self.best.fitness)
        len_eval = _digits(self.best.evaluation)
        for number, ind in enumerate(population, start=1):
            line = (
                f"{number:0{len_pop + 3}}  "
                f"{ind.fitness:0{len_apt + 7}.5f}  "
                f"{ind.evaluation:0{len_eval + 9}.5f}  "
            )
            if ind.constraints:
                line += _shortest(ind.constraints[0])
            out.write(line + "\n")

    def write_variables(self, out: TextIO, population: Sequence[Individual]) -> None:
        """Write the variables of each individual, one individual per line."""
        for ind in population:
            out.write(_join(ind.x, "010.6f", " ") + "\n")

    def write_evaluation(self, out: TextIO, population: Sequence[Individual]) -> None:
        """Write the evaluation and constraint values of each individual."""
        len_apt = _digits(self.best.fitness)
        for ind in population:
            out.write(
                f"{ind.evaluation:0{len_apt + 4}.3f}  "
                f"{_join(ind.constraints, '010.3f', ' ')}\n"
            )
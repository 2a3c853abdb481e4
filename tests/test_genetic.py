import io
import random

import pytest

from torcsga.genetic import Archipelago, GAParams, GeneticAlgorithm, select_migrants
from torcsga.individual import Individual
from torcsga.problems import CannonProblem, Problem


class FixedProblem(Problem):
    def __init__(self, results):
        super().__init__("fixed", 1, 1)
        self.results = iter(results)

    def evaluate(self, x):
        return next(self.results)


def make_ga(params=None, seed=0, problem=None):
    return GeneticAlgorithm(
        problem or CannonProblem(),
        params or GAParams(pop_size=6, gmax=3, precision=2, migrants=2, epoch=2),
        random.Random(seed),
        io.StringIO(),
    )


@pytest.mark.parametrize("count", [0, 1, 4, 9])
def test_select_migrants_is_permutation(count):
    chosen = select_migrants(random.Random(3), count)
    assert sorted(chosen) == list(range(count))


@pytest.mark.parametrize(
    "kwargs",
    [{"pop_size": 0}, {"gmax": 0}, {"migrants": 20, "pop_size": 4}, {"epoch": 0}],
)
def test_params_validation(kwargs):
    with pytest.raises(ValueError):
        GAParams(**kwargs)


def test_initialize_sets_mutation_rate_and_reports():
    ga = make_ga()
    ga.initialize()
    assert len(ga.population) == 6
    assert ga.pm == pytest.approx(1.0 / ga.population[0].chromosome_size)
    assert ga.stats.evaluations == 6
    assert "Parámetros" in ga.out.getvalue()
    assert ga.stats.best.fitness == max(ind.fitness for ind in ga.population)


def test_evaluate_penalises_unfinished_race():
    problem = FixedProblem([(10.0, [0.0]), (0.0, [5.0])])
    ga = make_ga(problem=problem)
    rng = random.Random(1)
    population = [Individual.random(problem, 2, rng) for _ in range(2)]
    ga.evaluate(population)
    assert population[0].fitness == pytest.approx(1 / 10.0)
    assert population[1].fitness == pytest.approx(1 / (5.0 + 10.0))
    assert ga.worst_time == 10.0
    assert ga.stats.evaluations == 2


def test_one_point_crossover_always_crosses():
    ga = make_ga(GAParams(pop_size=4, pc=1.0, migrants=0))
    parent1, parent2 = [0] * 12, [1] * 12
    child1, child2, site = ga.one_point_crossover(parent1, parent2)
    cut = 12 - site
    assert child1 == [1] * cut + [0] * site
    assert child2 == [0] * cut + [1] * site
    assert ga.stats.crossovers == 1


def test_one_point_crossover_never_crosses():
    ga = make_ga(GAParams(pop_size=4, pc=0.0, migrants=0))
    parent1, parent2 = [0, 1, 0, 1], [1, 1, 0, 0]
    child1, child2, site = ga.one_point_crossover(parent1, parent2)
    assert (child1, child2, site) == (parent1, parent2, 0)
    assert child1 is not parent1
    assert ga.stats.crossovers == 0


def test_crossover_records_parents():
    ga = make_ga()
    ga.initialize()
    ga.parents = [1, 0, 2, 3, 5, 4]
    ga.crossover(ga.population, ga.offspring)
    assert ga.offspring[0].parents == (2, 1)
    assert ga.offspring[1].parents == (2, 1)
    assert ga.offspring[4].parents == (6, 5)


def test_uniform_mutation_flips_all_bits():
    ga = make_ga()
    ga.pm = 1.0
    chromosome = [0, 1, 1, 0, 1]
    flips = ga.uniform_mutation(chromosome)
    assert flips == 5
    assert chromosome == [1, 0, 0, 1, 0]


def test_mutate_places_best_individual():
    ga = make_ga()
    ga.initialize()
    ga.pm = 0.0
    before = [list(ind.chromosome) for ind in ga.offspring]
    ga.mutate(ga.offspring)
    slot = ga.stats.best_position - 1
    assert ga.offspring[slot].chromosome == ga.stats.best.chromosome
    assert ga.stats.mutations == 0
    for index, ind in enumerate(ga.offspring):
        if index != slot:
            assert ind.chromosome == before[index]


def test_select_parents_follows_expected_values():
    ga = make_ga()
    ga.initialize()
    for ind, fitness in zip(ga.population, [0.0, 0.0, 5.0, 0.0, 0.0, 0.0]):
        ind.fitness = fitness
    ga.select_parents(ga.population)
    assert ga.sum_expected == pytest.approx(len(ga.population))
    assert ga.parents == [2] * 6


def test_elitism_records_generation_and_position():
    ga = make_ga()
    ga.initialize()
    ga.population[3].fitness = ga.stats.best.fitness + 1.0
    ga.elitism(ga.population, 7)
    assert ga.stats.best_generation == 7
    assert ga.stats.best_position == 4
    assert ga.stats.best.chromosome == ga.population[3].chromosome


def test_emigrants_and_immigrate_round_trip():
    source = make_ga(seed=1)
    target = make_ga(seed=2)
    source.initialize()
    target.initialize()
    migrants = source.emigrants()
    assert len(migrants) == 2
    target.immigrate(migrants)
    arrived = sorted((ind.x, ind.fitness) for ind in target.population[:2])
    assert arrived == sorted(migrants)
    for ind in target.population[:2]:
        decoded = ind.clone()
        decoded.decode()
        assert decoded.x == pytest.approx(ind.x, abs=0.01)


def test_archipelago_is_reproducible():
    params = GAParams(pop_size=4, gmax=4, precision=2, migrants=2, epoch=2)
    first = Archipelago(lambda i: CannonProblem(), params, 2, seed=7, out=io.StringIO())
    second = Archipelago(lambda i: CannonProblem(), params, 2, seed=7, out=io.StringIO())
    a = [ind.x for ind in first.optimize()]
    b = [ind.x for ind in second.optimize()]
    assert a == b
    assert len(a) == 8


def test_archipelago_counts_evaluations_and_keeps_best():
    params = GAParams(pop_size=6, gmax=5, precision=2, migrants=2, epoch=2)
    out = io.StringIO()
    archipelago = Archipelago(lambda i: CannonProblem(), params, 1, seed=3, out=out)
    population = archipelago.optimize()
    ga = archipelago.islands[0]
    assert ga.stats.evaluations == 6 * 5
    assert ga.stats.best.fitness >= max(ind.fitness for ind in population)
    assert "HIJOS: Generación número 5" in out.getvalue()


def test_archipelago_rejects_no_islands():
    with pytest.raises(ValueError):
        Archipelago(lambda i: CannonProblem(), GAParams(), 0)


def test_write_results_requires_optimize(tmp_path):
    archipelago = Archipelago(lambda i: CannonProblem(), GAParams(), 1, seed=1, out=io.StringIO())
    with pytest.raises(RuntimeError):
        archipelago.write_results(tmp_path)


def test_write_results_writes_one_line_per_individual(tmp_path):
    params = GAParams(pop_size=4, gmax=3, precision=2, migrants=1, epoch=2)
    out = io.StringIO()
    archipelago = Archipelago(lambda i: CannonProblem(), params, 3, seed=5, out=out)
    archipelago.optimize()
    variables, evaluations = archipelago.write_results(tmp_path / "salidafinal")
    variable_lines = variables.read_text().splitlines()
    assert len(variable_lines) == 12
    assert all(len(line.split()) == 2 for line in variable_lines)
    assert len(evaluations.read_text().splitlines()) == 12
    assert variables.name == "pesos_pob.txt"
    assert evaluations.name == "evals_pob.txt"
    assert "Imprimiendo archivo  de salida: 12" in out.getvalue()
import math

import pytest

from torcsga.problems import CannonProblem, Problem


class _Sphere(Problem):
    def __init__(self):
        super().__init__("Sphere", 3)

    def evaluate(self, x):
        return sum(v * v for v in x), []


def test_base_problem_is_abstract():
    with pytest.raises(TypeError):
        Problem("abstract", 2)


def test_default_ranges_are_unit_intervals():
    problem = _Sphere()
    assert problem.ranges == [(0.0, 1.0)] * 3
    assert problem.num_variables == 3
    assert problem.num_constraints == 0
    assert problem.name == "Sphere"

    Problem.__init__(problem, "Unit", 4, 1)
    assert problem.ranges == [(0.0, 1.0)] * 4
    assert problem.num_variables == 4
    assert problem.num_constraints == 1
    assert problem.name == "Unit"


def test_cannon_attributes():
    problem = CannonProblem()
    assert problem.name == "Cannon"
    assert problem.num_variables == 2
    assert problem.num_constraints == 0
    assert problem.ranges == [(0.0, 3.14159 / 2.0), (0.0, 30.0)]
    assert problem.center == 15.0


def test_cannon_zero_angle_misses_by_center():
    problem = CannonProblem(center=12.5)
    value, constraints = problem.evaluate([0.0, 20.0])
    assert value == pytest.approx(12.5)
    assert constraints == []


def test_cannon_exact_hit_is_zero():
    problem = CannonProblem()
    speed = math.sqrt(15.0 * 9.81)
    value, _ = problem.evaluate([math.pi / 4, speed])
    assert value == pytest.approx(0.0, abs=1e-9)


def test_cannon_value_is_never_negative():
    problem = CannonProblem()
    for theta in (0.1, 0.5, 1.0, 1.5):
        for speed in (0.0, 5.0, 12.0, 30.0):
            value, _ = problem.evaluate([theta, speed])
            assert value >= 0.0
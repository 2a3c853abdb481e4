# torcsga

A simple binary-coded genetic algorithm for tuning the weights of a neural
car controller in the TORCS racing simulator. It offers:

- binary chromosomes sized to hold a given number of decimal digits of
  precision for each variable (`torcsga.individual.Individual`),
- roulette-wheel parent selection,
- one-point crossover and uniform bit-flip mutation,
- elitism: the best individual found so far is copied into a random slot of
  every new generation,
- an island model (`torcsga.genetic.Archipelago`) in which several
  populations evolve side by side and pass migrants around a ring every few
  generations.

## Installation

```
pip install .
```

Add the `test` extra to also install pytest:

```
pip install .[test]
```

## The `torcsga` command

```
torcsga [--problem {torcs,cannon}] [--islands N] [--pop-size N]
        [--generations N] [--pc P] [--pm P] [--precision N]
        [--migrants N] [--epoch N] [--seed N] [--center D]
        [--workdir DIR] [--output-dir DIR]
```

| Option | Default | Meaning |
| --- | --- | --- |
| `--problem` | `torcs` | `torcs` races a car, `cannon` solves the projectile problem |
| `--islands` | `1` | number of populations |
| `--pop-size` | `16` | individuals per island |
| `--generations` | `4` | maximum generation number |
| `--pc` | `0.9` | crossover probability |
| `--pm` | `0.1` | mutation probability as reported; the run itself uses `1 / chromosome length` |
| `--precision` | `6` | decimal digits kept for each variable |
| `--migrants` | `4` | individuals that leave and arrive at each migration |
| `--epoch` | `3` | migrate when the generation number is a multiple of this |
| `--seed` | none | seed for reproducible runs |
| `--center` | `15.0` | target distance for the cannon problem |
| `--workdir` | `.` | directory holding the TORCS launch scripts |
| `--output-dir` | `salidafinal` | where the final population is written |

Invalid parameters, such as a population size below 1 or more migrants than
individuals, are rejected with a usage error. Each generation's report is
written to standard output. At the end the variables of every individual of
every island go into `<output-dir>/pesos_pob.txt`. Their evaluations and
constraint values go into `<output-dir>/evals_pob.txt`.

### Racing in TORCS

For `--problem torcs` the working directory (`--workdir`) must hold the
scripts `launch_torcs_client.sh` and `launch_torcs_server.sh` and a
`comunicacion/` directory. Island *N* evaluates a candidate in these steps:

1. It writes the 120 weights (24 inputs × 5 outputs, each in
   `[-800, 800]`) to `comunicacion/pesos_NN.txt`.
2. It runs the client script with port `3001 + N`.
3. It runs the server script on track `g-track-2` and waits for it to end.
4. It reads `comunicacion/salida_NN.txt`. That file holds position, time,
   damage, fuel and distance left.

The race time is the objective and the distance left is the constraint. A
race with a non-zero time has fitness `1 / time`. A zero time means the car
did not finish. Its fitness is then `1 / (distance_left + worst_time_seen)`.

## Using the library

The cannon problem needs no simulator. The search looks for an angle and a
speed that land a projectile at a target distance:

```python
import io
import random

from torcsga.genetic import GAParams, GeneticAlgorithm
from torcsga.problems import CannonProblem

params = GAParams(pop_size=16, gmax=20, pc=0.9, pm=0.1, precision=4,
                  migrants=4, epoch=5)
ga = GeneticAlgorithm(CannonProblem(15.0), params, random.Random(1), io.StringIO())
ga.initialize()
for gen in range(2, params.gmax + 1):
    ga.step(gen)
print(ga.stats.best.x, ga.stats.best.evaluation)
```

Several islands with migration:

```python
from torcsga.genetic import Archipelago, GAParams
from torcsga.problems import CannonProblem

arch = Archipelago(lambda island: CannonProblem(15.0), GAParams(gmax=10),
                   num_islands=3, seed=7)
final = arch.optimize()          # every island's last population
arch.write_results("salidafinal")
```

To define a problem of your own, subclass `torcsga.problems.Problem`. Set
`ranges` to one `(low, high)` pair per variable. Implement `evaluate(x)` so
that it returns the objective value together with a list of constraint
values. The fitness rule above treats lower objective values as better.

## Limitations

- Islands run one after another in a single process. They do not run in
  parallel, so TORCS races on different islands never overlap.
- The package does not include the TORCS simulator, the car controller or the
  launch scripts. It only writes weight files, runs the scripts and reads
  their results.
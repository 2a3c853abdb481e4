"""Car-controller optimisation through the TORCS racing simulator."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Sequence

from .problems import Evaluation, Problem

TRACK_NAME = "g-track-2"
CLIENT_SCRIPT = "./launch_torcs_client.sh"
SERVER_SCRIPT = "./launch_torcs_server.sh"
BASE_PORT = 3001


def parse_evaluation(text: str) -> Evaluation:
    """Parse a simulator result line.

    The line holds position, time, damage, remaining fuel and the distance
    left to finish. The time is the objective and the remaining distance
    the single constraint.
    """
    fields = text.split()
    if len(fields) < 5:
        raise ValueError(f"expected 5 values in evaluation, got {len(fields)}")
    _position, time, _damage, _fuel, dist_to_go = (float(v) for v in fields[:5])
    return time, [dist_to_go]


def format_weights(
    num_inputs: int, num_outputs: int, num_hidden: int, weights: Sequence[float]
) -> str:
    """Render the neural-network weight file read by the car controller."""
    header = f"{num_inputs:>11}\n{num_outputs}\n{num_hidden}\n"
    return header + "".join(f"{w:.6f}\t" for w in weights)


class TorcsProblem(Problem):
    """Evaluate controller weights by racing a car in a TORCS server."""

    def __init__(self, server_id: int = 0, workdir: str | Path = ".") -> None:
        self.num_inputs = 24
        self.num_outputs = 5
        self.num_hidden = 0
        super().__init__("TORCS simulation", self.num_inputs * self.num_outputs, 1)
        self.server_id = server_id
        self.workdir = Path(workdir)
        self.ranges = [(-800.0, 800.0)] * self.num_variables

    def _relative_weights(self) -> str:
        return f"./comunicacion/pesos_{self.server_id:02d}.txt"

    def _relative_output(self) -> str:
        return f"./comunicacion/salida_{self.server_id:02d}.txt"

    def weights_path(self) -> Path:
        """Path of the weight file for this server."""
        return self.workdir / self._relative_weights()

    def output_path(self) -> Path:
        """Path of the result file for this server."""
        return self.workdir / self._relative_output()

    def write_weights(self, weights: Sequence[float]) -> None:
        """Write ``weights`` into this server's weight file."""
        text = format_weights(self.num_inputs, self.num_outputs, self.num_hidden, weights)
        self.weights_path().write_text(text)

    def read_evaluation(self) -> Evaluation:
        """Read the objective and constraint from this server's result file."""
        return parse_evaluation(self.output_path().read_text())

    def launch_client(self, port: int) -> None:
        """Run the client launcher script for this server."""
        args = [
            CLIENT_SCRIPT,
            str(port),
            self._relative_weights(),
            self._relative_output(),
            str(self.server_id),
            "1",
        ]
        print(" ".join(args), flush=True)
        subprocess.run(args, cwd=self.workdir, check=False)

    def launch_server(self) -> None:
        """Run the race server and wait for it to finish."""
        args = [SERVER_SCRIPT, str(self.server_id), self._relative_output(), TRACK_NAME]
        sys.stdout.flush()
        subprocess.run(args, cwd=self.workdir, check=False)
        print("\nArchivo de resultados listo.", file=sys.stderr)

    def evaluate(self, x: Sequence[float]) -> Evaluation:
        print("\n\nEvaluando un individuo\n", flush=True)
        self.write_weights(x)
        self.launch_client(BASE_PORT + self.server_id)
        self.launch_server()
        result = self.read_evaluation()
        print("\n\nTerminó de evaluar un individuo\n", flush=True)
        return result
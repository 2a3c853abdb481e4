"""Command-line entry point for the island genetic algorithm."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .genetic import Archipelago, GAParams
from .problems import CannonProblem
from .torcs import TorcsProblem


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torcsga",
        description="Optimise with a genetic algorithm running on migrating islands.",
    )
    parser.add_argument("--problem", choices=("torcs", "cannon"), default="torcs")
    parser.add_argument("--islands", type=int, default=1)
    parser.add_argument("--pop-size", type=int, default=16)
    parser.add_argument("--generations", type=int, default=4)
    parser.add_argument("--pc", type=float, default=0.9)
    parser.add_argument("--pm", type=float, default=0.1)
    parser.add_argument("--precision", type=int, default=6)
    parser.add_argument("--migrants", type=int, default=4)
    parser.add_argument("--epoch", type=int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--center", type=float, default=15.0,
                        help="target distance for the cannon problem")
    parser.add_argument("--workdir", default=".",
                        help="directory holding the TORCS launch scripts")
    parser.add_argument("--output-dir", default="salidafinal")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    try:
        params = GAParams(
            pop_size=args.pop_size,
            gmax=args.generations,
            pc=args.pc,
            pm=args.pm,
            precision=args.precision,
            migrants=args.migrants,
            epoch=args.epoch,
        )
    except ValueError as error:
        parser.error(str(error))
    if args.islands < 1:
        parser.error("at least one island is needed")

    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        print(f"\nNo se pudo crear el directorio de salida '{output_dir}'\n", file=sys.stderr)
        return 1

    if args.problem == "cannon":
        def factory(island: int):
            return CannonProblem(args.center)
    else:
        def factory(island: int):
            return TorcsProblem(island, args.workdir)

    archipelago = Archipelago(factory, params, args.islands, args.seed)
    archipelago.optimize()
    archipelago.write_results(output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
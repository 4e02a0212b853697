"""Command-line front end.

Usage:
    quasar-sim run bell --shots 1000 --seed 42
    quasar-sim run circuit.qsim --plot hist.png --output counts.json
    quasar-sim gates
    quasar-sim verify
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from quasar_sim.core.config import AppConfig
from quasar_sim.core.export import ResultExporter
from quasar_sim.core.serialization import CircuitSerializer
from quasar_sim.core.verification import run_all
from quasar_sim.engine.algorithms import TEMPLATES, build_template
from quasar_sim.engine.circuit import QuantumCircuit
from quasar_sim.engine.errors import SimulatorError
from quasar_sim.engine.gate_registry import GateRegistry
from quasar_sim.engine.measurement import index_to_bitstring
from quasar_sim.engine.simulator import Simulator

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

# Amplitudes below this are omitted from --state output
_STATE_PRINT_CUTOFF = 1e-12


def _load_circuit(source: str, num_qubits: int | None) -> QuantumCircuit:
    if source in TEMPLATES:
        return build_template(source, num_qubits)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(
            f"{source!r} is neither a circuit file nor a template "
            f"({', '.join(TEMPLATES)})")
    return CircuitSerializer.load(path)


def cmd_run(args: argparse.Namespace, config: AppConfig) -> int:
    circuit = _load_circuit(args.circuit, args.qubits)
    shots = args.shots if args.shots is not None else config.default_shots
    seed = args.seed if args.seed is not None else config.seed
    if circuit.num_qubits > config.max_qubits:
        print(f"Circuit uses {circuit.num_qubits} qubits; configured maximum is "
              f"{config.max_qubits}", file=sys.stderr)
        return 1

    print(f"Running {circuit.name or args.circuit}: {circuit.num_qubits} qubits, "
          f"{circuit.gate_count()} gates, depth {circuit.depth()}, "
          f"shots={shots}, seed={seed}")

    sim = Simulator(seed=seed)
    result = sim.execute(circuit, shots)
    counts = result.measurement_counts

    if args.state:
        print("\nFinal state (qubit 0 first):")
        state = result.final_state
        for index, amp in enumerate(state.data):
            if abs(amp) > _STATE_PRINT_CUTOFF:
                print(f"  |{index_to_bitstring(index, state.num_qubits)}>  "
                      f"{amp.real:+.6f}{amp.imag:+.6f}i  "
                      f"p={state.probability(index):.6f}")

    if counts:
        print("\nCounts:")
        for outcome, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
            print(f"  {outcome}: {count} ({counts.probability(outcome):.1%})")

    metadata = {"circuit": circuit.name or args.circuit, "seed": seed}
    if args.output:
        ResultExporter.export_counts_json(counts, args.output, metadata)
        print(f"Counts saved to {args.output}")
    if args.plot:
        ResultExporter.export_histogram_png(
            counts, args.plot, title=f"{metadata['circuit']} ({shots} shots)",
            dpi=config.plot_dpi)
        print(f"Histogram saved to {args.plot}")

    if Path(args.circuit).exists():
        config.add_recent_file(str(Path(args.circuit).resolve()))
        try:
            config.save()
        except OSError as e:
            logger.warning("Could not save config: %s", e)
    return 0


def cmd_gates(args: argparse.Namespace, config: AppConfig) -> int:
    registry = GateRegistry.instance()
    print(f"{'Name':<10} {'Qubits':>6} {'Params':>6}  {'Type':<12} Description")
    for gate_def in registry.all_gates():
        arity = gate_def.num_qubits or "any"
        print(f"{gate_def.name:<10} {arity!s:>6} {gate_def.num_params:>6}  "
              f"{gate_def.gate_type.value:<12} {gate_def.display_name}")
    return 0


def cmd_verify(args: argparse.Namespace, config: AppConfig) -> int:
    report = run_all(tolerance=config.tolerance)
    return 0 if report.ok else 1


def cmd_version(args: argparse.Namespace, config: AppConfig) -> int:
    print(f"quasar-sim {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quasar-sim", description="State-vector quantum circuit simulator")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="simulate a .qsim file or a built-in template")
    run.add_argument("circuit", help=f"circuit file or one of: {', '.join(TEMPLATES)}")
    run.add_argument("--shots", type=int, default=None)
    run.add_argument("--seed", type=int, default=None)
    run.add_argument("--qubits", type=int, default=None,
                     help="register size for templates that take one")
    run.add_argument("--output", type=str, default=None, help="write counts as JSON")
    run.add_argument("--plot", type=str, default=None, help="write a histogram PNG")
    run.add_argument("--state", action="store_true", help="print the final amplitudes")
    run.set_defaults(func=cmd_run)

    sub.add_parser("gates", help="list supported gates").set_defaults(func=cmd_gates)
    sub.add_parser("verify", help="run physics self-checks").set_defaults(func=cmd_verify)
    sub.add_parser("version", help="print the version").set_defaults(func=cmd_version)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.load()

    level = logging.DEBUG if args.verbose else getattr(
        logging, str(config.log_level).upper(), logging.WARNING)
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args, config)
    except (SimulatorError, FileNotFoundError, KeyError, ValueError) as e:
        logger.debug("Command '%s' failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

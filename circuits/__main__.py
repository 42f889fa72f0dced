#!/usr/bin/env python3
"""Run a Fibonacci circuit through keygen and the mock prover.

Usage:
    python -m circuits --layout single -a 1 -b 1 --rows 10 --k 4
    python -m circuits --layout multi --output 56      # rejected
    python -m circuits --config fibo.json
"""

import argparse
import logging
import sys
from pathlib import Path

from circuits.params import FiboParams
from plonkish import MockProver, PlonkishError, keygen

logger = logging.getLogger("circuits")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Check a Fibonacci circuit witness with the mock prover'
    )
    parser.add_argument(
        '--config',
        type=Path,
        help='JSON file with FiboParams fields; command-line options override it'
    )
    parser.add_argument('--layout', choices=['multi', 'single'], help='Table layout')
    parser.add_argument('--k', type=int, help='log2 of the table height')
    parser.add_argument('--rows', dest='n_rows', type=int, help='Number of sequence terms')
    parser.add_argument('-a', type=int, help='First seed')
    parser.add_argument('-b', type=int, help='Second seed')
    parser.add_argument('--output', type=int, help='Claimed last term (default: the correct one)')
    parser.add_argument('--field', choices=['goldilocks', 'pallas'], help='Prime field')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def params_from_args(args: argparse.Namespace) -> FiboParams:
    data = FiboParams.from_json(args.config).to_dict() if args.config else {}
    for name in ('layout', 'k', 'n_rows', 'a', 'b', 'output', 'field'):
        value = getattr(args, name)
        if value is not None:
            data[name] = value
    return FiboParams.from_dict(data)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        params = params_from_args(args)
    except (ValueError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    field = params.field_class()
    circuit = params.circuit()
    instances = params.instances()

    logger.info("Layout %s, k=%d, %d terms, public inputs %s",
                params.layout, params.k, params.n_rows, instances[0])
    try:
        key = keygen(params.k, circuit, field=field)
        prover = MockProver.run(params.k, circuit, instances, field=field)
    except PlonkishError as e:
        print(f"ERROR: {type(e).__name__}: {e}")
        return 1

    if not key.is_compatible(prover.table):
        print("ERROR: witness table does not match the circuit key")
        return 1

    failures = prover.verify()
    if failures:
        print(f"ERROR: {len(failures)} failure(s)")
        for failure in failures:
            print(f"  {failure}")
        return 1

    print("satisfied")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI entrypoint: python -m rule30rng.runner.run_sample

Usage:
    python -m rule30rng.runner.run_sample --seed 12345 --size 255 --bit-spacing 8 --bits 65536
    python -m rule30rng.runner.run_sample --config storage/configs/wide.json --out storage/runs
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from pathlib import Path

from pydantic import ValidationError

from rule30rng.config.defaults import default_config
from rule30rng.config.schema import RunConfig
from rule30rng.runner.run_logger import RunLogger
from rule30rng.runner.sample_run import run_sampling


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Draw bits from a generator and record stream statistics."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file validated as a RunConfig. Flags below override it.",
    )
    parser.add_argument(
        "--kind",
        choices=["rule30", "platform"],
        default=None,
        help="Bit source.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Unsigned 64-bit seed.")
    parser.add_argument("--size", type=int, default=None, help="Automaton width in cells.")
    parser.add_argument(
        "--bit-spacing",
        type=int,
        default=None,
        help="Stride between output cells.",
    )
    parser.add_argument("--bits", type=int, default=None, help="Number of bits to draw.")
    parser.add_argument(
        "--block-size",
        type=int,
        default=None,
        help="Bits per metrics block.",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write run artifacts under this directory.",
    )
    parser.add_argument("--run-id", default=None, help="Run directory name.")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> RunConfig:
    if args.config is not None:
        raw = args.config.read_text(encoding="utf-8")
        data = json.loads(raw)
    else:
        data = default_config().model_dump()

    gen = data.setdefault("generator", {})
    for key, value in (
        ("kind", args.kind),
        ("seed", args.seed),
        ("size", args.size),
        ("bit_spacing", args.bit_spacing),
    ):
        if value is not None:
            gen[key] = value
    if args.bits is not None:
        data["num_bits"] = args.bits
    if args.block_size is not None:
        data.setdefault("instrumentation", {})["block_size"] = args.block_size

    return RunConfig.model_validate(data)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.config is not None and not args.config.exists():
        print(f"ERROR: config not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    try:
        config = _build_config(args)
    except ValidationError as exc:
        print(f"ERROR: invalid config:\n{exc}", file=sys.stderr)
        sys.exit(2)

    logger = None
    if args.out is not None:
        run_id = args.run_id or f"run_{uuid.uuid4().hex[:12]}"
        logger = RunLogger(args.out, run_id)

    gen = config.generator
    print(
        f"Drawing {config.num_bits} bits from {gen.kind} "
        f"(seed={gen.seed}, size={gen.size}, bit_spacing={gen.bit_spacing}) ..."
    )
    result = run_sampling(config, logger=logger)

    print(f"Seed: {result.config.generator.seed}")
    print(f"Preview: {result.preview.hex()}")
    for key, value in result.summary.items():
        print(f"  {key}: {value}")
    if result.events:
        print(f"  {len(result.events)} flagged block(s)")
    if logger is not None:
        print(f"Artifacts saved to: {logger.run_dir}")


if __name__ == "__main__":
    main()

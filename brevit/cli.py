"""
cli.py — optimize a JSON/YAML/text file for LLM consumption.

Usage:
    brevit input.json                 # stdout
    brevit -                          # read stdin
    cat input.json | brevit           # read stdin (no args)
    brevit input.json -o out.txt -q
    brevit input.json --auto          # pick a strategy from the data's shape
    brevit input.json --mode ToYaml --no-abbreviations
"""

import argparse
import asyncio
import logging
import sys

from brevit.client import BrevitClient
from brevit.config import BrevitConfig, JsonOptimizationMode
from brevit.tokens import stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brevit",
        description="Flatten JSON into compact, token-efficient text for LLM prompts.",
    )
    parser.add_argument(
        "input", nargs="?", default="-",
        help="Input file (default: stdin, or use '-' explicitly)"
    )
    parser.add_argument(
        "-o", "--output", default=None,
        help="Output file (default: stdout)"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Suppress compression stats on stderr"
    )
    parser.add_argument(
        "--config", default=None,
        help="JSON config file (default: BREVIT_CONFIG or BREVIT_* env vars)"
    )
    parser.add_argument(
        "--mode", default=None, choices=[m.value for m in JsonOptimizationMode],
        help="JSON optimization mode"
    )
    parser.add_argument(
        "--auto", action="store_true",
        help="Choose the strategy from the input's structure"
    )
    parser.add_argument(
        "--no-abbreviations", action="store_true",
        help="Disable @alias prefix abbreviations"
    )
    parser.add_argument(
        "--abbreviation-threshold", type=int, default=None,
        help="Minimum lines sharing a prefix before it may be aliased"
    )
    parser.add_argument(
        "--yaml", action="store_true",
        help="Also accept YAML input"
    )
    return parser


def load_config(args: argparse.Namespace) -> BrevitConfig:
    config = BrevitConfig.from_file(args.config) if args.config else BrevitConfig.load()
    if args.mode:
        config.json_mode = JsonOptimizationMode(args.mode)
    if args.no_abbreviations:
        config.enable_abbreviations = False
    if args.abbreviation_threshold is not None:
        config.abbreviation_threshold = args.abbreviation_threshold
    if args.yaml and "yaml" not in config.input_formats:
        config.input_formats = [*config.input_formats, "yaml"]
    return config


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=logging.WARNING,
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)

    if args.input == "-":
        raw = sys.stdin.read()
    else:
        with open(args.input) as f:
            raw = f.read()

    try:
        config = load_config(args)
        client = BrevitClient(config)
        run = client.brevity if args.auto else client.optimize
        result = asyncio.run(run(raw))
    except ValueError as exc:  # includes InvalidInputError
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        s = stats(raw, result)
        print(f"=== Compression Stats ({s['method']}) ===", file=sys.stderr)
        print(f"Original:  {s['orig_chars']:>8,} chars  ({s['orig_tok']:,} tokens)", file=sys.stderr)
        print(f"Optimized: {s['cond_chars']:>8,} chars  ({s['cond_tok']:,} tokens)", file=sys.stderr)
        print(f"Reduction: {s['char_pct']}% chars, {s['tok_pct']}% tokens", file=sys.stderr)
        print(f"{'=' * 42}", file=sys.stderr)

    if args.output:
        with open(args.output, "w") as f:
            f.write(result)
        if not args.quiet:
            print(f"→ {args.output}", file=sys.stderr)
    else:
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())

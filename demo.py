"""
demo.py

Minimal CLI demo for pairswap.
- Traces the pair swap over the given integers (default 1 2 3 4)
- Audits the trace against the reference algorithm
- Prints the step-by-step explanation, optionally writing the trace as JSON

Usage:
    python demo.py 1 2 3 4 5 --json trace.json --verbose
"""

import argparse
import logging
import sys
from typing import List, Optional

from pairswap import TraceAudit, generate_steps

logger = logging.getLogger("pairswap.demo")

DEFAULT_VALUES = [1, 2, 3, 4]


def _setup_logging(verbose: bool) -> None:
    """Send pairswap log records to stderr."""
    root = logging.getLogger("pairswap")
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trace swapping adjacent nodes of a linked list")
    parser.add_argument("values", nargs="*", type=int, help="List values (default: 1 2 3 4)")
    parser.add_argument("--json", metavar="PATH", help="Write the trace as JSON to PATH")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None, *, configure_logging: bool = True) -> int:
    try:
        args = _build_parser().parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 2

    if configure_logging:
        _setup_logging(args.verbose)

    values = args.values or DEFAULT_VALUES
    trace = generate_steps(values)
    audit = TraceAudit(trace)
    validation = audit.validate()

    print(audit.to_text())
    print(f"\nValidation: {validation.status.value}")
    for issue in validation.issues:
        print(f"  - {issue}")

    if args.json is not None:
        with open(args.json, 'w', encoding='utf-8') as f:
            f.write(trace.to_json(indent=2))
        logger.info("Trace written to %s", args.json)

    return 0 if validation.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())

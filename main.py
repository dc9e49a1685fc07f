"""Miary v2.0 — CLI entry point."""

import argparse
import json
import logging
import sys

from miary import analysis_to_dict, analyze, generate_report
from miary.exceptions import MiaryError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the diary analysis on a JSON input file")
    parser.add_argument("input", help="Path to the analysis input JSON")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        result = analyze(args.input)
    except (FileNotFoundError, MiaryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(analysis_to_dict(result), indent=2, ensure_ascii=False))
    else:
        print(generate_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())

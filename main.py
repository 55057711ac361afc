"""NeuroTrack v1.0 — CLI entry point."""

import argparse
import logging

from neurotrack import analyze, generate_report


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a NeuroTrack JSON history.")
    parser.add_argument("history", nargs="?", default="test_data.json", help="JSON history export")
    parser.add_argument("--today", default=None, help="reference date (YYYY-MM-DD); defaults to now")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    result = analyze(args.history, now=args.today)
    print(generate_report(result))


if __name__ == "__main__":
    main()

"""
Run one query from the command line and print the ranked results.

Usage:
    python -m omnibar "saf"
    python -m omnibar "= 2 + 2" --verbose
    python -m omnibar "lock" --run 1      # dispatch the first result
    python -m omnibar "" --settings dev.toml
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from omnibar import config
from omnibar.actions.dispatcher import RequiresConfirmation
from omnibar.palette import create_palette
from omnibar.services.applications import DesktopCatalog
from omnibar.services.frecency import FrecencyService


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="omnibar", description=__doc__.splitlines()[1])
    parser.add_argument("query", help="Query string")
    parser.add_argument("--settings", help="Path to settings.toml")
    parser.add_argument("--run", type=int, metavar="N", help="Dispatch the Nth result (1-based)")
    parser.add_argument("--yes", action="store_true", help="Confirm destructive actions")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    settings = config.load_settings(args.settings)
    frecency = None
    if settings["history"]["enabled"]:
        frecency = FrecencyService(Path(settings["history"]["db_path"]).expanduser())
    catalog = DesktopCatalog(settings["applications"]["dirs"] or None)

    palette = create_palette(settings=settings, catalog=catalog, frecency=frecency)
    try:
        results = palette.session.run_query(args.query)
        for i, result in enumerate(results, start=1):
            subtitle = f"  ({result.subtitle})" if result.subtitle else ""
            print(f"{i:>3}. [{result.category.key}] {result.title}{subtitle}  {result.relevance_score:.2f}")

        if args.run is None:
            return 0
        if not 1 <= args.run <= len(results):
            print(f"No result #{args.run}", file=sys.stderr)
            return 1

        action = results[args.run - 1].action
        outcome = palette.dispatcher.dispatch(action)
        if isinstance(outcome, RequiresConfirmation):
            if not args.yes:
                print(f"{action.description} requires confirmation, rerun with --yes")
                return 1
            outcome = palette.dispatcher.confirm_and_dispatch(action)

        if not outcome.ok:
            print(f"{action.description} failed: {outcome.reason}", file=sys.stderr)
            return 1
        print(f"{action.description}: done")
        return 0
    finally:
        palette.close()
        if frecency is not None:
            frecency.close()


if __name__ == "__main__":
    sys.exit(main())

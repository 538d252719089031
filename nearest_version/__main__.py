"""Print the nearest version tags of a git repository."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import LocatorConfig
from .git import GitCommandError

logger = logging.getLogger(__name__)


def text_lines(nearest):
    return [f"{key}={value}" for key, value in nearest.to_dict().items()]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="nearest-version",
        description="Find the nearest semver tags from HEAD and their commit distances.",
    )
    parser.add_argument("--repo", type=Path, help="repository directory (default: $NEAREST_VERSION_REPO_DIR or cwd)")
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument("--github-output", type=Path, help="also append key=value lines to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log git commands and tag decisions")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LocatorConfig.from_env()
    except ValueError as e:
        parser.error(str(e))
    if args.repo is not None:
        config.repo_dir = args.repo

    try:
        nearest = config.build_locator().locate()
    except GitCommandError as e:
        logger.debug("Locate failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    lines = text_lines(nearest)
    if args.format == "json":
        print(json.dumps(nearest.to_dict(), indent=2))
    else:
        print("\n".join(lines))

    if args.github_output is not None:
        with args.github_output.open(mode="a", encoding="utf-8") as outfile:
            outfile.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import argparse
import glob
import logging
import os
import sys
from typing import List, Optional

from howis import config as env
from howis.container import Container
from howis.exceptions import LedgerError, LocalFileError

_WILDCARDS = ("*", "?", "[")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="howis",
        description="Check that local files are byte-identical to their remote sources.",
    )
    parser.add_argument("files", nargs="+", metavar="FILE", help="Files to check integrity of")
    parser.add_argument("-s", "--src", required=True, help="Source URL list file or template string")
    parser.add_argument("-r", "--rec", default=None, help="Record file to resume progress from (default: howis.txt)")
    parser.add_argument("-u", "--user", default=None, help="Server username")
    parser.add_argument("-p", "--pass", dest="password", default=None, help="Server password")
    parser.add_argument("--version", action="version", version=f"%(prog)s {env.VERSION}")
    return parser


def expand_file_args(args: List[str]) -> List[str]:
    """Expand wildcard arguments the shell left alone (e.g. on Windows).

    A pattern matching nothing is kept as-is so it gets reported as not a file.
    """
    expanded: List[str] = []
    for arg in args:
        if any(c in arg for c in _WILDCARDS) and not os.path.exists(arg):
            matches = sorted(glob.glob(arg))
            if matches:
                expanded.extend(matches)
                continue
        expanded.append(arg)
    return expanded


def main(argv: Optional[List[str]] = None, container: Optional[Container] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=env.log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Allow injecting a pre-configured container for testing
    if container is None:
        container = Container()
    container.config.SOURCE.from_value(args.src)
    container.config.USERNAME.from_value(args.user)
    container.config.PASSWORD.from_value(args.password)
    if args.rec is not None:
        container.config.HOWIS_RECORD_FILE.from_value(args.rec)

    try:
        container.source()
    except (OSError, ValueError) as e:
        print(f"error: invalid source {args.src!r}: {e}", file=sys.stderr)
        return 1

    try:
        runner = container.verification_runner()
        runner.run(expand_file_args(args.files))
    except (LedgerError, LocalFileError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        container.shutdown_resources()
    return 0


if __name__ == '__main__':
    sys.exit(main())

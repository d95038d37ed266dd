from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .build import push, render
from .config import CONFIG_FILE, load_config
from .errors import MdrUserError
from .version import tool_version
from .watch import WatchSession


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mdr",
        description="Render .mdoc templates to Markdown (.g.md)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--config",
        metavar="PATH",
        help=f"config file (default: ./{CONFIG_FILE})",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="debug output",
    )
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("render", help="Render all .mdoc files (output files must already exist)")
    sub.add_parser("watch", help="Watch for changes and render automatically")
    sub.add_parser("push", help="Create/update all output files (creates missing .g.md files)")
    return p


def _setup_logging(verbose: bool) -> None:
    log = logging.getLogger("mdr")
    debug = verbose or bool(os.environ.get("MDR_DEBUG"))
    log.setLevel(logging.DEBUG if debug else logging.INFO)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        cfg = load_config(Path(ns.config) if ns.config else None)

        if ns.cmd == "render":
            report = render(cfg)
            sys.stdout.write(report.summary() + "\n")
            return 0 if report.ok else 1

        if ns.cmd == "push":
            report = push(cfg)
            sys.stdout.write(report.summary() + "\n")
            return 0

        if ns.cmd == "watch":
            WatchSession(cfg).run_forever()
            return 0

    except MdrUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())

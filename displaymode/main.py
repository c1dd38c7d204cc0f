from __future__ import annotations

import argparse
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import List, Optional, TextIO

from .config import AppConfig
from .display.xrandr_backend import XRandRBackend
from .errors import (
    DisplayModeError,
    DisplayUnavailable,
    ModeSetError,
    NoPrimaryOutput,
    SnapshotError,
    UnknownOutput,
)
from .logging_setup import setup_logging
from .modes.catalog import build_catalog
from .modes.parser import parse_mode_spec
from .modes.rate import format_rate
from .modes.selector import select_mode
from .ui.listing import render_modes, render_outputs, render_rates


class ExitCode(IntEnum):
    OK = 0
    MODE_SET_FAILED = 252
    UNKNOWN_OUTPUT = 253
    NO_PRIMARY_OUTPUT = 254
    DATA_UNAVAILABLE = 255


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="displaymode",
        description="Show or set the refresh rate and resolution of a display output.",
        usage=(
            "%(prog)s [-o OUTPUT] [WIDTHxHEIGHT@]RATE\n"
            "       %(prog)s --list-outputs\n"
            "       %(prog)s --list-modes"
        ),
    )
    parser.add_argument("mode", nargs="?", default=None, metavar="[WIDTHxHEIGHT@]RATE",
                        help="mode to set, e.g. 144, 1920x1080 or 2560x1440@59.95, or a configured alias")
    parser.add_argument("-o", "--output", dest="output", default=None,
                        help="output to act on (default: the primary output)")
    parser.add_argument("--list-outputs", dest="list_outputs", action="store_true",
                        help="list output names, the primary one in bold")
    parser.add_argument("--list-modes", dest="list_modes", action="store_true",
                        help="list every resolution and refresh rate of the output")
    parser.add_argument("--config", dest="config", type=Path, default=None,
                        help="path to a YAML config file")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        help="log debug output to the console")
    return parser


def _fail(code: ExitCode, exc: DisplayModeError, err: TextIO) -> int:
    logging.getLogger("cli").info("Exiting with %s: %s", code.name, exc)
    print(f"Error: {exc}", file=err)
    return int(code)


def execute(
    args: argparse.Namespace,
    config: AppConfig,
    backend: XRandRBackend,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run one command against ``backend`` and return the process exit code."""
    out = out or sys.stdout
    err = err or sys.stderr
    log = logging.getLogger("cli")

    listing = args.list_modes or args.list_outputs
    set_mode = args.mode is not None and not listing
    list_rates = not listing and not set_mode

    with backend:
        try:
            snapshot = backend.snapshot()
        except (DisplayUnavailable, SnapshotError) as exc:
            return _fail(ExitCode.DATA_UNAVAILABLE, exc, err)

        output_name = args.output or config.default_output
        try:
            output = snapshot.output(output_name) if output_name else snapshot.primary_output()
        except NoPrimaryOutput as exc:
            return _fail(ExitCode.NO_PRIMARY_OUTPUT, exc, err)
        except UnknownOutput as exc:
            return _fail(ExitCode.UNKNOWN_OUTPUT, exc, err)

        catalog = build_catalog(snapshot, output)

        if list_rates:
            out.write(render_rates(output.name, catalog, config.color))
        if args.list_modes:
            out.write(render_modes(output.name, catalog, config.color))
        if args.list_outputs:
            out.write(render_outputs(snapshot, config.color))

        if set_mode:
            mode_text = config.resolve_alias(args.mode)
            if mode_text != args.mode:
                log.debug("Alias %s -> %s", args.mode, mode_text)
            try:
                spec = parse_mode_spec(mode_text)
                mode_id = select_mode(spec, catalog, snapshot.current_mode_of(output))
                backend.apply_mode(output, mode_id)
            except ModeSetError as exc:
                return _fail(ExitCode.MODE_SET_FAILED, exc, err)
            mode = snapshot.mode(mode_id)
            log.info("%s now at %dx%d@%s", output.name, mode.width, mode.height, format_rate(mode.rate))

    return int(ExitCode.OK)


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = AppConfig(args.config)
    setup_logging(config, args.verbose)
    return execute(args, config, XRandRBackend(config.display_name))


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()

# lxitool/cli/args.py
from __future__ import annotations

import argparse
import sys
from typing import Optional

from lxitool import __version__
from lxitool.app.settings import Settings
from lxitool.core.config import Command, Configuration
from lxitool.core.errors import UsageError


PROG = "lxi"


def timeout_seconds(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout '{value}' (whole seconds expected)") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be positive (got {n})")
    return n


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings()

    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s [--version] [--help] <command> [<options>] [<scpi command>]",
        description="Command line tool for LXI instruments.",
        epilog="Run '%(prog)s <command> --help' for the options of a command.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s v{__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True, metavar="<command>")

    p_discover = sub.add_parser("discover", help="Search for LXI devices")
    p_discover.add_argument(
        "-t", "--timeout",
        type=timeout_seconds,
        default=settings.discover_timeout,
        metavar="<seconds>",
        help="Timeout (default: %(default)s)",
    )

    p_scpi = sub.add_parser("scpi", help="Send SCPI command")
    p_scpi.add_argument("-i", "--ip", default="", metavar="<ip>", help="IP address")
    p_scpi.add_argument(
        "-t", "--timeout",
        type=timeout_seconds,
        default=settings.scpi_timeout,
        metavar="<seconds>",
        help="Timeout (default: %(default)s)",
    )
    p_scpi.add_argument("-x", "--dump-hex", action="store_true", help="Print response in hexadecimal")
    p_scpi.add_argument("-f", "--dump-file", default=None, metavar="<filename>", help="Save response to file")
    p_scpi.add_argument("-a", "--interactive", action="store_true", help="Enter interactive mode")
    p_scpi.add_argument("-r", "--run-script", default=None, metavar="<filename>", help="Run script")
    p_scpi.add_argument("scpi_command", nargs="?", default="", metavar="<scpi command>")

    p_shot = sub.add_parser("screenshot", help="Capture a screenshot of the instrument display")
    p_shot.add_argument("-i", "--ip", default="", metavar="<ip>", help="IP address")
    p_shot.add_argument(
        "-t", "--timeout",
        type=timeout_seconds,
        default=settings.screenshot_timeout,
        metavar="<seconds>",
        help="Timeout (default: %(default)s)",
    )
    p_shot.add_argument("filename", nargs="?", default="", metavar="<filename>")

    return parser


def _to_configuration(args: argparse.Namespace, settings: Settings) -> Configuration:
    command = Command(args.cmd)
    common = {
        "command": command,
        "timeout_s": args.timeout,
        "transport": settings.transport,
        "port": settings.port,
    }

    if command is Command.DISCOVER:
        return Configuration(**common)

    if command is Command.SCREENSHOT:
        return Configuration(**common, address=args.ip, output_filename=args.filename)

    return Configuration(
        **common,
        address=args.ip,
        scpi_command=args.scpi_command,
        dump_hex=args.dump_hex,
        dump_file=args.dump_file is not None,
        output_filename=args.dump_file or "",
        interactive=args.interactive,
        run_script=args.run_script is not None,
        script_filename=args.run_script or "",
    )


def parse_args(argv: Optional[list[str]] = None, *, settings: Optional[Settings] = None) -> Configuration:
    """
    Resolve argv into a validated Configuration.

    - no arguments: print help and exit 0
    - unknown flags: argparse error (exit 2)
    - inline SCPI command without --ip: ConfigurationError
    - leftover positional tokens: UsageError
    """
    settings = settings or Settings()
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser(settings)

    if not argv:
        parser.print_help()
        parser.exit(0)

    args, extras = parser.parse_known_args(argv)

    bad_flags = [t for t in extras if t.startswith("-") and t != "-"]
    if bad_flags:
        parser.error(f"unrecognized option(s): {' '.join(bad_flags)}")

    config = _to_configuration(args, settings).validate()

    if extras:
        raise UsageError(
            f"Unknown arguments: {' '.join(extras)}",
            hint="Quote SCPI commands that contain spaces.",
        )

    return config

"""
Command-line interface for udfsig.

Argument parsing, dispatch, and the config subcommand.
Verification output lives in ``verify``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ...config import get_limits
from ...constants import ENV_MAX_ENTRY_SIZE, ENV_MAX_SIGNATURE_SIZE, __version__
from ...errors import ConfigError
from .verify import cmd_info, cmd_verify


def _cmd_config(args: argparse.Namespace) -> None:
    """Show or change saved verification limits."""
    from ...config import reset_limits, save_limits
    from ...config._storage import CONFIG_FILE

    try:
        if args.reset:
            reset_limits()
            print("Saved limits cleared; defaults apply.")
        elif args.max_entry_size is not None or args.max_signature_size is not None:
            save_limits(
                max_entry_size=args.max_entry_size,
                max_signature_size=args.max_signature_size,
            )
            print(f"Saved to {CONFIG_FILE}")
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: cannot write {CONFIG_FILE}: {e}", file=sys.stderr)
        sys.exit(1)

    limits = get_limits()
    print(f"  max entry size:     {limits.max_entry_size} bytes")
    print(f"  max signature size: {limits.max_signature_size} bytes")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="udfsig",
        description=(
            "Check the digital signature of UDF document containers.\n"
            "This is an integrity indicator: it checks that the signed digest "
            "matches content.xml,\nnot the signature value, certificate chain "
            "or revocation status."
        ),
        epilog=(
            "Environment variables:\n"
            f"  {ENV_MAX_ENTRY_SIZE}      Max uncompressed size of a container entry (bytes)\n"
            f"  {ENV_MAX_SIGNATURE_SIZE}  Max decoded signature size (bytes)\n"
            "\n"
            "Exit status of `verify`: 0 valid, 1 invalid, 2 error or unknown format,\n"
            "3 no signature.\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"udfsig {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log debug output to stderr",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # verify
    p_verify = sub.add_parser("verify", help="Verify UDF container signature(s)")
    p_verify.add_argument("files", nargs="+", help="UDF file(s) to verify")
    p_verify.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print one JSON object per file instead of text",
    )
    p_verify.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Number of files to verify in parallel (default: 1)",
    )

    # info
    p_info = sub.add_parser("info", help="Show container entries and signature format")
    p_info.add_argument("file", help="UDF file")

    # config
    p_config = sub.add_parser("config", help="Show or change verification limits")
    p_config.add_argument("--max-entry-size", type=int, default=None, help="Bytes")
    p_config.add_argument("--max-signature-size", type=int, default=None, help="Bytes")
    p_config.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Clear saved limits",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "verify":
        cmd_verify(args)
    elif args.command == "info":
        cmd_info(args)
    elif args.command == "config":
        _cmd_config(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

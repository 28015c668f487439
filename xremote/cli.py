"""xremote unified command-line interface"""

import argparse
import sys
from typing import NoReturn, Optional

from xremote import __version__
from xremote.common.settings import settings


def parser_create() -> argparse.ArgumentParser:
    """
    Create fully populated argument parser

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="xremote",
        description="Remote keyboard/mouse injection for X11 over an authenticated TCP stream",
    )

    parser.add_argument("--version", action="version", version=f"xremote {__version__}")

    # --server means client mode (connect to a running daemon)
    parser.add_argument(
        "--server",
        type=str,
        metavar="HOST:PORT",
        default=None,
        help="Connect to server at HOST:PORT (client mode). If omitted, run as server.",
    )

    # Common options
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations)",
    )

    parser.add_argument(
        "--secret-file",
        type=str,
        default=None,
        dest="secret_file",
        help="File holding the shared secret (overrides config)",
    )

    # Server-specific options
    parser.add_argument(
        "--host", type=str, default=None, help="[Server] Host address to bind to (overrides config)"
    )

    parser.add_argument(
        "--port", type=int, default=None, help="[Server] Port to listen on (overrides config)"
    )

    parser.add_argument(
        "--display", type=str, default=None, help="[Server] X11 display name (overrides config)"
    )

    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        help="[Server] Input backend to use. Defaults to x11.",
    )

    # Client-specific options
    parser.add_argument(
        "--send",
        type=str,
        action="append",
        metavar="COMMAND",
        default=None,
        help="[Client] Wire command to send, e.g. 'm 50 50' (repeatable)",
    )

    parser.add_argument(
        "--type",
        type=str,
        default=None,
        help="[Client] Text to type after any --send commands",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=settings.CLIENT_SEND_INTERVAL_SEC,
        help="[Client] Seconds to pause between writes",
    )

    for level in ("debug", "info", "warning", "error", "critical"):
        parser.add_argument(
            f"--{level}",
            action="store_true",
            help=f"Enable {level} logging (overrides config)",
        )

    return parser


def arguments_parse(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list, defaults to sys.argv

    Returns:
        Parsed CLI arguments
    """
    return parser_create().parse_args(argv)


def logLevelOverride_get(args: argparse.Namespace) -> Optional[str]:
    """
    Resolve explicit log level override flags

    Args:
        args: Parsed CLI args

    Returns:
        Selected log level or None
    """
    if args.critical:
        return "CRITICAL"
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def clientMode_isEnabled(args: argparse.Namespace) -> bool:
    """
    Determine whether CLI should run client mode

    Args:
        args: Parsed CLI args

    Returns:
        True when client mode should run
    """
    return bool(args.server)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Main entry point for unified xremote command"""
    args = arguments_parse(argv)
    args.log_level = logLevelOverride_get(args)

    try:
        if clientMode_isEnabled(args):
            from xremote.client.main import client_run

            client_run(args)
        else:
            from xremote.server.main import server_run

            server_run(args)
    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()

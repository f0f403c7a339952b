"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m fileserver

    # Serve ./public on port 3000, all interfaces
    python -m fileserver --root ./public --port 3000 --host 0.0.0.0

    # Redirect "/" to /index.html instead of serving it directly
    python -m fileserver --redirect-root

Port numbers below 1024 are refused: they need root, and a file server
has no business running as root.

=============================================================================
"""

import argparse
import sys
from typing import Optional

from . import __version__
from .config import ServerConfig
from .server import FileServer


def build_parser(defaults: Optional[ServerConfig] = None) -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Args:
        defaults: Seeds every option, usually ServerConfig.from_env(), so
                  command-line flags override environment variables.
    """
    defaults = defaults or ServerConfig()

    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Serve files from a directory over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                         # Serve . on 127.0.0.1:8080
  python -m fileserver --port 3000             # Custom port
  python -m fileserver --root ./public         # Serve another directory
  python -m fileserver --workers 0             # Handle connections inline
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help="Host to bind to (default: %(default)s)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help="Port to listen on, 1024-65535 (default: %(default)s)"
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.workers,
        help="Worker threads, 0 = handle inline (default: %(default)s)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help="Document root (default: %(default)s)"
    )

    parser.add_argument(
        "--index",
        default=defaults.index_document,
        help="Document served for / (default: %(default)s)"
    )

    parser.add_argument(
        "--not-found",
        default=defaults.not_found_document,
        help="Document served with 404 (default: %(default)s)"
    )

    parser.add_argument(
        "--redirect-root",
        action="store_true",
        help="Answer / with 301 to the index document"
    )

    parser.add_argument(
        "--ignore-extension-case",
        action="store_true",
        help="Treat .HTML like .html when picking the content type"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help="Logging level (default: %(default)s)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        workers=args.workers,
        document_root=args.root,
        index_document=args.index,
        not_found_document=args.not_found,
        redirect_root=args.redirect_root,
        case_sensitive_extensions=not args.ignore_extension_case,
        log_level=args.log_level,
    )


def main(argv=None) -> int:
    try:
        env_config = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: bad FILESERVER_* environment variable: {e}", file=sys.stderr)
        return 2

    args = build_parser(env_config).parse_args(argv)

    try:
        server = FileServer(config_from_args(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

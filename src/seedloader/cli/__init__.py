"""
Command-line interface for seedloader.

Available commands:
- load: upsert fixture files into a database
- check: validate fixture files without a database
"""

import sys

from seedutils.logging import setup_logging
from seedutils.tracing import initialize_tracing, shutdown_tracing

from .commands import cmd_check, cmd_load
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the seedloader CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file, json_format=args.log_json)

    if args.otlp_endpoint or args.trace_console:
        initialize_tracing(otlp_endpoint=args.otlp_endpoint, console_export=args.trace_console)

    try:
        if args.command == "load":
            exit_code = cmd_load(args)
        elif args.command == "check":
            exit_code = cmd_check(args)
        else:
            parser.print_help()
            exit_code = 1
    finally:
        shutdown_tracing()

    sys.exit(exit_code)


__all__ = ["main", "create_parser", "cmd_load", "cmd_check"]


if __name__ == "__main__":
    main()

"""Entry point for running the CLI as a module."""

import argparse
import asyncio
import sys
from pathlib import Path

from .chat_cli import main


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive CLI for asking questions about a CSV file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("csv_path", type=Path, help="CSV file to analyze")
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Server port (default: 8080)",
    )
    parser.add_argument(
        "--api-path",
        type=str,
        default="/api/v1/chat",
        help="API path (default: /api/v1/chat)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def cli_entry() -> None:
    """CLI entry point."""
    args = parse_args()

    if not args.csv_path.is_file():
        print(f"CSV file not found: {args.csv_path}", file=sys.stderr)
        sys.exit(2)

    try:
        asyncio.run(
            main(
                csv_path=args.csv_path,
                host=args.host,
                port=args.port,
                api_path=args.api_path,
                debug=args.debug,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()

"""
studiobridge CLI entry point.

Lets an operator check the Studio plugin and push commands to it by hand.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from studiobridge import __version__
from studiobridge.config.logging import get_logger, setup_logging
from studiobridge.config.settings import Settings, load_settings
from studiobridge.studio import StudioError, StudioSession


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="studiobridge",
        description="Bridge commands to the Roblox Studio plugin over its loopback HTTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"studiobridge {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every attempt made against the plugin",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("config", help="Show current configuration")
    subparsers.add_parser("status", help="Check whether the Studio plugin is reachable")

    run_parser = subparsers.add_parser("run-code", help="Run Luau code inside Studio")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("code", nargs="?", default=None, help="Code to run")
    source.add_argument("--file", type=Path, default=None, help="Read the code from a file")

    insert_parser = subparsers.add_parser("insert-model", help="Insert a model by search query")
    insert_parser.add_argument("query", help='Search text, e.g. "wooden crate"')

    batch_parser = subparsers.add_parser(
        "batch",
        help="Run several code files in order; a failing file does not stop the rest",
    )
    batch_parser.add_argument("files", nargs="+", type=Path, help="Code files, run in the given order")

    return parser


def cmd_config(settings: Settings) -> int:
    """Display current configuration."""
    logger = get_logger(__name__)
    studio = settings.studio

    logger.info("\n=== studiobridge Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nStudio Plugin: {studio.base_url}")
    logger.info(f"Long-poll Window: {studio.long_poll_timeout}s")
    logger.info(f"Probe Timeout: {studio.probe_timeout}s (+{studio.probe_margin}s margin)")
    logger.info(f"Attempt Timeout: {studio.attempt_timeout}s")
    logger.info(f"Request Deadline: {studio.request_deadline}s")
    logger.info(f"Retry Backoff: {studio.retry_backoff}s")
    logger.info(f"Debug: {studio.debug}")

    return 0


async def cmd_status(session: StudioSession) -> int:
    status = await session.client.get_status()
    print(json.dumps(status.model_dump(), ensure_ascii=False))
    return 0 if status.connected else 1


async def cmd_run_code(args, session: StudioSession) -> int:
    logger = get_logger(__name__)
    if args.file and not args.file.is_file():
        logger.error(f"File not found: {args.file}")
        return 1
    code = args.file.read_text(encoding="utf-8") if args.file else args.code

    try:
        output = await session.client.execute_code(code)
    except StudioError as e:
        logger.error(f"Code execution failed: {e}")
        return 1

    print(output)
    return 0


async def cmd_insert_model(args, session: StudioSession) -> int:
    logger = get_logger(__name__)

    try:
        result = await session.client.insert_asset(args.query)
    except StudioError as e:
        logger.error(f"Model insertion failed: {e}")
        return 1

    print(result)
    return 0


async def cmd_batch(args, session: StudioSession) -> int:
    logger = get_logger(__name__)

    missing = [path for path in args.files if not path.is_file()]
    if missing:
        logger.error(f"File(s) not found: {', '.join(str(p) for p in missing)}")
        return 1

    codes = [path.read_text(encoding="utf-8") for path in args.files]
    logger.info(f"Running batch of {len(codes)} command(s)")
    results = await session.client.run_batch(codes)

    for path, result in zip(args.files, results):
        if result.success:
            print(f"[ok]   {path.name}: {result.output}")
        else:
            print(f"[fail] {path.name}: {result.error}")

    return 0 if all(r.success for r in results) else 1


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    session = StudioSession(settings.studio)
    if args.debug:
        session.get_client(debug=True)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "status":
        return asyncio.run(cmd_status(session))
    elif args.command == "run-code":
        return asyncio.run(cmd_run_code(args, session))
    elif args.command == "insert-model":
        return asyncio.run(cmd_insert_model(args, session))
    elif args.command == "batch":
        return asyncio.run(cmd_batch(args, session))
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())

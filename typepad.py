"""Typepad console driver.

Type text to have it spoken aloud. Each line is appended to the current document and spoken with
the active speech backend. Commands start with ':' (type ':help' for the list).

The document is saved to the current text buffer on exit.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, NoReturn

from config.loader import ConfigLoader, ConfigLoaderError
from core.shared_data import AppContext
from handlers.command_handler import USAGE, CommandHandler
from utils.logger_utils import LoggerUtils
from utils.path_helper import PathHelper, PathType

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

CFG_FILE: Final[str] = "typepad.ini"

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def check_python_version() -> None:
    """Check if Python version is 3.13 or later.

    Raises:
        RuntimeError: If Python version is below 3.13.
    """
    if sys.version_info < (3, 13):
        msg = "Python 3.13 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments() -> argparse.Namespace:
    parser = _ArgumentParser(
        description="Typepad: type text and hear it spoken",
        epilog="Example: python typepad.py --language de --backend espeak",
    )
    parser.add_argument("--config", dest="config", default=CFG_FILE, metavar="FILE", help="Configuration file")
    parser.add_argument("--debug", dest="debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--language", dest="language", metavar="CODE", help="Override the default language")
    parser.add_argument("--backend", dest="backend", metavar="NAME", help="Override the default speech backend")
    return parser.parse_args()


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration file and apply CLI overrides.

    Raises:
        ConfigLoaderError: If configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).name
    overrides: dict[str, Any] = {"debug": args.debug, "language": args.language, "backend": args.backend}
    return ConfigLoader(config_filename=args.config, script_name=script_name, **overrides).config


def setup_logging(config: Config) -> None:
    helper = PathHelper(config.GENERAL.APP_NAME, config.GENERAL.HOME_DIR)
    try:
        log_file: Path | str = helper.find_or_create(config.GENERAL.LOG_FILE, PathType.FILE)
    except OSError as err:
        print(f"Cannot create log file: {err}", file=sys.stderr)
        log_file = ""
    logger_utils = LoggerUtils(log_file)
    if config.GENERAL.DEBUG:
        logger_utils.set_level("DEBUG")


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log anything the event loop could not deliver to a caller."""
    _ = loop
    err: BaseException | None = context.get("exception")
    logger.error("Unhandled error: %s", context.get("message", "unknown"), exc_info=err)


async def run(config: Config) -> None:
    asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

    context = AppContext(config)
    await context.async_init()
    handler = CommandHandler(context.backend_manager, context.buffers)

    backend, language = await context.backend_manager.selection()
    print(f"Typepad: backend '{backend}', language '{language}', buffer {context.buffers.index}")
    print(USAGE)
    if handler.document:
        print(handler.document, end="")

    try:
        while True:
            line: str = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            if not await handler.handle(line):
                break
    finally:
        handler.shutdown()
        await context.close()


def main() -> int:
    check_python_version()
    args: argparse.Namespace = parse_arguments()
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return 1

    setup_logging(config)
    logger.info("Typepad started")
    asyncio.run(run(config))
    logger.info("Typepad finished")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted.", file=sys.stderr)
    except (OSError, RuntimeError, ValueError) as err:
        print(f"\nFatal error: {err}", file=sys.stderr)
        sys.exit(1)

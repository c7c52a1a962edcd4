"""Command-line entry point: stream an answer for selected text to the terminal."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys

import structlog

from writing_gpt.answer_service import ASK_ACTION, AnswerService
from writing_gpt.config import Configuration
from writing_gpt.llm.events import AnswerEvent, ErrorEvent
from writing_gpt.logging_utils import configure_logging

logger = structlog.get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="writing-gpt",
        description="Rewrite or condense text with a streamed LLM answer.",
    )
    parser.add_argument(
        "action",
        help=f"prompt action, e.g. rewrite, concise or {ASK_ACTION}",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="text to process; read from stdin when omitted",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help="path to a YAML configuration file",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Stream one answer, printing only the newly arrived part of the text."""
    config = Configuration(args.config_path)
    configure_logging(config.get_logging_config().get("level", "INFO"))

    service = AnswerService.from_configuration(config)
    text = args.text if args.text is not None else sys.stdin.read()

    cancel_event = asyncio.Event()

    def signal_handler() -> None:
        logger.info("Received interrupt, cancelling answer")
        cancel_event.set()

    if sys.platform != "win32":
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, signal_handler)

    printed = 0
    exit_code = 0
    async with contextlib.aclosing(
        service.run_action(args.action, text, cancel_event)
    ) as events:
        async for event in events:
            if isinstance(event, AnswerEvent):
                sys.stdout.write(event.text[printed:])
                sys.stdout.flush()
                printed = len(event.text)
            elif isinstance(event, ErrorEvent):
                print(f"\nError: {event.reason}", file=sys.stderr)
                exit_code = 1

    if printed:
        sys.stdout.write("\n")
    if cancel_event.is_set():
        exit_code = 130
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ValueError as e:
        # Configuration and input problems
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import theme_icon
from ..core.state import AppState

logger = logging.getLogger(__name__)

_LEVEL_TAGS = {"success": "OK", "error": "ERROR", "info": "INFO"}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier that prints controller notifications straight to the terminal."""

    def notify(self, message: str, level: str = "info") -> None:
        _print_ts(f"[{_LEVEL_TAGS.get(level, level.upper())}] {message}")


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "taskdeck"))

    _print_ts(f"{theme_icon(state.theme)} {app_name}. Use /help for commands. Use /exit to quit.")

    if await state.controller.load_all() is not None:
        print(await command_registry.handle(state, "/list"))

    while True:
        try:
            # input() blocks; keep it off the event loop.
            user_input = (await asyncio.to_thread(input, "> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for /add (or /save while editing).
            verb = "/save" if state.controller.editing is not None else "/add"
            user_input = f"{verb} {user_input}"

        try:
            reply = await command_registry.handle(state, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            print(reply)

    logger.info("Console connector finished.")

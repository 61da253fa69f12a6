"""Process entry point: ``python -m venari`` or the ``venari`` script.

Runs the bot until SIGINT or SIGTERM, then closes the Discord connection
and exits 0. Bad configuration or a failed startup exits 1.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys

from pydantic import ValidationError

from venari.bot import VenariBot
from venari.config import Settings

logger = logging.getLogger("venari")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def serve(settings: Settings) -> None:
    """Run the bot until a termination signal arrives or the connection ends."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, stop.set)

    bot = VenariBot(settings)
    try:
        async with bot:
            runner = asyncio.create_task(bot.start(settings.discord_token), name="discord-bot")
            stopper = asyncio.create_task(stop.wait(), name="shutdown-signal")
            done, _ = await asyncio.wait({runner, stopper}, return_when=asyncio.FIRST_COMPLETED)

            if runner in done:
                stopper.cancel()
                runner.result()  # Re-raises login and command sync failures
                return

            logger.info("venari_shutting_down")
            await bot.close()
            runner.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await runner
    finally:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)


def main() -> None:
    try:
        settings = Settings.from_cli()
    except ValidationError as exc:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logger.error("venari_config_invalid\n%s", exc)
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)

    try:
        asyncio.run(serve(settings))
    except Exception:  # Last-resort handler: login, connection and command sync errors
        logger.exception("venari_startup_failed")
        sys.exit(1)

    logger.info("venari_stopped")


if __name__ == "__main__":
    main()

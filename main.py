#!/usr/bin/env python3
"""
Main entry point for the reps bot
"""

import asyncio
import logging
import sys

from reps_bot.bot import main


def run() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Bot stopped")
    except Exception as e:
        logging.error(f"Bot crashed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()

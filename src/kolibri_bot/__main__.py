"""
Main entry point for Kolibri Bot.

Watches the oven factory and every oven of each network and relays their
new operations to Discord.
"""

import asyncio
import logging
import sys

from .config import Config
from .errors import ConfigurationError
from .supervisor import build_supervisor

logger = logging.getLogger(__name__)


def main():
    """Run the bot until interrupted."""
    Config.setup_logging()

    try:
        supervisor = build_supervisor()
    except ConfigurationError as e:
        logger.error(f"FATAL configuration error: {e}")
        sys.exit(1)

    logger.info("Starting Kolibri-bot!")

    try:
        asyncio.run(supervisor.run_forever())
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully...")
        sys.exit(0)


if __name__ == "__main__":
    main()

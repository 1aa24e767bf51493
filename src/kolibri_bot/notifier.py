"""
Notification System using Apprise.
Delivers operation notifications to the Discord webhook of each network tier.
"""

import logging
from typing import Dict

import apprise

from .api.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def send_notification(message: str, channel_url: str) -> bool:
    """
    Send notification via Apprise.

    Args:
        message: Formatted message to send
        channel_url: Webhook URL (Apprise URL or native Discord webhook URL)

    Returns:
        True if successful, False otherwise
    """
    try:
        # Create Apprise instance
        apobj = apprise.Apprise()

        # Add notification service
        if not apobj.add(channel_url):
            logger.error("Failed to add notification service for webhook")
            return False

        # Send notification
        result = apobj.notify(body=message)

        if result:
            logger.info("Successfully sent notification")
        else:
            logger.error("Failed to send notification")

        return bool(result)

    except Exception as e:
        logger.error(f"Error sending notification: {e}", exc_info=True)
        return False


class Notifier:
    """
    Routes messages to the webhook of a network tier ("main" or "test").
    Deliveries share one rate limiter across all watchers.
    """

    def __init__(self, channels: Dict[str, str], limiter: RateLimiter):
        self.channels = channels
        self.limiter = limiter

    async def notify(self, message: str, tier: str) -> bool:
        """
        Deliver a message to the channel of a tier.

        Args:
            message: Formatted message
            tier: Network tier key

        Returns:
            True if delivered, False otherwise. Never raises for delivery failures.
        """
        channel_url = self.channels.get(tier)
        if not channel_url:
            logger.error(f"No notification channel configured for tier '{tier}'")
            return False

        logger.info(f"Sending notification to '{tier}' channel...")
        logger.debug(f"Message:\n{message}")
        return await self.limiter.run(send_notification, message, channel_url)

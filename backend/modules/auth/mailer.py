"""
Reset link delivery.

Real email transport lives outside this service. The default mailer
only logs the link, which is what local development needs.
"""

import logging
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def build_reset_link(frontend_url: str, token: str) -> str:
    """Build the frontend URL that lets the user pick a new password."""
    return f"{frontend_url.rstrip('/')}/reset-password?{urlencode({'token': token})}"


class LoggingResetMailer:
    """IResetMailer that writes the reset link to the log."""

    async def send_reset_link(self, to_address: str, reset_link: str) -> None:
        logger.info("Password reset link for %s: %s", to_address, reset_link)

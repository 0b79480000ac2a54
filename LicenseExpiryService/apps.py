"""
App configuration for License Expiry Service.
"""

import logging
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

SKIP_COMMANDS = ("migrate", "makemigrations", "collectstatic", "check")


class LicenseExpiryServiceConfig(AppConfig):
    """App configuration for LicenseExpiryService."""

    name = "LicenseExpiryService"
    verbose_name = "License Expiry Service"

    def ready(self):
        """Register event handlers once apps are loaded."""
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_COMMANDS:
            return

        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
        logger.debug("Event handlers registered from AppConfig.ready()")

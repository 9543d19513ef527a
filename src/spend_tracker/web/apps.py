"""
Django application configuration.
"""

import logging
from pathlib import Path

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class WebConfig(AppConfig):
    """Django app configuration for the statement import web service."""

    name = "spend_tracker.web"
    verbose_name = "Spend Tracker Import"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Make sure the upload directory exists before the first request."""
        upload_dir = Path(getattr(settings, "UPLOAD_DIR", "data/uploads"))
        upload_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Upload directory: %s", upload_dir)

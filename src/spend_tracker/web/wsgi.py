"""
WSGI entry point for the statement import service.

Serve with any WSGI server, e.g. ``gunicorn spend_tracker.web.wsgi``.
SPEND_CONFIG_PATH selects the config file (default: config.yaml).
"""

from .app import get_wsgi_application

application = get_wsgi_application()

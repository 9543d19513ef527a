"""
Django application initialization.
"""

import os

SETTINGS_MODULE = "spend_tracker.web.settings"


def _export_config(config_path: str | None) -> None:
    """
    Expose config file values to the Django settings module.

    Values already present in the environment win.
    Note: os.environ requires strings, so convert Path objects
    """
    if config_path:
        os.environ.setdefault("SPEND_CONFIG_PATH", str(config_path))

    from ..config import load_config

    config = load_config(os.environ.get("SPEND_CONFIG_PATH", "config.yaml"))
    os.environ.setdefault("SPEND_STATE_DB_PATH", str(config.state_db_path))
    os.environ.setdefault("SPEND_AUTH_DB_PATH", str(config.auth_db_path))
    os.environ.setdefault("SPEND_UPLOAD_DIR", str(config.imports.upload_dir))


def get_wsgi_application(config_path: str = None):
    """
    Get the Django WSGI application configured with our settings.

    Args:
        config_path: Path to config.yaml (optional)
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)
    _export_config(config_path)

    from django.core.wsgi import get_wsgi_application as django_wsgi

    return django_wsgi()


def run_server(
    host: str = "127.0.0.1",
    port: int = 8000,
    config_path: str = None,
):
    """
    Run the Django development server.

    Args:
        host: Host to bind to
        port: Port to listen on
        config_path: Path to config.yaml
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)
    _export_config(config_path)

    # Initialize Django
    import django

    django.setup()

    from django.core.management import call_command, execute_from_command_line

    # Auth/session tables must exist before the first login
    call_command("migrate", verbosity=0)

    print(f"\n🌐 Starting import service at http://{host}:{port}/")
    print(f"💾 State DB: {os.environ.get('SPEND_STATE_DB_PATH')}")
    print(f"📁 Uploads: {os.environ.get('SPEND_UPLOAD_DIR')}")
    print("\nPress Ctrl+C to stop.\n")

    execute_from_command_line(
        [
            "manage.py",
            "runserver",
            f"{host}:{port}",
            "--noreload",  # Disable auto-reload for simpler operation
        ]
    )

"""
CLI runner module.

Provides commands:
- import: Import a statement file for an owner
- preview: Show parsed entries without storing
- status: Store statistics and recent imports
- serve: Upload web service
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]

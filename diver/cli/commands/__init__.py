"""
CLI Commands.

Organized by remote system.
"""

from diver.cli.commands.store import app as store_app
from diver.cli.commands.ucp import app as ucp_app

__all__ = [
    "store_app",
    "ucp_app",
]

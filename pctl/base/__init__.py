"""
pctl CLI Base Command Classes

Abstract base classes for consistent command structure.
"""

from .base_command import BaseCommand
from .server_command import ServerCommand

__all__ = [
    "BaseCommand",
    "ServerCommand",
]

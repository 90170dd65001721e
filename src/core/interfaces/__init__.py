"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.persistence import IPersistence

__all__ = [
    "IPersistence",
]

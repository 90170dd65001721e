"""
Application layer - Use cases, DTOs, state and service factories.

This layer orchestrates business logic by:
1. Holding the in-memory POS state and its locks
2. Implementing use cases that coordinate core services
3. Forwarding changed records to persistence through the sync
4. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from src.application.services import (
    bootstrap_state,
    get_persistence_sync,
    get_pos_state,
    reset_services,
)
from src.application.state import PosState
from src.application.sync import PersistenceSync, SyncFailure

__all__ = [
    "PosState",
    "PersistenceSync",
    "SyncFailure",
    # Service factories
    "get_pos_state",
    "get_persistence_sync",
    "bootstrap_state",
    "reset_services",
]

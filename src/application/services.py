"""
Service factory functions for dependency injection.

Wires the persistence implementation chosen in settings to the in-memory
state and the persistence sync. Use cases resolve their collaborators
from here when none are injected.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger, get_settings

if TYPE_CHECKING:
    from src.core.interfaces import IPersistence

logger = get_logger(__name__)

# Singleton service instances
_pos_state: PosState | None = None
_persistence_sync: PersistenceSync | None = None


def get_pos_state() -> PosState:
    """Get or create the process-wide POS state."""
    global _pos_state

    if _pos_state is None:
        _pos_state = PosState()
    return _pos_state


async def get_persistence_sync(
    persistence: "IPersistence | None" = None,
) -> PersistenceSync:
    """
    Get or create PersistenceSync instance.

    Builds the configured persistence backend if none is provided.

    Args:
        persistence: Optional persistence override

    Returns:
        Configured PersistenceSync
    """
    global _persistence_sync

    if _persistence_sync is not None and persistence is None:
        return _persistence_sync

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage import get_persistence

    settings = get_settings()
    sync = PersistenceSync(
        persistence=persistence or await get_persistence(),
        background=settings.sync.background,
        max_pending=settings.sync.max_pending,
    )

    if persistence is None:
        _persistence_sync = sync

    return sync


async def bootstrap_state() -> PosState:
    """Load persisted records into the global state."""
    state = get_pos_state()
    sync = await get_persistence_sync()
    await state.load(sync.persistence)
    return state


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _pos_state, _persistence_sync

    _pos_state = None
    _persistence_sync = None

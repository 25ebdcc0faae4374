"""Core infrastructure components."""

from signalwatch.core.config import Settings, get_settings
from signalwatch.core.database import (
    Base,
    close_db,
    get_db,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)
from signalwatch.core.logging import (
    get_logger,
    get_request_id,
    set_request_id,
    setup_logging,
)

__all__ = [
    "Base",
    "Settings",
    "close_db",
    "get_db",
    "get_engine",
    "get_logger",
    "get_request_id",
    "get_session",
    "get_session_factory",
    "get_settings",
    "init_db",
    "set_request_id",
    "setup_logging",
]

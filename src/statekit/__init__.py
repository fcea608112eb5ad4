"""
Public API for the statekit package.

Import from here everywhere else, so you can refactor internals freely:
    from statekit import (
        Store, History, ObservableStore, StoreConfig,
        compose, logging_middleware, guard, map_action, delay,
        persist_with, when_changed,
        load_config, setup_logging,
    )

ObservableStore needs PySide6 and is imported lazily, so the engine itself can
be used from plain asyncio code without pulling in Qt.
"""
from .protocol import (
    Reducer, GetState, Dispatch, Next, Middleware, StoreProtocol,
)
from .history import History
from .middleware import (
    compose,
    logging_middleware, guard, map_action, delay, persist_with, when_changed,
)
from .store import Store
from .config import DEFAULT_CONFIG, StoreConfig, load_config
from .log import setup_logging, setup_logging_from_config, get_logger

__all__ = [
    # protocol
    "Reducer", "GetState", "Dispatch", "Next", "Middleware", "StoreProtocol",
    # engine
    "History", "Store", "ObservableStore",
    # middleware
    "compose",
    "logging_middleware", "guard", "map_action", "delay", "persist_with", "when_changed",
    # config & logging
    "DEFAULT_CONFIG", "StoreConfig", "load_config",
    "setup_logging", "setup_logging_from_config", "get_logger",
]


def __getattr__(name):
    if name == "ObservableStore":
        from .observable import ObservableStore
        return ObservableStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

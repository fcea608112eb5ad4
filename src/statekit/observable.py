from __future__ import annotations
from typing import Any, Callable, Coroutine, Optional, Union
import asyncio
import concurrent.futures
import logging

from PySide6 import QtCore

from .protocol import StoreProtocol

logger = logging.getLogger(__name__)

Pending = Union[asyncio.Future, concurrent.futures.Future]


class ObservableStore(QtCore.QObject):
    """
    Qt-facing wrapper that republishes a store's state once per settled dispatch.

    The store's coroutines run on `loop` (a worker thread's event loop) when one
    is given, otherwise on the loop running in the calling thread (RuntimeError
    if there is none). Either way `stateChanged` is emitted on the thread that
    owns this object: completion is relayed through `_settled`, which Qt queues
    across threads.

    Usage:
        bridge = ObservableStore(store, loop=worker_loop)
        bridge.stateChanged.connect(view.render)
        bridge.dispatch(AddTodo("Buy milk"))
    """

    stateChanged = QtCore.Signal(object)
    _settled = QtCore.Signal(object)

    def __init__(
        self,
        store: StoreProtocol,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._loop = loop
        self._state = store.state
        self._settled.connect(self._publish)

    @property
    def state(self) -> Any:
        """Last published (settled) state."""
        return self._state

    @property
    def can_undo(self) -> bool:
        return self._store.can_undo

    @property
    def store(self) -> StoreProtocol:
        return self._store

    def dispatch(self, action: Any) -> Pending:
        return self._schedule(self._store.dispatch(action), action)

    def undo(self) -> Pending:
        return self._schedule(self._store.undo(), "undo")

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Connect callback to stateChanged; returns a function that disconnects it."""
        self.stateChanged.connect(callback)

        def unsubscribe() -> None:
            self.stateChanged.disconnect(callback)

        return unsubscribe

    # ----- internals -----

    def _schedule(self, coro: Coroutine[Any, Any, None], label: Any) -> Pending:
        if self._loop is not None:
            fut: Pending = asyncio.run_coroutine_threadsafe(coro, self._loop)
        else:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                coro.close()
                raise RuntimeError(
                    "ObservableStore has no loop: pass loop= or call from a running asyncio loop"
                ) from None
            fut = loop.create_task(coro)
        fut.add_done_callback(lambda f: self._on_done(f, label))
        return fut

    def _on_done(self, fut: Pending, label: Any) -> None:
        # May run on the worker loop's thread; emits the state this call settled on.
        if fut.cancelled():
            logger.warning("%r was cancelled; not publishing", label)
            return
        exc = fut.exception()
        if exc is not None:
            logger.error("%r failed; not publishing", label, exc_info=exc)
            return
        self._settled.emit(self._store.state)

    @QtCore.Slot(object)
    def _publish(self, state: Any) -> None:
        self._state = state
        self.stateChanged.emit(self._state)

# tests/conftest.py
import asyncio
import sys
import threading
import time
from pathlib import Path
import pytest

# Make "src" importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from statekit import Store
from counter_domain import Counter, reduce_counter


@pytest.fixture
def store():
    # Fresh counter store per test
    return Store(Counter(), reduce_counter)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def worker_loop():
    """An asyncio loop running on a background thread, like a UI app's worker."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, name="store-worker", daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=2)
    loop.close()


def pump_until(app, predicate, timeout=2.0):
    """Process Qt events until predicate() holds; returns its final value."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        app.processEvents()
        if predicate():
            return True
        time.sleep(0.005)
    app.processEvents()
    return predicate()


@pytest.fixture
def pump(qapp):
    return lambda predicate, timeout=2.0: pump_until(qapp, predicate, timeout)

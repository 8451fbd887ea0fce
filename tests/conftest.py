"""
Shared fixtures

- every store is in memory unless a test asks for a file
- "now" is pinned through the controller clock so "today" is deterministic
"""
import os

# console logging only while testing
os.environ.setdefault("LOG_FILE", "")

from datetime import datetime

import pytest

from safespace.services.state_controller import StateController
from safespace.services.store import Store

NOW = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture()
def store():
    s = Store("sqlite:///:memory:", default_dark_mode=False)
    s.initialize()
    yield s
    s.close()


@pytest.fixture()
def db_file(tmp_path):
    return f"sqlite:///{tmp_path / 'safespace.db'}"


@pytest.fixture()
def clock():
    return lambda: NOW


@pytest.fixture()
def controller(store, clock):
    return StateController(store, clock=clock)


@pytest.fixture()
def notifications(controller):
    """List that grows by one item per notification"""
    calls = []
    controller.subscribe(lambda: calls.append(1))
    return calls

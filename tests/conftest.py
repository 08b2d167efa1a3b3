"""
conftest.py - Shared pytest fixtures for token ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Ledgers at increasing levels of setup (empty, with classes, funded)
- A recording notification sink
- Receive hooks that accept or refuse deliveries
"""

import pytest
from typing import List, Optional, Tuple

from token_ledger import TokenLedger, RecordingSink


ADMIN = "issuer"
BASE_URI = "ipfs://drop/"


# =============================================================================
# HELPERS
# =============================================================================

class RecordingHook:
    """Receive hook that accepts everything and remembers each call."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def on_received(self, operator, source, dest, class_ids, amounts, aux_data):
        self.calls.append((operator, source, dest, class_ids, amounts, aux_data))


class RefusingHook:
    """Receive hook that refuses deliveries to a set of holders."""

    def __init__(self, refused: Optional[set] = None):
        self.refused = refused if refused is not None else set()
        self.calls = 0

    def on_received(self, operator, source, dest, class_ids, amounts, aux_data):
        self.calls += 1
        if dest in self.refused:
            raise RuntimeError(f"{dest} does not accept tokens")


def make_ledger(sink=None, **kwargs) -> TokenLedger:
    """Quiet ledger administered by ADMIN."""
    return TokenLedger(ADMIN, BASE_URI, "Drop", sink=sink, verbose=False, **kwargs)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def ledger(sink):
    """Fresh ledger with no token classes."""
    return make_ledger(sink)


@pytest.fixture
def class_ledger(ledger, sink):
    """Ledger with class 0 ("a.json") and class 1 ("b.json"); sink cleared."""
    ledger.create_token_class(ADMIN, "a.json")
    ledger.create_token_class(ADMIN, "b.json")
    sink.clear()
    return ledger


@pytest.fixture
def funded_ledger(class_ledger, sink):
    """
    Classes 0 and 1 with balances, transfers still disabled; sink cleared.

    alice: 100 of class 0, 50 of class 1
    bob:   20 of class 0
    """
    class_ledger.bulk_mint(ADMIN, ["alice", "alice", "bob"], [0, 1, 0], [100, 50, 20])
    sink.clear()
    return class_ledger


@pytest.fixture
def open_ledger(funded_ledger, sink):
    """Funded ledger with the transfer gate open; sink cleared."""
    funded_ledger.set_transfers_enabled(ADMIN, True)
    sink.clear()
    return funded_ledger


@pytest.fixture
def recording_hook():
    return RecordingHook()


@pytest.fixture
def refusing_hook():
    """Hook refusing deliveries to "mallory"."""
    return RefusingHook({"mallory"})

"""
Class Existence Conformance Tests

INVARIANT: Class IDs are assigned sequentially from 0, and a class ID is
valid iff it is below the number of classes ever created.

    create_token_class() returns class_count before the call
    valid(c) ⟺ 0 ≤ c < class_count

Every mint, burn, transfer and metadata lookup on an invalid ID raises
UnknownTokenClass. balance_of is the only read that answers 0 instead.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from token_ledger import TokenLedger, UnknownTokenClass


ADMIN = "issuer"


def _ledger(count: int) -> TokenLedger:
    ledger = TokenLedger(ADMIN, "u/", verbose=False)
    for i in range(count):
        ledger.create_token_class(ADMIN, f"{i}.json")
    ledger.set_transfers_enabled(ADMIN, True)
    return ledger


class TestClassExistenceProperties:

    @given(st.integers(min_value=0, max_value=20))
    @settings(max_examples=30)
    def test_ids_are_sequential(self, count):
        ledger = TokenLedger(ADMIN, verbose=False)
        ids = [ledger.create_token_class(ADMIN, "") for _ in range(count)]
        assert ids == list(range(count))
        assert ledger.class_count == count

    @given(st.integers(min_value=0, max_value=5), st.integers(min_value=-5, max_value=10))
    @settings(max_examples=100)
    def test_validity_boundary(self, count, class_id):
        """
        PROPERTY: Operations succeed exactly on IDs in [0, class_count).
        """
        ledger = _ledger(count)
        valid = 0 <= class_id < count
        assert ledger.exists(class_id) is valid

        if valid:
            ledger.mint(ADMIN, "alice", class_id, 2)
            ledger.transfer("alice", "alice", "bob", class_id, 1)
            ledger.burn("bob", class_id, 1)
            assert ledger.resolve_metadata(class_id) == f"u/{class_id}.json"
        else:
            with pytest.raises(UnknownTokenClass):
                ledger.mint(ADMIN, "alice", class_id, 2)
            with pytest.raises(UnknownTokenClass):
                ledger.transfer("alice", "alice", "bob", class_id, 0)
            with pytest.raises(UnknownTokenClass):
                ledger.burn("alice", class_id, 0)
            with pytest.raises(UnknownTokenClass):
                ledger.resolve_metadata(class_id)
            with pytest.raises(UnknownTokenClass):
                ledger.total_supply(class_id)
            assert ledger.balance_of("alice", class_id) == 0


class TestClassExistenceExamples:

    def test_next_id_is_invalid_until_created(self):
        ledger = _ledger(2)
        with pytest.raises(UnknownTokenClass):
            ledger.mint(ADMIN, "alice", 2, 1)
        assert ledger.create_token_class(ADMIN, "2.json") == 2
        ledger.mint(ADMIN, "alice", 2, 1)
        assert ledger.balance_of("alice", 2) == 1

    def test_no_classes(self):
        ledger = _ledger(0)
        with pytest.raises(UnknownTokenClass):
            ledger.mint(ADMIN, "alice", 0, 1)
        assert ledger.list_token_classes() == []

    def test_duplicate_suffixes_are_distinct_classes(self):
        ledger = TokenLedger(ADMIN, "u/", verbose=False)
        a = ledger.create_token_class(ADMIN, "same.json")
        b = ledger.create_token_class(ADMIN, "same.json")
        ledger.mint(ADMIN, "alice", a, 1)
        assert a != b
        assert ledger.balance_of("alice", b) == 0
        assert ledger.resolve_metadata(a) == ledger.resolve_metadata(b)

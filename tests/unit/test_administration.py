"""
test_administration.py - Unit tests for gates, name, base URI and metadata resolution
"""

import pytest
from token_ledger import (
    TokenLedger, TransfersEnabledChanged, MarketEnabledChanged, NameChanged, BaseUriChanged,
    NotAdministrator, EmptyName, MarketDisabled, UnknownTokenClass, DEFAULT_NAME,
)

ADMIN = "issuer"


class TestGates:

    def test_set_transfers_enabled(self, ledger, sink):
        ledger.set_transfers_enabled(ADMIN, True)
        assert ledger.transfers_enabled is True
        assert sink.notifications == [TransfersEnabledChanged(True)]

    def test_set_market_enabled(self, ledger, sink):
        ledger.set_market_enabled(ADMIN, True)
        ledger.set_market_enabled(ADMIN, False)
        assert ledger.market_enabled is False
        assert sink.notifications == [MarketEnabledChanged(True), MarketEnabledChanged(False)]

    def test_gates_are_independent(self, ledger):
        ledger.set_market_enabled(ADMIN, True)
        assert ledger.transfers_enabled is False

    def test_repeated_flip_still_notifies(self, ledger, sink):
        ledger.set_transfers_enabled(ADMIN, False)
        assert sink.notifications == [TransfersEnabledChanged(False)]

    @pytest.mark.parametrize("method", ["set_transfers_enabled", "set_market_enabled"])
    def test_non_admin(self, ledger, sink, method):
        with pytest.raises(NotAdministrator):
            getattr(ledger, method)("alice", True)
        assert ledger.transfers_enabled is False
        assert ledger.market_enabled is False
        assert len(sink) == 0

    def test_transfers_open_for(self, ledger):
        assert ledger.transfers_open_for(ADMIN)
        assert not ledger.transfers_open_for("alice")
        ledger.set_transfers_enabled(ADMIN, True)
        assert ledger.transfers_open_for("alice")


class TestMarketGate:

    def test_closed_for_holders(self, ledger):
        assert not ledger.market_open_for("alice")
        with pytest.raises(MarketDisabled):
            ledger.require_market_open("alice")

    def test_admin_exempt(self, ledger):
        assert ledger.market_open_for(ADMIN)
        ledger.require_market_open(ADMIN)

    def test_open(self, ledger):
        ledger.set_market_enabled(ADMIN, True)
        ledger.require_market_open("alice")

    def test_market_gate_does_not_open_transfers(self, funded_ledger):
        funded_ledger.set_market_enabled(ADMIN, True)
        assert not funded_ledger.transfers_open_for("alice")


class TestName:

    def test_initial_name(self, ledger):
        assert ledger.name == "Drop"

    def test_default_name(self):
        assert TokenLedger(ADMIN, verbose=False).name == DEFAULT_NAME

    def test_set_name(self, ledger, sink):
        ledger.set_name(ADMIN, "Summer Drop")
        assert ledger.name == "Summer Drop"
        assert sink.notifications == [NameChanged("Drop", "Summer Drop")]

    def test_empty_name(self, ledger, sink):
        with pytest.raises(EmptyName):
            ledger.set_name(ADMIN, "")
        assert ledger.name == "Drop"
        assert len(sink) == 0

    def test_non_admin(self, ledger):
        with pytest.raises(NotAdministrator):
            ledger.set_name("alice", "Mine")
        assert ledger.name == "Drop"

    def test_empty_initial_name(self):
        with pytest.raises(EmptyName):
            TokenLedger(ADMIN, "u/", "", verbose=False)


class TestMetadata:

    def test_resolve(self, class_ledger):
        assert class_ledger.resolve_metadata(0) == "ipfs://drop/a.json"
        assert class_ledger.resolve_metadata(1) == "ipfs://drop/b.json"

    def test_unknown_class(self, class_ledger):
        with pytest.raises(UnknownTokenClass):
            class_ledger.resolve_metadata(2)

    def test_negative_class(self, class_ledger):
        with pytest.raises(UnknownTokenClass):
            class_ledger.resolve_metadata(-1)

    def test_set_base_uri(self, class_ledger, sink):
        class_ledger.set_base_uri(ADMIN, "https://cdn.example/")
        assert class_ledger.resolve_metadata(0) == "https://cdn.example/a.json"
        assert sink.notifications == [BaseUriChanged("ipfs://drop/", "https://cdn.example/")]

    def test_set_base_uri_non_admin(self, class_ledger):
        with pytest.raises(NotAdministrator):
            class_ledger.set_base_uri("alice", "x/")
        assert class_ledger.base_uri == "ipfs://drop/"

    def test_resolve_is_pure(self, class_ledger, sink):
        class_ledger.resolve_metadata(0)
        assert len(sink) == 0

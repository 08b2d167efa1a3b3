"""
notifications.py - Change notifications and collaborator hooks

Notifications are just data: frozen records describing a committed change.
The ledger hands them to an injected NotificationSink after an operation
succeeds. A failed operation delivers nothing.

Core concepts:
1. Notification records: one dataclass per kind of change
2. NotificationSink: anything with notify(notification)
3. RecordingSink / NullSink: ready-made sinks for tests and quiet runs
4. ReceiveHook: optional recipient check run by the hosting runtime
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple, Type, TypeVar, Union, runtime_checkable


# ============================================================================
# NOTIFICATION RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class TokenClassCreated:
    class_id: int
    metadata_suffix: str


@dataclass(frozen=True, slots=True)
class TransferSingle:
    """
    One class moved between holders.

    source is None for a mint, dest is None for a burn.
    """
    operator: str
    source: Optional[str]
    dest: Optional[str]
    class_id: int
    amount: int


@dataclass(frozen=True, slots=True)
class TransferBatch:
    """Several classes moved between the same pair of holders."""
    operator: str
    source: Optional[str]
    dest: Optional[str]
    class_ids: Tuple[int, ...]
    amounts: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Burned:
    holder: str
    class_id: int
    amount: int


@dataclass(frozen=True, slots=True)
class BatchBurned:
    holder: str
    class_ids: Tuple[int, ...]
    amounts: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class TransfersEnabledChanged:
    enabled: bool


@dataclass(frozen=True, slots=True)
class MarketEnabledChanged:
    enabled: bool


@dataclass(frozen=True, slots=True)
class NameChanged:
    old_name: str
    new_name: str


@dataclass(frozen=True, slots=True)
class BaseUriChanged:
    old_uri: str
    new_uri: str


@dataclass(frozen=True, slots=True)
class ApprovalForAll:
    holder: str
    operator: str
    approved: bool


@dataclass(frozen=True, slots=True)
class AdministratorTransferred:
    previous: str
    new: str


Notification = Union[
    TokenClassCreated, TransferSingle, TransferBatch, Burned, BatchBurned,
    TransfersEnabledChanged, MarketEnabledChanged, NameChanged, BaseUriChanged,
    ApprovalForAll, AdministratorTransferred,
]

N = TypeVar("N")


# ============================================================================
# SINKS
# ============================================================================

@runtime_checkable
class NotificationSink(Protocol):
    """Receiver of committed-change notifications."""

    def notify(self, notification: Notification) -> None:
        ...


class NullSink:
    """Discards every notification."""

    def notify(self, notification: Notification) -> None:
        pass

    def __repr__(self) -> str:
        return "NullSink()"


class RecordingSink:
    """
    Keeps every notification in delivery order.

    Example:
        sink = RecordingSink()
        ledger = TokenLedger("issuer", "ipfs://", sink=sink, verbose=False)
        ledger.create_token_class("issuer", "a.json")
        assert sink.notifications == [TokenClassCreated(0, "a.json")]
    """

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def of_type(self, kind: Type[N]) -> List[N]:
        """Return only the notifications of one record type."""
        return [n for n in self.notifications if isinstance(n, kind)]

    def clear(self) -> None:
        self.notifications.clear()

    def __len__(self) -> int:
        return len(self.notifications)

    def __repr__(self) -> str:
        return f"RecordingSink({len(self.notifications)} notifications)"


# ============================================================================
# RECEIVE HOOK
# ============================================================================

@runtime_checkable
class ReceiveHook(Protocol):
    """
    Recipient check invoked for mints and transfers.

    The ledger calls on_received after the balances have been updated and
    before notifications are delivered. Raising any exception refuses the
    delivery: the ledger restores the balances and raises ReceiverRejected.
    The return value is ignored.
    """

    def on_received(
        self,
        operator: str,
        source: Optional[str],
        dest: str,
        class_ids: Tuple[int, ...],
        amounts: Tuple[int, ...],
        aux_data: bytes,
    ) -> None:
        ...

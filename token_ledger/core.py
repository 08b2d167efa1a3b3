"""
Core types and pure functions for the token ledger.

This module provides the foundational data structures for the ledger:
1. Protocols: LedgerView for read-only ledger access
2. Immutable data structures: TokenClass, BalanceDelta
3. Exceptions: LedgerError and domain-specific error types
4. Type aliases: Positions, HolderBalances
5. Validation helpers: amount, holder and batch-shape checks

All functions in this module are pure and operate on their arguments only.
No function can mutate ledger state directly.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Protocol, Sequence, Tuple, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Largest representable balance or supply (unsigned 256-bit integer).
MAX_AMOUNT = 2 ** 256 - 1

# Name used when a ledger is created without one.
DEFAULT_NAME = "Token Ledger"


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from holder ID to amount held of a single token class.
Positions = Dict[str, int]

# Mapping from token class ID to amount held by a single holder.
HolderBalances = Dict[int, int]

# Key into the balance table.
BalanceKey = Tuple[str, int]


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Collaborators such as marketplace or escrow code accept a LedgerView to
    declare that they only query state. TokenLedger implements this protocol
    but also provides mutation methods.
    """

    @property
    def administrator(self) -> str:
        """Return the current administrator identity."""
        ...

    @property
    def transfers_enabled(self) -> bool:
        ...

    @property
    def market_enabled(self) -> bool:
        ...

    def balance_of(self, holder: str, class_id: int) -> int:
        """Return the balance of a class held by a holder (0 if never minted)."""
        ...

    def total_supply(self, class_id: int) -> int:
        ...

    def exists(self, class_id: int) -> bool:
        ...

    def resolve_metadata(self, class_id: int) -> str:
        ...

    def get_positions(self, class_id: int) -> Positions:
        """Return all non-zero holdings of a class."""
        ...


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class NotAdministrator(LedgerError):
    """Raised when an administrator-only operation is invoked by another caller."""
    pass


class NotOwnerOrApproved(LedgerError):
    """Raised when a caller moves a balance it neither owns nor operates."""
    pass


class UnknownTokenClass(LedgerError):
    """Raised when a class ID is not below the number of classes ever created."""
    pass


class InsufficientBalance(LedgerError):
    """Raised when a burn or transfer would take a balance below zero."""
    pass


class ArrayLengthMismatch(LedgerError):
    """Raised when the parallel arrays of a batch operation differ in length."""
    pass


class ArithmeticOverflow(LedgerError):
    """Raised when a balance or supply would exceed MAX_AMOUNT."""
    pass


class TransfersDisabled(LedgerError):
    """Raised when a non-administrator transfers while the transfer gate is closed."""
    pass


class MarketDisabled(LedgerError):
    """Raised when a non-administrator trades while the market gate is closed."""
    pass


class EmptyName(LedgerError):
    """Raised when the ledger name is set to an empty string."""
    pass


class ReceiverRejected(LedgerError):
    """Raised when the receive hook refuses a mint or transfer."""
    pass


class SnapshotError(LedgerError):
    """Raised when persisted ledger state cannot be loaded."""
    pass


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class TokenClass:
    """
    One registered asset type.

    Attributes:
        class_id: Sequential identifier assigned at creation (0, 1, 2, ...).
        metadata_suffix: Opaque locator suffix, appended to the ledger's base URI.

    Immutable (frozen=True): a class never changes after it is created.
    """
    class_id: int
    metadata_suffix: str

    def __post_init__(self):
        if not isinstance(self.class_id, int) or isinstance(self.class_id, bool):
            raise ValueError(f"TokenClass class_id must be int, got {type(self.class_id)}")
        if self.class_id < 0:
            raise ValueError(f"TokenClass class_id must be non-negative, got {self.class_id}")
        if not isinstance(self.metadata_suffix, str):
            raise ValueError("TokenClass metadata_suffix must be a string")

    def __repr__(self) -> str:
        return f"TokenClass({self.class_id}: {self.metadata_suffix!r})"


@dataclass(frozen=True, slots=True)
class BalanceDelta:
    """
    A signed change to one (holder, class) balance.

    Operations describe their effect as a list of deltas. The ledger replays
    them in order against a scratch copy of the touched balances, and only
    writes the result back once every delta has passed, so a batch either
    applies in full or not at all.
    """
    holder: str
    class_id: int
    amount: int

    @property
    def key(self) -> BalanceKey:
        return (self.holder, self.class_id)

    def __repr__(self) -> str:
        sign = "+" if self.amount >= 0 else ""
        return f"BalanceDelta({self.holder}[{self.class_id}] {sign}{self.amount})"


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def require_holder(holder: str, label: str = "holder") -> None:
    """Raise ValueError unless holder is a non-empty string."""
    if not isinstance(holder, str) or not holder.strip():
        raise ValueError(f"{label} cannot be empty")


def require_amount(amount: int) -> None:
    """
    Validate a requested amount.

    Raises:
        ValueError: If amount is not an int (bool excluded) or is negative.
        ArithmeticOverflow: If amount exceeds MAX_AMOUNT.
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValueError(f"Amount must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    if amount > MAX_AMOUNT:
        raise ArithmeticOverflow(f"Amount {amount} exceeds {MAX_AMOUNT}")


def require_same_length(*arrays: Sequence) -> int:
    """
    Check that parallel batch arrays have equal length.

    Returns:
        The common length.

    Raises:
        ArrayLengthMismatch: If any two arrays differ in length.
    """
    lengths = [len(a) for a in arrays]
    if len(set(lengths)) > 1:
        raise ArrayLengthMismatch(f"Batch arrays differ in length: {lengths}")
    return lengths[0] if lengths else 0


def checked_add(current: int, delta: int) -> int:
    """
    Add a signed delta to a non-negative quantity.

    Raises:
        InsufficientBalance: If the result would be negative.
        ArithmeticOverflow: If the result would exceed MAX_AMOUNT.
    """
    result = current + delta
    if result < 0:
        raise InsufficientBalance(f"{current} is less than {-delta}")
    if result > MAX_AMOUNT:
        raise ArithmeticOverflow(f"{current} + {delta} exceeds {MAX_AMOUNT}")
    return result


def mint_deltas(holders: Sequence[str], class_ids: Sequence[int],
                amounts: Sequence[int]) -> List[BalanceDelta]:
    """Deltas crediting amounts[i] of class_ids[i] to holders[i]."""
    return [BalanceDelta(h, c, a) for h, c, a in zip(holders, class_ids, amounts)]


def burn_deltas(holder: str, class_ids: Sequence[int],
                amounts: Sequence[int]) -> List[BalanceDelta]:
    """Deltas debiting amounts[i] of class_ids[i] from a single holder."""
    return [BalanceDelta(holder, c, -a) for c, a in zip(class_ids, amounts)]


def transfer_deltas(source: str, dest: str, class_ids: Sequence[int],
                    amounts: Sequence[int]) -> List[BalanceDelta]:
    """
    Deltas moving amounts[i] of class_ids[i] from source to dest.

    All debits come first so that a self-transfer is checked against the
    holder's balance before it is credited back.
    """
    debits = burn_deltas(source, class_ids, amounts)
    credits = [BalanceDelta(dest, c, a) for c, a in zip(class_ids, amounts)]
    return debits + credits


def supply_deltas(deltas: Sequence[BalanceDelta]) -> Dict[int, int]:
    """Net change in total supply per class implied by a set of deltas."""
    change: Dict[int, int] = {}
    for d in deltas:
        change[d.class_id] = change.get(d.class_id, 0) + d.amount
    return change


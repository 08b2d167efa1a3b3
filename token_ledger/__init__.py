"""
token_ledger - Administered Multi-Asset Token Ledger

An accounting core for distribution platforms: one administrator defines
token classes, mints and burns balances, and decides when holders may trade.

Usage:
    from token_ledger import TokenLedger, RecordingSink

    sink = RecordingSink()
    ledger = TokenLedger("issuer", "ipfs://drop/", "Spring Drop", sink=sink)

    # Register a class and airdrop it
    badge = ledger.create_token_class("issuer", "badge.json")
    ledger.bulk_mint("issuer", ["alice", "bob"], [badge, badge], [10, 5])

    # Holders can trade once the administrator opens the gate
    ledger.set_transfers_enabled("issuer", True)
    ledger.transfer("alice", "alice", "bob", badge, 3)
"""

# Core types
from .core import (
    LedgerView,
    TokenClass,
    BalanceDelta,
    Positions,
    HolderBalances,
    LedgerError,
    NotAdministrator,
    NotOwnerOrApproved,
    UnknownTokenClass,
    InsufficientBalance,
    ArrayLengthMismatch,
    ArithmeticOverflow,
    TransfersDisabled,
    MarketDisabled,
    EmptyName,
    ReceiverRejected,
    SnapshotError,
    MAX_AMOUNT,
    DEFAULT_NAME,
)

# Authorization
from .access import (
    Role,
    AccessPolicy,
    SingleAdministrator,
    AdministratorSet,
)

# Notifications
from .notifications import (
    Notification,
    NotificationSink,
    NullSink,
    RecordingSink,
    ReceiveHook,
    TokenClassCreated,
    TransferSingle,
    TransferBatch,
    Burned,
    BatchBurned,
    TransfersEnabledChanged,
    MarketEnabledChanged,
    NameChanged,
    BaseUriChanged,
    ApprovalForAll,
    AdministratorTransferred,
)

# Ledger
from .ledger import TokenLedger

# Persistence
from .snapshot import (
    to_snapshot,
    from_snapshot,
    dumps,
    loads,
    state_hash,
)

__all__ = [
    # Core
    'LedgerView', 'TokenClass', 'BalanceDelta', 'Positions', 'HolderBalances',
    'LedgerError', 'NotAdministrator', 'NotOwnerOrApproved', 'UnknownTokenClass',
    'InsufficientBalance', 'ArrayLengthMismatch', 'ArithmeticOverflow',
    'TransfersDisabled', 'MarketDisabled', 'EmptyName', 'ReceiverRejected',
    'SnapshotError', 'MAX_AMOUNT', 'DEFAULT_NAME',
    # Authorization
    'Role', 'AccessPolicy', 'SingleAdministrator', 'AdministratorSet',
    # Notifications
    'Notification', 'NotificationSink', 'NullSink', 'RecordingSink', 'ReceiveHook',
    'TokenClassCreated', 'TransferSingle', 'TransferBatch', 'Burned', 'BatchBurned',
    'TransfersEnabledChanged', 'MarketEnabledChanged', 'NameChanged', 'BaseUriChanged',
    'ApprovalForAll', 'AdministratorTransferred',
    # Ledger
    'TokenLedger',
    # Persistence
    'to_snapshot', 'from_snapshot', 'dumps', 'loads', 'state_hash',
]

__version__ = '1.0.0'

"""
snapshot.py - Persisted form of ledger state

The ledger does not own a storage engine. The hosting runtime saves and
restores it through a plain, JSON-compatible snapshot capturing:
    - administrator identity, display name and base metadata locator
    - the ordered class registry (list index == class ID)
    - the sparse balance table (amounts as decimal strings, no zero entries)
    - operator approvals
    - both gate flags

Snapshots are canonical: the same ledger state always serializes to the same
bytes, so state_hash() can be compared across processes.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Set, Tuple
import hashlib
import json

from .access import AccessPolicy
from .core import MAX_AMOUNT, SnapshotError, TokenClass, LedgerError, require_holder
from .ledger import TokenLedger
from .notifications import NotificationSink, ReceiveHook

SNAPSHOT_VERSION = 1


def to_snapshot(ledger: TokenLedger) -> Dict[str, Any]:
    """Capture the persisted state of a ledger as a JSON-compatible dict."""
    balances = {
        holder: {str(class_id): str(amount) for class_id, amount in sorted(holdings.items())}
        for holder, holdings in sorted(ledger.balances.items())
    }
    operators = [[holder, operator] for holder, operator in ledger.list_approvals()]
    return {
        'version': SNAPSHOT_VERSION,
        'administrator': ledger.administrator,
        'name': ledger.name,
        'base_uri': ledger.base_uri,
        'transfers_enabled': ledger.transfers_enabled,
        'market_enabled': ledger.market_enabled,
        'classes': [tc.metadata_suffix for tc in ledger.list_token_classes()],
        'balances': balances,
        'operators': operators,
    }


def from_snapshot(
    data: Dict[str, Any],
    *,
    sink: Optional[NotificationSink] = None,
    receive_hook: Optional[ReceiveHook] = None,
    access_policy: Optional[AccessPolicy] = None,
    verbose: bool = False,
) -> TokenLedger:
    """
    Rebuild a ledger from a snapshot.

    Restoring delivers no notifications: the changes were announced when
    they first happened.

    Raises:
        SnapshotError: If the snapshot is malformed or violates a ledger invariant
    """
    try:
        version = data['version']
        if version != SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version {version!r}")

        ledger = TokenLedger(
            data['administrator'],
            data['base_uri'],
            data['name'],
            sink=sink,
            receive_hook=receive_hook,
            access_policy=access_policy,
            verbose=verbose,
        )
        classes = [TokenClass(i, suffix) for i, suffix in enumerate(data['classes'])]
        balances = _parse_balances(data['balances'], len(classes))
        operators: Set[Tuple[str, str]] = set()
        for pair in data['operators']:
            holder, operator = pair
            if not holder or not operator or holder == operator:
                raise SnapshotError(f"Invalid operator approval {pair!r}")
            operators.add((str(holder), str(operator)))
        transfers_enabled = _parse_flag(data, 'transfers_enabled')
        market_enabled = _parse_flag(data, 'market_enabled')
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError, LedgerError) as e:
        raise SnapshotError(f"Malformed snapshot: {type(e).__name__}: {e}") from e

    ledger._restore(classes, balances, operators, transfers_enabled, market_enabled)
    return ledger


def dumps(ledger: TokenLedger) -> str:
    """Serialize a ledger to canonical JSON text."""
    return json.dumps(to_snapshot(ledger), sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def loads(text: str, **kwargs: Any) -> TokenLedger:
    """Rebuild a ledger from JSON text produced by dumps(). Accepts from_snapshot() keywords."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    return from_snapshot(data, **kwargs)


def state_hash(ledger: TokenLedger) -> str:
    """
    Content hash of ledger state.

    Identical state always hashes identically, regardless of the order in
    which holders or approvals were added.
    """
    return hashlib.sha256(dumps(ledger).encode('utf-8')).hexdigest()


# ============================================================================
# HELPERS
# ============================================================================

def _parse_flag(data: Dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise SnapshotError(f"{key} must be a boolean, got {value!r}")
    return value


def _parse_balances(raw: Dict[str, Dict[str, str]], class_count: int) -> Dict[str, Dict[int, int]]:
    if not isinstance(raw, dict):
        raise SnapshotError(f"balances must be an object, got {type(raw).__name__}")
    balances: Dict[str, Dict[int, int]] = {}
    totals: Dict[int, int] = {}
    for holder, holdings in raw.items():
        require_holder(holder)
        if not isinstance(holdings, dict):
            raise SnapshotError(f"Balances of {holder} must be an object, got {type(holdings).__name__}")
        parsed: Dict[int, int] = {}
        for class_key, amount_text in holdings.items():
            class_id = _parse_decimal(class_key, f"class key of {holder}")
            if not class_id < class_count:
                raise SnapshotError(f"Balance of {holder} refers to unknown class {class_id}")
            amount = _parse_decimal(amount_text, f"balance of {holder} in class {class_id}")
            if amount > MAX_AMOUNT:
                raise SnapshotError(f"Balance of {holder} in class {class_id} out of range: {amount}")
            if amount:
                parsed[class_id] = amount
                totals[class_id] = totals.get(class_id, 0) + amount
                if totals[class_id] > MAX_AMOUNT:
                    raise SnapshotError(f"Supply of class {class_id} exceeds {MAX_AMOUNT}")
        if parsed:
            balances[holder] = parsed
    return balances


def _parse_decimal(text: str, what: str) -> int:
    """Amounts and class keys are stored as unsigned decimal strings."""
    if not isinstance(text, str) or not text.isascii() or not text.isdigit():
        raise SnapshotError(f"{what} must be a decimal string, got {text!r}")
    return int(text)

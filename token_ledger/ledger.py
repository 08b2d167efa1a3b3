"""
ledger.py - Administered Multi-Asset Token Ledger

The TokenLedger class is the central state manager for the token system.
It is the only module that mutates state, ensuring controlled and auditable changes.

Key responsibilities:
    - Implements LedgerView protocol for safe read-only access by collaborators
    - Maintains the token class registry, the sparse balance table and per-class supplies
    - Applies mint, burn and transfer operations atomically (a batch applies in full or not at all)
    - Enforces administrator rights through an injected AccessPolicy
    - Gates public transfers and marketplace access behind two global flags
    - Delivers change notifications to an injected sink once an operation commits
"""

from __future__ import annotations
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple
import copy

from .access import AccessPolicy, Role, SingleAdministrator
from .core import (
    # Types
    TokenClass, BalanceDelta, BalanceKey, Positions, HolderBalances,
    # Constants
    DEFAULT_NAME,
    # Exceptions
    LedgerError, NotOwnerOrApproved, UnknownTokenClass, InsufficientBalance,
    TransfersDisabled, MarketDisabled, EmptyName, ReceiverRejected,
    # Helper functions
    require_holder, require_amount, require_same_length, checked_add,
    mint_deltas, burn_deltas, transfer_deltas, supply_deltas,
)
from .notifications import (
    Notification, NotificationSink, NullSink, ReceiveHook,
    TokenClassCreated, TransferSingle, TransferBatch, Burned, BatchBurned,
    TransfersEnabledChanged, MarketEnabledChanged, NameChanged, BaseUriChanged,
    ApprovalForAll, AdministratorTransferred,
)

# (operator, source, dest, class_ids, amounts, aux_data)
HookCall = Tuple[str, Optional[str], str, Tuple[int, ...], Tuple[int, ...], bytes]


class TokenLedger:
    """
    Multi-asset token ledger under a single administrator.

    Implements the LedgerView protocol, allowing the ledger to be passed to
    collaborators that only read balances and gates.

    Design Principles:
        - Validate, then apply: every operation replays its balance deltas on a
          scratch copy first. Nothing is written until all of them pass.
        - Notify on commit: notifications are buffered while an operation runs
          and delivered only when it succeeds.
        - Callers are already authenticated: every mutating method takes the
          caller identity as its first argument.

    Thread Safety:
        Not thread-safe. The hosting runtime must serialize calls.

    Example:
        ledger = TokenLedger("issuer", "ipfs://meta/", "Drop")
        gold = ledger.create_token_class("issuer", "gold.json")
        ledger.mint("issuer", "alice", gold, 100)
        ledger.set_transfers_enabled("issuer", True)
        ledger.transfer("alice", "alice", "bob", gold, 40)
    """

    def __init__(
        self,
        administrator: str,
        base_uri: str = "",
        name: str = DEFAULT_NAME,
        *,
        sink: Optional[NotificationSink] = None,
        receive_hook: Optional[ReceiveHook] = None,
        access_policy: Optional[AccessPolicy] = None,
        verbose: bool = True,
    ):
        """
        Create a ledger.

        Args:
            administrator: Identity holding administrator rights
            base_uri: Ledger-wide metadata locator prefix
            name: Initial display name (must be non-empty)
            sink: Receiver of committed-change notifications (default: discard)
            receive_hook: Optional recipient check for mints and transfers
            access_policy: Authorization scheme (default: SingleAdministrator(administrator))
            verbose: Print registrations, rejections and notifications (default: True)

        Raises:
            EmptyName: If name is empty
            ValueError: If administrator is empty or not recognized by access_policy
        """
        require_holder(administrator, "administrator")
        if not name:
            raise EmptyName("Ledger name cannot be empty")
        if access_policy is None:
            access_policy = SingleAdministrator(administrator)
        elif not access_policy.is_administrator(administrator):
            raise ValueError(f"{administrator} is not an administrator under {access_policy!r}")
        if not isinstance(base_uri, str):
            raise ValueError("base_uri must be a string")

        self._policy: AccessPolicy = access_policy
        self._name = name
        self._base_uri = base_uri
        self._classes: List[TokenClass] = []
        # holder -> {class_id -> amount}; zero balances are never stored
        self.balances: Dict[str, Dict[int, int]] = {}
        # Inverted index mapping class -> {holder -> amount} for O(1) position lookups
        self._positions_by_class: Dict[int, Dict[str, int]] = defaultdict(dict)
        self._supplies: Dict[int, int] = {}
        # (holder, operator) pairs
        self._operators: Set[Tuple[str, str]] = set()
        self._transfers_enabled = False
        self._market_enabled = False
        self.sink: NotificationSink = sink if sink is not None else NullSink()
        self.receive_hook: Optional[ReceiveHook] = receive_hook
        self.verbose = verbose

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def administrator(self) -> str:
        return self._policy.administrator

    @property
    def access_policy(self) -> AccessPolicy:
        return self._policy

    @property
    def name(self) -> str:
        return self._name

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def transfers_enabled(self) -> bool:
        return self._transfers_enabled

    @property
    def market_enabled(self) -> bool:
        return self._market_enabled

    @property
    def class_count(self) -> int:
        """Number of token classes ever created (also the next class ID)."""
        return len(self._classes)

    def is_administrator(self, caller: str) -> bool:
        return self._policy.is_administrator(caller)

    def exists(self, class_id: int) -> bool:
        """True if class_id names a created token class."""
        return (
            isinstance(class_id, int)
            and not isinstance(class_id, bool)
            and 0 <= class_id < len(self._classes)
        )

    def get_token_class(self, class_id: int) -> TokenClass:
        """
        Return the TokenClass record for an ID.

        Raises:
            UnknownTokenClass: If class_id >= class_count
        """
        self._require_class(class_id)
        return self._classes[class_id]

    def list_token_classes(self) -> List[TokenClass]:
        """All classes in creation order."""
        return list(self._classes)

    def resolve_metadata(self, class_id: int) -> str:
        """
        Return the full metadata locator of a class: base_uri + metadata_suffix.

        Raises:
            UnknownTokenClass: If class_id >= class_count
        """
        return self._base_uri + self.get_token_class(class_id).metadata_suffix

    def balance_of(self, holder: str, class_id: int) -> int:
        """
        Get the amount of a class held by a holder.

        Returns 0 for any holder/class pair that was never minted, including
        classes that do not exist.
        """
        return self.balances.get(holder, {}).get(class_id, 0)

    def balance_of_batch(self, holders: Sequence[str], class_ids: Sequence[int]) -> List[int]:
        """
        Balances for parallel lists of holders and classes.

        Raises:
            ArrayLengthMismatch: If the lists differ in length
        """
        require_same_length(holders, class_ids)
        return [self.balance_of(h, c) for h, c in zip(holders, class_ids)]

    def get_holder_balances(self, holder: str) -> HolderBalances:
        """All non-zero balances of a holder."""
        return dict(self.balances.get(holder, {}))

    def get_positions(self, class_id: int) -> Positions:
        """
        Get all non-zero holdings of a class across all holders.

        Uses an inverted index for O(1) lookup performance.
        """
        return dict(self._positions_by_class.get(class_id, {}))

    def total_supply(self, class_id: int) -> int:
        """
        Total amount of a class in circulation.

        Raises:
            UnknownTokenClass: If class_id >= class_count
        """
        self._require_class(class_id)
        return self._supplies.get(class_id, 0)

    def is_approved_for_all(self, holder: str, operator: str) -> bool:
        """True if operator may move holder's balances."""
        return (holder, operator) in self._operators

    def list_approvals(self) -> List[Tuple[str, str]]:
        """All (holder, operator) approvals, sorted."""
        return sorted(self._operators)

    def transfers_open_for(self, caller: str) -> bool:
        """True if caller may transfer right now (gate open or caller is administrator)."""
        return self._transfers_enabled or self.is_administrator(caller)

    def market_open_for(self, caller: str) -> bool:
        """True if caller may trade on a marketplace right now."""
        return self._market_enabled or self.is_administrator(caller)

    def require_market_open(self, caller: str) -> None:
        """
        Check the market gate on behalf of a marketplace collaborator.

        The ledger itself has no marketplace logic; escrow or exchange code
        calls this before accepting a trade action.

        Raises:
            MarketDisabled: If the gate is closed and caller is not administrator
        """
        if not self.market_open_for(caller):
            raise MarketDisabled(f"Market is disabled for {caller}")

    def verify_conservation(self, expected_supplies: Optional[Dict[int, int]] = None) -> Dict[str, Any]:
        """
        Verify that tracked supplies match the balance table.

        For every class, the sum of balances across all holders must equal
        the tracked total supply, which only mint and burn change.

        Args:
            expected_supplies: Optional dict mapping class IDs to expected totals.

        Returns:
            Dict with keys:
            - 'valid': bool - True if every check holds
            - 'supplies': Dict[int, int] - Summed balances per class
            - 'discrepancies': List[Dict] - class_id, expected, actual, difference

        Example:
            result = ledger.verify_conservation({0: 100})
            assert result['valid'], result['discrepancies']
        """
        supplies: Dict[int, int] = {}
        discrepancies = []

        for token_class in self._classes:
            class_id = token_class.class_id
            positions = self._positions_by_class.get(class_id, {})
            actual = sum(positions[h] for h in sorted(positions))
            supplies[class_id] = actual

            tracked = self._supplies.get(class_id, 0)
            if actual != tracked:
                discrepancies.append({
                    'class_id': class_id,
                    'expected': tracked,
                    'actual': actual,
                    'difference': actual - tracked,
                    'error': 'balance table disagrees with tracked supply',
                })
            if expected_supplies and class_id in expected_supplies:
                expected = expected_supplies[class_id]
                if actual != expected:
                    discrepancies.append({
                        'class_id': class_id,
                        'expected': expected,
                        'actual': actual,
                        'difference': actual - expected,
                    })

        if expected_supplies:
            for class_id, expected in expected_supplies.items():
                if class_id not in supplies:
                    discrepancies.append({
                        'class_id': class_id,
                        'expected': expected,
                        'actual': 0,
                        'difference': -expected,
                        'error': 'class not created',
                    })

        return {
            'valid': len(discrepancies) == 0,
            'supplies': supplies,
            'discrepancies': discrepancies,
        }

    # ========================================================================
    # ADMINISTRATION (Mutating)
    # ========================================================================

    def create_token_class(self, caller: str, metadata_suffix: str) -> int:
        """
        Register a new token class with the next sequential ID.

        Args:
            caller: Must be the administrator
            metadata_suffix: Locator suffix appended to base_uri

        Returns:
            The ID of the class just created (0 for the first class)

        Raises:
            NotAdministrator: If caller is not the administrator
            ValueError: If metadata_suffix is not a string
        """
        with self._operation("create_token_class") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            token_class = TokenClass(len(self._classes), metadata_suffix)
            self._classes.append(token_class)
            pending.append(TokenClassCreated(token_class.class_id, metadata_suffix))
            if self.verbose:
                print(f"📝 Registered: class {token_class.class_id} ({self._base_uri}{metadata_suffix})")
        return token_class.class_id

    def set_transfers_enabled(self, caller: str, enabled: bool) -> None:
        """Open or close the public transfer gate."""
        with self._operation("set_transfers_enabled") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            self._transfers_enabled = bool(enabled)
            pending.append(TransfersEnabledChanged(self._transfers_enabled))

    def set_market_enabled(self, caller: str, enabled: bool) -> None:
        """Open or close the marketplace gate consulted by collaborators."""
        with self._operation("set_market_enabled") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            self._market_enabled = bool(enabled)
            pending.append(MarketEnabledChanged(self._market_enabled))

    def set_name(self, caller: str, new_name: str) -> None:
        """
        Replace the display name.

        Raises:
            NotAdministrator: If caller is not the administrator
            EmptyName: If new_name is empty
        """
        with self._operation("set_name") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            if not new_name:
                raise EmptyName("Ledger name cannot be empty")
            old_name = self._name
            self._name = new_name
            pending.append(NameChanged(old_name, new_name))

    def set_base_uri(self, caller: str, base_uri: str) -> None:
        """Replace the ledger-wide metadata locator prefix."""
        with self._operation("set_base_uri") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            if not isinstance(base_uri, str):
                raise ValueError("base_uri must be a string")
            old_uri = self._base_uri
            self._base_uri = base_uri
            pending.append(BaseUriChanged(old_uri, base_uri))

    def transfer_administrator(self, caller: str, new_administrator: str) -> None:
        """Hand administrator rights to another identity."""
        with self._operation("transfer_administrator") as pending:
            previous = self._policy.transfer_administrator(caller, new_administrator)
            pending.append(AdministratorTransferred(previous, new_administrator))

    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None:
        """
        Allow or forbid operator to move all of caller's balances.

        Raises:
            ValueError: If operator is empty or equal to caller
        """
        with self._operation("set_approval_for_all") as pending:
            require_holder(caller, "caller")
            require_holder(operator, "operator")
            if operator == caller:
                raise ValueError("A holder cannot approve itself as operator")
            if approved:
                self._operators.add((caller, operator))
            else:
                self._operators.discard((caller, operator))
            pending.append(ApprovalForAll(caller, operator, bool(approved)))

    # ========================================================================
    # MINTING (Mutating)
    # ========================================================================

    def mint(self, caller: str, holder: str, class_id: int, amount: int, aux_data: bytes = b"") -> None:
        """
        Create amount of a class in holder's balance.

        Args:
            caller: Must be the administrator
            holder: Recipient
            class_id: Existing class ID
            amount: Non-negative amount
            aux_data: Opaque data passed to the receive hook only

        Raises:
            NotAdministrator: If caller is not the administrator
            UnknownTokenClass: If class_id >= class_count
            ArithmeticOverflow: If the supply would exceed MAX_AMOUNT
            ReceiverRejected: If the receive hook refuses
        """
        self._mint("mint", caller, [holder], [class_id], [amount], aux_data)

    def bulk_mint(
        self,
        caller: str,
        holders: Sequence[str],
        class_ids: Sequence[int],
        amounts: Sequence[int],
        aux_data: bytes = b"",
    ) -> None:
        """
        Mint amounts[i] of class_ids[i] to holders[i] for every index, atomically.

        Every element is validated before any balance changes; if one element
        fails, none applies.

        Raises:
            ArrayLengthMismatch: If the three lists differ in length
            (and everything mint() raises)
        """
        self._mint("bulk_mint", caller, holders, class_ids, amounts, aux_data)

    def _mint(
        self,
        label: str,
        caller: str,
        holders: Sequence[str],
        class_ids: Sequence[int],
        amounts: Sequence[int],
        aux_data: bytes,
    ) -> None:
        with self._operation(label) as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            require_same_length(holders, class_ids, amounts)
            for holder, class_id, amount in zip(holders, class_ids, amounts):
                require_holder(holder)
                self._require_class(class_id)
                require_amount(amount)

            hook_calls: List[HookCall] = [
                (caller, None, h, (c,), (a,), aux_data)
                for h, c, a in zip(holders, class_ids, amounts)
            ]
            self._commit(mint_deltas(holders, class_ids, amounts), hook_calls)
            for holder, class_id, amount in zip(holders, class_ids, amounts):
                pending.append(TransferSingle(caller, None, holder, class_id, amount))

    # ========================================================================
    # BURNING (Mutating)
    # ========================================================================

    def burn(self, caller: str, class_id: int, amount: int) -> None:
        """
        Destroy amount of a class from caller's own balance.

        Raises:
            UnknownTokenClass: If class_id >= class_count
            InsufficientBalance: If caller holds less than amount
        """
        with self._operation("burn") as pending:
            self._burn(caller, caller, [class_id], [amount], pending, batch=False)

    def batch_burn(self, caller: str, class_ids: Sequence[int], amounts: Sequence[int]) -> None:
        """
        Destroy several classes from caller's own balance, atomically.

        Raises:
            ArrayLengthMismatch: If the lists differ in length
            (and everything burn() raises)
        """
        with self._operation("batch_burn") as pending:
            self._burn(caller, caller, class_ids, amounts, pending, batch=True)

    def burn_from(self, caller: str, holder: str, class_id: int, amount: int) -> None:
        """
        Administrator burn from any holder's balance.

        Raises:
            NotAdministrator: If caller is not the administrator
            (and everything burn() raises)
        """
        with self._operation("burn_from") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            self._burn(caller, holder, [class_id], [amount], pending, batch=False)

    def batch_burn_from(
        self,
        caller: str,
        holder: str,
        class_ids: Sequence[int],
        amounts: Sequence[int],
    ) -> None:
        """Administrator batch burn from any holder's balance, atomically."""
        with self._operation("batch_burn_from") as pending:
            self._policy.require(caller, Role.ADMINISTRATOR)
            self._burn(caller, holder, class_ids, amounts, pending, batch=True)

    def _burn(
        self,
        operator: str,
        holder: str,
        class_ids: Sequence[int],
        amounts: Sequence[int],
        pending: List[Notification],
        batch: bool,
    ) -> None:
        require_holder(holder)
        require_same_length(class_ids, amounts)
        for class_id, amount in zip(class_ids, amounts):
            self._require_class(class_id)
            require_amount(amount)

        self._commit(burn_deltas(holder, class_ids, amounts), [])

        if batch:
            ids, amts = tuple(class_ids), tuple(amounts)
            pending.append(TransferBatch(operator, holder, None, ids, amts))
            pending.append(BatchBurned(holder, ids, amts))
        else:
            pending.append(TransferSingle(operator, holder, None, class_ids[0], amounts[0]))
            pending.append(Burned(holder, class_ids[0], amounts[0]))

    # ========================================================================
    # TRANSFERS (Mutating)
    # ========================================================================

    def transfer(
        self,
        caller: str,
        source: str,
        dest: str,
        class_id: int,
        amount: int,
        aux_data: bytes = b"",
    ) -> None:
        """
        Move amount of a class from source to dest.

        Permitted while the transfer gate is open, or at any time for the
        administrator. Caller must be source, an approved operator of source,
        or the administrator.

        Raises:
            TransfersDisabled: If the gate is closed and caller is not administrator
            NotOwnerOrApproved: If caller may not move source's balances
            UnknownTokenClass: If class_id >= class_count
            InsufficientBalance: If source holds less than amount
            ReceiverRejected: If the receive hook refuses
        """
        with self._operation("transfer") as pending:
            self._transfer(caller, source, dest, [class_id], [amount], aux_data)
            pending.append(TransferSingle(caller, source, dest, class_id, amount))

    def batch_transfer(
        self,
        caller: str,
        source: str,
        dest: str,
        class_ids: Sequence[int],
        amounts: Sequence[int],
        aux_data: bytes = b"",
    ) -> None:
        """
        Move several classes from source to dest, atomically.

        Raises:
            ArrayLengthMismatch: If the lists differ in length
            (and everything transfer() raises)
        """
        with self._operation("batch_transfer") as pending:
            self._transfer(caller, source, dest, class_ids, amounts, aux_data)
            pending.append(TransferBatch(caller, source, dest, tuple(class_ids), tuple(amounts)))

    def _transfer(
        self,
        caller: str,
        source: str,
        dest: str,
        class_ids: Sequence[int],
        amounts: Sequence[int],
        aux_data: bytes,
    ) -> None:
        # Gate first: nothing else is looked at while transfers are closed
        if not self.transfers_open_for(caller):
            raise TransfersDisabled(f"Transfers are disabled for {caller}")
        require_holder(source, "source")
        require_holder(dest, "dest")
        if not (caller == source
                or self.is_approved_for_all(source, caller)
                or self.is_administrator(caller)):
            raise NotOwnerOrApproved(f"{caller} may not move balances of {source}")
        require_same_length(class_ids, amounts)
        for class_id, amount in zip(class_ids, amounts):
            self._require_class(class_id)
            require_amount(amount)

        hook_calls: List[HookCall] = [
            (caller, source, dest, tuple(class_ids), tuple(amounts), aux_data)
        ]
        self._commit(transfer_deltas(source, dest, class_ids, amounts), hook_calls)

    # ========================================================================
    # VALIDATION AND APPLICATION
    # ========================================================================

    @contextmanager
    def _operation(self, label: str) -> Iterator[List[Notification]]:
        """
        Run one public operation.

        Yields a list the operation appends notifications to. They are
        delivered only if the body completes; a failure is printed (when
        verbose) and re-raised with nothing delivered.
        """
        pending: List[Notification] = []
        try:
            yield pending
        except (LedgerError, ValueError) as e:
            if self.verbose:
                print(f"✗ REJECTED: {label}: {type(e).__name__}: {e}")
            raise
        for notification in pending:
            self._deliver(notification)

    def _deliver(self, notification: Notification) -> None:
        if self.verbose:
            print(f"📣 {notification}")
        self.sink.notify(notification)

    def _require_class(self, class_id: int) -> None:
        if not self.exists(class_id):
            raise UnknownTokenClass(
                f"Token class {class_id!r} does not exist ({len(self._classes)} created)"
            )

    def _simulate(self, deltas: Sequence[BalanceDelta]) -> Tuple[Dict[BalanceKey, int], Dict[int, int]]:
        """
        Replay deltas in order on a scratch copy of the touched balances.

        Returns:
            (new balance per touched key, new supply per touched class)

        Raises:
            InsufficientBalance: If any intermediate balance would go negative
            ArithmeticOverflow: If any balance or supply would exceed MAX_AMOUNT
        """
        scratch: Dict[BalanceKey, int] = {}
        for d in deltas:
            current = scratch[d.key] if d.key in scratch else self.balance_of(d.holder, d.class_id)
            try:
                scratch[d.key] = checked_add(current, d.amount)
            except InsufficientBalance:
                raise InsufficientBalance(
                    f"{d.holder} holds {current} of class {d.class_id}, needs {-d.amount}"
                ) from None

        supplies: Dict[int, int] = {}
        for class_id, change in supply_deltas(deltas).items():
            supplies[class_id] = checked_add(self._supplies.get(class_id, 0), change)
        return scratch, supplies

    def _commit(self, deltas: Sequence[BalanceDelta], hook_calls: Sequence[HookCall]) -> None:
        """
        Validate and apply deltas, then run the receive hook.

        If the hook refuses, every touched balance and supply is restored
        before ReceiverRejected propagates.
        """
        new_balances, new_supplies = self._simulate(deltas)

        old_balances = {key: self.balance_of(*key) for key in new_balances}
        old_supplies = {c: self._supplies.get(c, 0) for c in new_supplies}

        self._write(new_balances, new_supplies)

        if self.receive_hook is None:
            return
        for call in hook_calls:
            try:
                self.receive_hook.on_received(*call)
            except Exception as e:
                self._write(old_balances, old_supplies)
                raise ReceiverRejected(f"Receiver {call[2]} refused delivery: {e}") from e

    def _write(self, balances: Dict[BalanceKey, int], supplies: Dict[int, int]) -> None:
        for (holder, class_id), amount in balances.items():
            self._set_balance(holder, class_id, amount)
        for class_id, supply in supplies.items():
            if supply:
                self._supplies[class_id] = supply
            else:
                self._supplies.pop(class_id, None)

    def _set_balance(self, holder: str, class_id: int, amount: int) -> None:
        """
        Store one balance and keep the position index in step.

        Zero balances are removed from both tables so that an entry of 0 and
        no entry are indistinguishable.
        """
        if amount:
            self.balances.setdefault(holder, {})[class_id] = amount
            self._positions_by_class[class_id][holder] = amount
        else:
            holdings = self.balances.get(holder)
            if holdings is not None:
                holdings.pop(class_id, None)
                if not holdings:
                    del self.balances[holder]
            self._positions_by_class[class_id].pop(holder, None)

    def _restore(
        self,
        classes: Sequence[TokenClass],
        balances: Dict[str, Dict[int, int]],
        operators: Set[Tuple[str, str]],
        transfers_enabled: bool,
        market_enabled: bool,
    ) -> None:
        """Load persisted state into a freshly constructed ledger (used by snapshot)."""
        self._classes = list(classes)
        self.balances = {}
        self._positions_by_class = defaultdict(dict)
        self._supplies = {}
        for holder, holdings in balances.items():
            for class_id, amount in holdings.items():
                self._set_balance(holder, class_id, amount)
                self._supplies[class_id] = self._supplies.get(class_id, 0) + amount
        self._operators = set(operators)
        self._transfers_enabled = transfers_enabled
        self._market_enabled = market_enabled

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> TokenLedger:
        """
        Create a deep copy of this ledger.

        All state is fully independent: modifications to the clone will not
        affect the original ledger, and vice versa. The sink and receive hook
        are shared, since they belong to the hosting runtime.
        """
        cloned = TokenLedger.__new__(TokenLedger)
        cloned._policy = copy.deepcopy(self._policy)
        cloned._name = self._name
        cloned._base_uri = self._base_uri
        cloned._classes = list(self._classes)
        cloned.balances = {h: dict(bals) for h, bals in self.balances.items()}
        cloned._positions_by_class = defaultdict(dict)
        for class_id, positions in self._positions_by_class.items():
            cloned._positions_by_class[class_id] = dict(positions)
        cloned._supplies = dict(self._supplies)
        cloned._operators = set(self._operators)
        cloned._transfers_enabled = self._transfers_enabled
        cloned._market_enabled = self._market_enabled
        cloned.sink = self.sink
        cloned.receive_hook = self.receive_hook
        cloned.verbose = self.verbose
        return cloned

    def __repr__(self) -> str:
        return (
            f"TokenLedger({self._name!r}, admin={self.administrator!r}, "
            f"classes={len(self._classes)}, holders={len(self.balances)}, "
            f"transfers={'on' if self._transfers_enabled else 'off'}, "
            f"market={'on' if self._market_enabled else 'off'})"
        )

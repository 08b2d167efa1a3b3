"""
access.py - Authorization policies for the token ledger

The ledger asks a policy one question: may this caller act in this role?
Policies hold no balances and know nothing about token classes, so a
different scheme can be swapped in without touching ledger logic.

Classes:
- Role: The privileges an operation can require
- AccessPolicy: Protocol every policy implements
- SingleAdministrator: Exactly one privileged identity (the default)
- AdministratorSet: Any member of a set of identities is privileged
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable, Protocol, Set, runtime_checkable

from .core import NotAdministrator, require_holder


class Role(Enum):
    """
    Privilege required by an operation.

    ADMINISTRATOR: class registry, minting, forced burns, gates, name.
    HOLDER: acting on one's own balances (checked by the ledger against the
            holder argument, not by the policy).
    """
    ADMINISTRATOR = "administrator"
    HOLDER = "holder"


@runtime_checkable
class AccessPolicy(Protocol):
    """Protocol for authorization policies."""

    @property
    def administrator(self) -> str:
        """The identity reported as the ledger's administrator."""
        ...

    def is_administrator(self, caller: str) -> bool:
        ...

    def require(self, caller: str, role: Role) -> None:
        """Raise NotAdministrator unless caller may act in role."""
        ...

    def transfer_administrator(self, caller: str, new_administrator: str) -> str:
        """Hand administrator rights to a new identity; return the previous one."""
        ...


class SingleAdministrator:
    """
    One administrator, fixed at construction and transferable.

    Example:
        policy = SingleAdministrator("issuer")
        policy.require("issuer", Role.ADMINISTRATOR)   # ok
        policy.require("alice", Role.ADMINISTRATOR)    # NotAdministrator
    """

    def __init__(self, administrator: str):
        require_holder(administrator, "administrator")
        self._administrator = administrator

    @property
    def administrator(self) -> str:
        return self._administrator

    def is_administrator(self, caller: str) -> bool:
        return caller == self._administrator

    def require(self, caller: str, role: Role) -> None:
        if role is Role.ADMINISTRATOR and not self.is_administrator(caller):
            raise NotAdministrator(f"{caller} is not the administrator")

    def transfer_administrator(self, caller: str, new_administrator: str) -> str:
        self.require(caller, Role.ADMINISTRATOR)
        require_holder(new_administrator, "new administrator")
        previous = self._administrator
        self._administrator = new_administrator
        return previous

    def __repr__(self) -> str:
        return f"SingleAdministrator({self._administrator!r})"


class AdministratorSet:
    """
    Several identities share administrator rights.

    The first member is the one reported as `administrator`. Transferring
    replaces the caller's membership with the new identity.
    """

    def __init__(self, administrators: Iterable[str]):
        members = list(administrators)
        if not members:
            raise ValueError("AdministratorSet needs at least one member")
        for member in members:
            require_holder(member, "administrator")
        self._primary = members[0]
        self._members: Set[str] = set(members)

    @property
    def administrator(self) -> str:
        return self._primary

    @property
    def members(self) -> Set[str]:
        return set(self._members)

    def is_administrator(self, caller: str) -> bool:
        return caller in self._members

    def require(self, caller: str, role: Role) -> None:
        if role is Role.ADMINISTRATOR and not self.is_administrator(caller):
            raise NotAdministrator(f"{caller} is not an administrator")

    def transfer_administrator(self, caller: str, new_administrator: str) -> str:
        self.require(caller, Role.ADMINISTRATOR)
        require_holder(new_administrator, "new administrator")
        self._members.discard(caller)
        self._members.add(new_administrator)
        if self._primary == caller:
            self._primary = new_administrator
        return caller

    def __repr__(self) -> str:
        return f"AdministratorSet({sorted(self._members)})"

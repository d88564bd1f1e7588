"""Cart ownership: a cart is keyed by an account or an anonymous session, never both."""

from dataclasses import dataclass

from commerce.errors import InvalidOwner


@dataclass(frozen=True)
class AccountOwner:
    account_id: str


@dataclass(frozen=True)
class SessionOwner:
    session_id: str


OwnerKey = AccountOwner | SessionOwner


def owner_key(account_id=None, session_id=None) -> OwnerKey:
    """Build an OwnerKey from the two optional identities a caller may supply."""
    if account_id and session_id:
        raise InvalidOwner("Supply either an account or a session identity, not both")
    if account_id:
        return AccountOwner(account_id=str(account_id))
    if session_id:
        return SessionOwner(session_id=str(session_id))
    raise InvalidOwner()

"""Utility for resolving usernames to IDs."""

from finledger.database.base import LedgerStore


def resolve_user(store: LedgerStore, user: str | int) -> int:
    """Resolve username or ID to user ID.

    Args:
        store: Ledger store instance
        user: Username (str) or ID (int or string representation of int)

    Returns:
        User ID

    Raises:
        ValueError: If user is not found
    """
    if isinstance(user, int):
        if store.get_user(user) is None:
            raise ValueError(f"User ID {user} not found")
        return user

    # Numeric strings are IDs, anything else is a username
    if user.strip().isdigit():
        user_id = int(user)
        if store.get_user(user_id) is None:
            raise ValueError(f"User ID {user_id} not found")
        return user_id

    found = store.get_user_by_username(user)
    if found is None:
        raise ValueError(f"User '{user}' not found")
    return found.id

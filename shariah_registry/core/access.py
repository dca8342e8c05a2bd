"""
Rater authorization.

The registry only asks one question of its authorization collaborator:
may this caller submit ratings? RaterRoles is a minimal role table that
answers it; any object with a matching `has_rater_capability` method can be
injected instead.
"""

from typing import Set, Protocol

from .errors import AuthorizationError
from .identity import normalize_address, AddressLike


ADMIN_ROLE = "admin"
RATER_ROLE = "rater"


class RaterAuthorization(Protocol):
    def has_rater_capability(self, caller: AddressLike) -> bool:
        ...


class RaterRoles:
    """
    Role table with a single admin who manages raters.

    The admin is bootstrapped holding both the admin and rater roles.
    """

    def __init__(self, admin: AddressLike):
        self.admin = normalize_address(admin)
        self._raters: Set[str] = {self.admin}

    def has_rater_capability(self, caller: AddressLike) -> bool:
        try:
            return normalize_address(caller) in self._raters
        except ValueError:
            return False

    def is_admin(self, caller: AddressLike) -> bool:
        try:
            return normalize_address(caller) == self.admin
        except ValueError:
            return False

    def _require_admin(self, sender: AddressLike) -> None:
        if not self.is_admin(sender):
            raise AuthorizationError(str(sender), ADMIN_ROLE)

    def grant_rater(self, sender: AddressLike, account: AddressLike) -> bool:
        """
        Grant the rater role.

        Returns:
            True if the role was newly granted
        """
        self._require_admin(sender)
        account = normalize_address(account)
        if account in self._raters:
            return False
        self._raters.add(account)
        return True

    def revoke_rater(self, sender: AddressLike, account: AddressLike) -> bool:
        """
        Revoke the rater role.

        Returns:
            True if the account held the role
        """
        self._require_admin(sender)
        account = normalize_address(account)
        if account not in self._raters:
            return False
        self._raters.discard(account)
        return True

    def raters(self) -> list:
        """Current raters, sorted."""
        return sorted(self._raters)

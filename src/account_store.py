from typing import Dict, List

from models import ClientAccount


class AccountStore:
    """
    Owns client accounts for a single run.
    Knows nothing about transaction semantics; the ledger mutates accounts in place.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create a new, empty, unlocked one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def snapshot(self) -> List[ClientAccount]:
        """Return all accounts ordered by ascending client id."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

from typing import Dict

from models import ClientAccount
from transaction_log import TransactionLog


class StateManager:
    """
    Owns client accounts and the transaction log for one run.
    Accounts are created lazily and never removed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.transaction_log = TransactionLog()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

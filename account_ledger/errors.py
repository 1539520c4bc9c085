"""
Ledger Exceptions

Validation errors are recovered at the HTTP boundary and mapped to 400/404.
Storage errors are never recovered and surface as server failures.
"""


class LedgerError(Exception):
    """Base class for all ledger errors"""


class InvalidAmountError(LedgerError, ValueError):
    """Amount is not an integer or is out of the allowed range"""


class InvalidAccountError(LedgerError, ValueError):
    """Account identifier is not a non-empty string"""


class AccountNotFoundError(LedgerError, LookupError):
    """Operation targets an account that does not exist"""

    def __init__(self, account_id: str):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


class InsufficientFundsError(LedgerError):
    """Withdrawal would take a balance below zero"""

    def __init__(self, account_id: str, balance: int, amount: int):
        super().__init__(
            f"Insufficient funds in account {account_id}: balance {balance}, requested {amount}"
        )
        self.account_id = account_id
        self.balance = balance
        self.amount = amount


class StorageError(LedgerError):
    """Base class for durable storage failures"""


class StorageCorruptionError(StorageError):
    """Persisted ledger data is unreadable or malformed"""


class StorageWriteError(StorageError):
    """Persisted ledger data could not be written"""

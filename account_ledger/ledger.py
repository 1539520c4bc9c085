"""
Ledger Service Module

Enforces the account ledger business rules and is the only place balances
are changed. The mapping is loaded from storage once, held in memory behind
a single lock, and written through to storage on every mutation before the
call returns.
"""

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Optional, Tuple
import threading

from .errors import (
    AccountNotFoundError, InsufficientFundsError, InvalidAccountError, InvalidAmountError
)
from .storage import StorageInterface
from .logging_config import get_logger, log_action


logger = get_logger(__name__)


def _check_account_id(account_id: str) -> None:
    if not isinstance(account_id, str) or not account_id:
        raise InvalidAccountError(f"Account id must be a non-empty string, got {account_id!r}")


def _check_amount(amount: int, what: str = "Amount") -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"{what} must be an integer, got {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"{what} must be positive")


class LedgerService:
    """
    Account ledger with write-through persistence
    
    Every mutating operation works on a copy of the mapping, saves the copy
    while holding the lock, and only then makes it current. A storage failure
    therefore leaves memory and file at the last successfully returned state.
    """
    
    def __init__(self, storage: StorageInterface, seed_accounts: Iterable[str] = ()):
        self.storage = storage
        self.seed_accounts = tuple(seed_accounts)
        for account_id in self.seed_accounts:
            _check_account_id(account_id)
        
        self._lock = threading.RLock()
        self._accounts: Dict[str, int] = storage.load()
        logger.info("Ledger loaded with %d accounts", len(self._accounts))
    
    @contextmanager
    def _transaction(self) -> Iterator[Dict[str, int]]:
        """Yield a working copy of the ledger and commit it if the block succeeds"""
        with self._lock:
            working = dict(self._accounts)
            yield working
            self.storage.save(working)
            self._accounts = working
    
    def get_balance(self, account_id: str) -> Optional[int]:
        """Get the balance of an account, or None if it does not exist"""
        with self._lock:
            return self._accounts.get(account_id)
    
    def accounts(self) -> Dict[str, int]:
        """Get a copy of every account balance"""
        with self._lock:
            return dict(self._accounts)
    
    def create_account(self, account_id: str, initial_balance: int = 0) -> None:
        """
        Create an account if it does not already exist
        
        Creating an existing account is a no-op and does not touch storage.
        
        Raises:
            InvalidAccountError: account_id is empty
            InvalidAmountError: initial_balance is negative or not an integer
        """
        _check_account_id(account_id)
        if isinstance(initial_balance, bool) or not isinstance(initial_balance, int):
            raise InvalidAmountError(f"Initial balance must be an integer, got {initial_balance!r}")
        
        with self._lock:
            if account_id in self._accounts:
                return
            if initial_balance < 0:
                raise InvalidAmountError("Initial balance cannot be negative")
            
            with self._transaction() as accounts:
                accounts[account_id] = initial_balance
        
        log_action(logger, "info", "Account created", action="create_account",
                   resource=account_id, extra={"balance": initial_balance})
    
    def deposit(self, account_id: str, amount: int, create_missing: bool = False) -> int:
        """
        Deposit into an account and return the new balance
        
        Args:
            account_id: Account to credit
            amount: Positive amount in the smallest currency unit
            create_missing: Open the account at zero first if it does not exist,
                as part of the same persisted change
        
        Raises:
            InvalidAmountError: amount is not a positive integer
            AccountNotFoundError: account does not exist and create_missing is false
        """
        _check_account_id(account_id)
        _check_amount(amount, "Deposit amount")
        
        with self._transaction() as accounts:
            if account_id not in accounts:
                if not create_missing:
                    raise AccountNotFoundError(account_id)
                accounts[account_id] = 0
            accounts[account_id] += amount
            balance = accounts[account_id]
        
        log_action(logger, "info", "Deposit applied", action="deposit",
                   resource=account_id, extra={"amount": amount, "balance": balance})
        return balance
    
    def withdraw(self, account_id: str, amount: int) -> int:
        """
        Withdraw from an account and return the new balance
        
        Raises:
            InvalidAmountError: amount is not a positive integer
            AccountNotFoundError: account does not exist
            InsufficientFundsError: balance is lower than amount
        """
        _check_account_id(account_id)
        _check_amount(amount, "Withdrawal amount")
        
        with self._transaction() as accounts:
            self._debit(accounts, account_id, amount)
            balance = accounts[account_id]
        
        log_action(logger, "info", "Withdrawal applied", action="withdraw",
                   resource=account_id, extra={"amount": amount, "balance": balance})
        return balance
    
    def transfer(self, origin_id: str, destination_id: str, amount: int) -> Tuple[int, int]:
        """
        Move funds between accounts and return (origin balance, destination balance)
        
        The destination is opened at zero if it does not exist. Debit, credit
        and the implicit account creation are saved as one change.
        
        Raises:
            InvalidAmountError: amount is not a positive integer
            AccountNotFoundError: origin does not exist
            InsufficientFundsError: origin balance is lower than amount
        """
        _check_account_id(origin_id)
        _check_account_id(destination_id)
        _check_amount(amount, "Transfer amount")
        
        with self._transaction() as accounts:
            self._debit(accounts, origin_id, amount)
            accounts[destination_id] = accounts.get(destination_id, 0) + amount
            balances = (accounts[origin_id], accounts[destination_id])
        
        log_action(logger, "info", "Transfer applied", action="transfer",
                   resource=origin_id,
                   extra={"destination": destination_id, "amount": amount})
        return balances
    
    def reset(self) -> None:
        """Replace the ledger with the seed accounts at zero (empty if none)"""
        with self._transaction() as accounts:
            accounts.clear()
            for account_id in self.seed_accounts:
                accounts[account_id] = 0
        
        log_action(logger, "info", "Ledger reset", action="reset",
                   extra={"seed_accounts": list(self.seed_accounts)})
    
    @staticmethod
    def _debit(accounts: Dict[str, int], account_id: str, amount: int) -> None:
        balance = accounts.get(account_id)
        if balance is None:
            raise AccountNotFoundError(account_id)
        if balance < amount:
            raise InsufficientFundsError(account_id, balance, amount)
        accounts[account_id] = balance - amount

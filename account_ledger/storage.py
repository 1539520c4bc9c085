"""
Storage Backend Module

Provides the abstract ledger storage interface and implementations for
in-memory (testing) and JSON file (persistence) backends. The whole
account mapping is read and written as a single unit.
"""

from abc import ABC, abstractmethod
from typing import Dict, Union
from pathlib import Path
import json
import os
import tempfile
import threading

from .errors import StorageCorruptionError, StorageWriteError
from .logging_config import get_logger


logger = get_logger(__name__)


def validate_mapping(data: object) -> Dict[str, int]:
    """Check a decoded document is a mapping of account id to non-negative int"""
    # Empty ledgers may have been written as null or as an empty array
    if data is None or data == []:
        return {}
    if not isinstance(data, dict):
        raise StorageCorruptionError(
            f"Expected a JSON object of balances, got {type(data).__name__}"
        )
    
    accounts: Dict[str, int] = {}
    for account_id, balance in data.items():
        # bool is an int subclass
        if isinstance(balance, bool) or not isinstance(balance, int):
            raise StorageCorruptionError(
                f"Balance for account {account_id} is not an integer: {balance!r}"
            )
        if balance < 0:
            raise StorageCorruptionError(
                f"Balance for account {account_id} is negative: {balance}"
            )
        accounts[account_id] = balance
    return accounts


class StorageInterface(ABC):
    """Abstract interface for ledger storage backends"""
    
    @abstractmethod
    def load(self) -> Dict[str, int]:
        """Load the full account mapping"""
        pass
    
    @abstractmethod
    def save(self, accounts: Dict[str, int]) -> None:
        """Replace the stored account mapping"""
        pass


class InMemoryStorage(StorageInterface):
    """In-memory storage implementation for testing"""
    
    def __init__(self, accounts: Dict[str, int] = None):
        self._accounts: Dict[str, int] = dict(accounts or {})
        self._lock = threading.RLock()
        self.save_count = 0
    
    def load(self) -> Dict[str, int]:
        """Return a copy of the stored mapping"""
        with self._lock:
            return dict(self._accounts)
    
    def save(self, accounts: Dict[str, int]) -> None:
        """Store a copy of the mapping"""
        with self._lock:
            self._accounts = dict(accounts)
            self.save_count += 1


class JSONFileStorage(StorageInterface):
    """JSON file storage implementation for persistence
    
    The file holds a single pretty-printed object with sorted keys.
    A missing file is an empty ledger. Writes go to a temporary file in
    the same directory which then replaces the target, so readers see
    either the old or the new document and never a partial one.
    """
    
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.RLock()
    
    def load(self) -> Dict[str, int]:
        """Read and validate the backing file"""
        with self._lock:
            if not self.path.exists():
                return {}
            
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as e:
                logger.error("Failed to read ledger file %s: %s", self.path, e)
                raise StorageCorruptionError(f"Failed to read {self.path}: {e}") from e
            
            try:
                data = json.loads(raw)
            except ValueError as e:
                logger.error("Ledger file %s is not valid JSON: %s", self.path, e)
                raise StorageCorruptionError(f"Failed to decode JSON in {self.path}: {e}") from e
            
            try:
                return validate_mapping(data)
            except StorageCorruptionError as e:
                logger.error("Ledger file %s is malformed: %s", self.path, e)
                raise
    
    def save(self, accounts: Dict[str, int]) -> None:
        """Atomically overwrite the backing file with the full mapping"""
        with self._lock:
            tmp_name = None
            try:
                payload = json.dumps(accounts, indent=4, sort_keys=True) + "\n"
                self.path.parent.mkdir(parents=True, exist_ok=True)
                
                fd, tmp_name = tempfile.mkstemp(
                    prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent)
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                
                os.replace(tmp_name, self.path)
                tmp_name = None
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to write ledger file %s: %s", self.path, e)
                raise StorageWriteError(f"Failed to write {self.path}: {e}") from e
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)


def create_storage(backend: str, data_file: Union[str, Path] = None) -> StorageInterface:
    """Build a storage backend by name ("json" or "memory")"""
    if backend == "memory":
        return InMemoryStorage()
    if backend == "json":
        if not data_file:
            raise ValueError("data_file is required for the json storage backend")
        return JSONFileStorage(data_file)
    raise ValueError(f"Unknown storage backend: {backend}")

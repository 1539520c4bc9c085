"""
Ledger system wiring and FastAPI dependencies
"""

import threading
from typing import Optional

from fastapi import Request

from ..config import LedgerConfig, get_config
from ..ledger import LedgerService
from ..storage import create_storage


class LedgerSystem:
    """Storage and ledger service built from configuration"""
    
    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or get_config()
        self.storage = create_storage(self.config.storage_backend, self.config.data_file)
        self.ledger = LedgerService(self.storage, seed_accounts=self.config.seed_accounts)


_build_lock = threading.Lock()


def get_ledger_system(request: Request) -> LedgerSystem:
    """Dependency returning the ledger system owned by the application
    
    Applications created without an injected system build one from
    configuration on first use and keep it on ``app.state``.
    """
    state = request.app.state
    with _build_lock:
        if getattr(state, "ledger_system", None) is None:
            state.ledger_system = LedgerSystem()
        return state.ledger_system

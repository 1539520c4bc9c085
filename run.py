#!/usr/bin/env python3
"""
Account Ledger Service Entry Point

Starts the FastAPI server using host and port from LEDGER_* settings.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from account_ledger.api import run_server
from account_ledger.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting Account Ledger Service...")
    print(f"Storage: {config.storage_backend} ({config.data_file})")
    print(f"API available at: http://{config.api_host}:{config.api_port}")
    print()
    
    try:
        run_server(
            host=config.api_host,
            port=config.api_port,
            reload=config.api_reload
        )
    except KeyboardInterrupt:
        print("\nShutting down Account Ledger Service...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)

"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import List, Literal


class LedgerConfig(BaseSettings):
    """Account ledger service configuration"""
    
    # Storage configuration
    data_file: str = "var/data/accounts.json"
    storage_backend: Literal["json", "memory"] = "json"
    
    # Accounts restored at zero balance on reset; empty means reset clears everything
    seed_accounts: List[str] = []
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    api_reload: bool = False
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    
    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config

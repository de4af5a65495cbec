#!/usr/bin/env python3
"""Modular configuration system for the inventory sync service

Configuration hierarchy:
- logging_config: Logging configuration
- sync_config: Propagation, timeout and health thresholds
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .sync_config import SyncConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = SyncConfig.from_env()

def get_settings() -> SyncConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> SyncConfig:
    """Reload settings from environment"""
    global settings
    settings = SyncConfig.from_env()
    return settings

__all__ = [
    'SyncConfig',
    'LoggingConfig',
    'get_settings',
    'reload_settings',
    'settings',
]

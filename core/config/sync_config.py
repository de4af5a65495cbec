#!/usr/bin/env python3
"""Inventory sync configuration

Propagation behaviour and health thresholds for the multi-warehouse
inventory sync engine.
"""
import os
from dataclasses import dataclass, field

from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class SyncConfig:
    """Inventory sync engine configuration"""
    # Propagation
    propagation_timeout_seconds: float = 5.0
    propagate_in_background: bool = False

    # Health thresholds (lag = failed/delayed propagations per warehouse)
    warehouse_lag_threshold: int = 10
    avg_lag_threshold: float = 5.0

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def log_level(self) -> str:
        return self.logging.log_level

    @classmethod
    def from_env(cls) -> 'SyncConfig':
        """Load sync config from environment variables"""
        return cls(
            propagation_timeout_seconds=_float(os.getenv("SYNC_PROPAGATION_TIMEOUT", "5.0"), 5.0),
            propagate_in_background=_bool(os.getenv("SYNC_PROPAGATE_IN_BACKGROUND", "false")),
            warehouse_lag_threshold=_int(os.getenv("SYNC_WAREHOUSE_LAG_THRESHOLD", "10"), 10),
            avg_lag_threshold=_float(os.getenv("SYNC_AVG_LAG_THRESHOLD", "5.0"), 5.0),
            logging=LoggingConfig.from_env(),
        )

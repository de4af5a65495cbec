#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure for the services in this repository.

COMPONENTS:
    - config/: Dataclass configuration loaded from environment / .env files
    - logger.py: Service logger setup
    - event_bus.py: Event envelope and in-process event bus

USAGE:
    from core.config import get_settings
    from core.event_bus import get_event_bus
    from core.logger import setup_service_logger
"""

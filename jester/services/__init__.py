"""
Service Layer

Service classes for common operations.
"""

from jester.services.config_service import ConfigService

__all__ = [
    "ConfigService",
]

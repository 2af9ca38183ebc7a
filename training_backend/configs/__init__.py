"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from training_backend.configs.scheduling import SchedulingSettings
from training_backend.configs.settings import Settings, get_settings

__all__ = ["SchedulingSettings", "Settings", "get_settings"]

"""
Configuration management for feedback text parser system.
"""
from .config_manager import ConfigManager, ConfigurationError

__all__ = ['ConfigManager', 'ConfigurationError']

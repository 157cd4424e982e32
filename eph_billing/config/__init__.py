"""
Configuration module for the billing engine.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import EngineSettings, get_config, load_config, reload_config

__all__ = [
    'EngineSettings',
    'LoggingConfig',
    'configure_logging',
    'get_config',
    'load_config',
    'reload_config',
    'reset_logging',
]

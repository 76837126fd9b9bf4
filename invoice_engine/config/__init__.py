"""
Configuration module for the invoice engine.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import BillingEngineConfig, get_config, load_config, reload_config

__all__ = [
    'BillingEngineConfig',
    'get_config',
    'load_config',
    'reload_config',
    'LoggingConfig',
    'configure_logging',
    'reset_logging',
]

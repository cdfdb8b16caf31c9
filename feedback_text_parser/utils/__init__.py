"""
Utility modules for feedback text parser system.
"""
from .file_validator import FileValidator, ImageValidationError, ValidationFailure
from .logging_config import ErrorHandler, LoggingConfig, setup_logging

__all__ = [
    'FileValidator', 'ImageValidationError', 'ValidationFailure',
    'ErrorHandler', 'LoggingConfig', 'setup_logging'
]

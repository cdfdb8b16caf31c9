"""
Logging configuration for feedback text parser system.
Provides console and rotating file logging plus structured error tracking.
"""
import logging
import logging.handlers
import sys
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, Optional
from datetime import datetime


class LoggingConfig:
    """
    Configures logging for the feedback text parser system.
    Supports multiple log levels, an optional rotating log file and console output.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_file: Optional[str] = None,
                 enable_console: bool = True,
                 enable_file: Optional[bool] = None,
                 max_file_size_mb: int = 10,
                 backup_count: int = 5):
        """
        Initialize logging configuration.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to log file (defaults to logs/feedback_text_parser.log
                when file logging is enabled)
            enable_console: Whether to enable console logging
            enable_file: Whether to enable file logging (defaults to True when
                log_file is given)
            max_file_size_mb: Maximum log file size in MB before rotation
            backup_count: Number of backup log files to keep
        """
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.enable_console = enable_console
        self.enable_file = enable_file if enable_file is not None else log_file is not None
        self.max_file_size_mb = max_file_size_mb
        self.backup_count = backup_count

        if log_file is None:
            self.log_file = Path("logs") / "feedback_text_parser.log"
        else:
            self.log_file = Path(log_file)

        if self.enable_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self._setup_logging()

    def _setup_logging(self) -> None:
        """Configure logging with appropriate handlers and formatters."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        # Clear existing handlers to avoid duplicates
        root_logger.handlers.clear()

        detailed_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        simple_formatter = logging.Formatter(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.enable_console:
            # stderr keeps stdout free for parse output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self.log_level)
            console_handler.setFormatter(simple_formatter)
            root_logger.addHandler(console_handler)

        if self.enable_file:
            file_handler = logging.handlers.RotatingFileHandler(
                filename=self.log_file,
                maxBytes=self.max_file_size_mb * 1024 * 1024,
                backupCount=self.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(detailed_formatter)
            root_logger.addHandler(file_handler)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured - Level: {logging.getLevelName(self.log_level)}, "
                     f"Console: {self.enable_console}, File: {self.enable_file}")
        if self.enable_file:
            logger.info(f"Log file: {self.log_file}")

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger instance with the specified name.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Configured logger instance
        """
        return logging.getLogger(name)

    def log_system_info(self) -> None:
        """Log system information for debugging purposes."""
        logger = logging.getLogger(__name__)
        logger.debug("=== System Information ===")
        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Platform: {sys.platform}")
        logger.debug(f"Current working directory: {Path.cwd()}")
        logger.debug("=== End System Information ===")


class ErrorHandler:
    """
    Error tracking for the feedback text parser system.
    Records file and OCR errors with counts and a bounded history.
    """

    # Error details kept for get_error_summary; counts are never truncated
    MAX_HISTORY = 100

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize error handler.

        Args:
            logger: Logger instance (optional, creates default if not provided)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_counts: Dict[str, int] = {}
        self.error_history: Deque[Dict[str, Any]] = deque(maxlen=self.MAX_HISTORY)

    def handle_file_error(self,
                          file_path: str,
                          error: Exception,
                          operation: str = "validation") -> Dict[str, Any]:
        """
        Handle file-related errors with appropriate logging and recovery suggestions.

        Args:
            file_path: Path to the file that caused the error
            error: The exception that occurred
            operation: Description of the operation being performed

        Returns:
            Dict containing error details and recovery suggestions
        """
        error_type = type(error).__name__
        error_message = str(error)

        self.logger.error(f"File {operation} error for {file_path}: {error_type} - {error_message}")
        self._track_error(f"file_{error_type.lower()}")

        error_details = {
            'file_path': str(file_path),
            'error_type': error_type,
            'error_message': error_message,
            'operation': operation,
            'timestamp': datetime.now().isoformat(),
            'recovery_suggestions': self._get_file_error_recovery_suggestions(error)
        }

        self.error_history.append(error_details)
        return error_details

    def handle_ocr_error(self, error: Exception, file_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Handle text extraction errors, logging rate limits and timeouts as warnings.

        Args:
            error: The exception raised by the OCR client
            file_name: Name of image being processed (optional)

        Returns:
            Dict containing error details
        """
        error_type = type(error).__name__
        error_message = str(error)
        lowered = error_message.lower()
        is_rate_limit = "rate limit" in lowered or "429" in error_message
        is_timeout = "timeout" in lowered or "timed out" in lowered

        if is_rate_limit:
            self.logger.warning(f"OCR rate limit hit for {file_name or 'unknown file'}: {error_message}")
        elif is_timeout:
            self.logger.warning(f"OCR timeout for {file_name or 'unknown file'}: {error_message}")
        else:
            self.logger.error(f"OCR error for {file_name or 'unknown file'}: {error_type} - {error_message}")

        self._track_error(f"ocr_{error_type.lower()}")

        error_details = {
            'error_type': error_type,
            'error_message': error_message,
            'file_name': file_name,
            'timestamp': datetime.now().isoformat(),
            'is_rate_limit': is_rate_limit,
            'is_timeout': is_timeout
        }

        self.error_history.append(error_details)
        return error_details

    def _track_error(self, error_type: str) -> None:
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1

    def _get_file_error_recovery_suggestions(self, error: Exception) -> list:
        """Get recovery suggestions for file errors."""
        error_message = str(error).lower()

        if "permission" in error_message:
            return ["Check file permissions and ensure read access"]
        if "not found" in error_message:
            return ["Verify the file path is correct"]
        if "size" in error_message:
            return ["Resize or compress the image before uploading"]
        if "valid image" in error_message or "unsupported" in error_message:
            return ["Convert the image to JPEG, PNG or WebP"]
        if "empty" in error_message:
            return ["Re-scan or re-photograph the document"]
        return ["Review file format and ensure it's supported"]

    def get_error_summary(self) -> Dict[str, Any]:
        """
        Get summary of all errors encountered.

        Returns:
            Dict containing error statistics and recent errors
        """
        total_errors = sum(self.error_counts.values())

        return {
            'total_errors': total_errors,
            'error_counts_by_type': self.error_counts.copy(),
            'recent_errors': list(self.error_history)[-10:],
            'most_common_error': max(self.error_counts.items(), key=lambda x: x[1])[0] if self.error_counts else None
        }

    def clear_error_history(self) -> None:
        """Clear error history and statistics."""
        self.error_counts.clear()
        self.error_history.clear()

    def log_error_summary(self) -> None:
        """Log a summary of errors for monitoring."""
        summary = self.get_error_summary()

        if summary['total_errors'] == 0:
            self.logger.debug("No errors encountered during processing")
            return

        self.logger.warning(f"Error Summary: {summary['total_errors']} total errors")

        for error_type, count in summary['error_counts_by_type'].items():
            self.logger.warning(f"  {error_type}: {count} occurrences")


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  enable_console: bool = True) -> tuple:
    """
    Convenience function to set up logging and error handling.

    Args:
        log_level: Logging level
        log_file: Path to log file (optional, enables file logging)
        enable_console: Whether to enable console logging

    Returns:
        Tuple of (LoggingConfig, ErrorHandler)
    """
    logging_config = LoggingConfig(
        log_level=log_level,
        log_file=log_file,
        enable_console=enable_console
    )

    error_handler = ErrorHandler(logging_config.get_logger(__name__))
    logging_config.log_system_info()

    return logging_config, error_handler

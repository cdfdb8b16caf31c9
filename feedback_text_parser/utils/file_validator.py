"""
Image file validation utilities for feedback text parser.

Guards the OCR path: only readable JPEG, PNG and WebP images within the
configured size limit are sent to the text extraction service.
"""

import os
import mimetypes
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass


class ImageValidationError(Exception):
    """Raised when an image file cannot be accepted for text extraction."""

    def __init__(self, message: str, error_type: str = "validation_failed"):
        super().__init__(message)
        self.error_type = error_type


@dataclass
class ValidationFailure:
    """Represents a file validation failure with details."""
    file_path: Path
    error_type: str
    error_message: str
    is_recoverable: bool = False


class FileValidator:
    """
    Validates image files before they are preprocessed and sent to OCR.
    """

    SUPPORTED_MIME_TYPES = {
        'image/jpeg',
        'image/png',
        'image/webp'
    }

    EXTENSION_MIME_TYPES = {
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
        '.png': 'image/png',
        '.webp': 'image/webp'
    }

    DEFAULT_MAX_SIZE_MB = 10

    def __init__(self, max_size_mb: Optional[int] = None, supported_formats: Optional[Iterable[str]] = None):
        """
        Args:
            max_size_mb: Maximum accepted file size in MB (default 10)
            supported_formats: Accepted extensions without dot (default jpeg, jpg, png, webp)
        """
        self.logger = logging.getLogger(__name__)
        self.max_size_mb = max_size_mb or self.DEFAULT_MAX_SIZE_MB
        self.max_size_bytes = self.max_size_mb * 1024 * 1024
        if supported_formats is None:
            self.supported_extensions = set(self.EXTENSION_MIME_TYPES)
        else:
            self.supported_extensions = {f".{fmt.lower().lstrip('.')}" for fmt in supported_formats}

    def is_image_path(self, file_path: Path) -> bool:
        """Check whether a path looks like a supported image by extension alone."""
        return Path(file_path).suffix.lower() in self.supported_extensions

    def validate_image_file(self, file_path: Path) -> bool:
        """
        Validate an image file for text extraction.

        Args:
            file_path: Path to the image

        Returns:
            True if the file is acceptable

        Raises:
            ImageValidationError: If the file is missing, empty, of an
                unsupported type or too large
            PermissionError: If the file cannot be read
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ImageValidationError(f"File not found: {file_path}", "not_found")

        if not file_path.is_file():
            raise ImageValidationError(f"Path is not a file: {file_path}", "not_a_file")

        if not self._validate_mime_type(file_path):
            raise ImageValidationError(
                "Please upload a valid image file (JPEG, PNG, or WebP)", "unsupported_type"
            )

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"No read permission for file: {file_path}")

        file_size = file_path.stat().st_size
        if file_size == 0:
            raise ImageValidationError(f"Image file is empty: {file_path}", "empty_file")

        if file_size > self.max_size_bytes:
            self.logger.warning(f"File too large ({file_size} bytes): {file_path}")
            raise ImageValidationError(
                f"Image file size must be less than {self.max_size_mb}MB", "file_too_large"
            )

        self.logger.debug(f"File passed validation: {file_path}")
        return True

    def validate_files_batch(self, file_paths: List[Path]) -> Tuple[List[Path], List[ValidationFailure]]:
        """
        Validate a batch of files and return valid files and failures.

        Args:
            file_paths: List of file paths to validate

        Returns:
            Tuple of (valid_files, validation_failures)
        """
        valid_files = []
        failures = []

        for file_path in file_paths:
            file_path = Path(file_path)
            try:
                self.validate_image_file(file_path)
                valid_files.append(file_path)

            except ImageValidationError as e:
                failures.append(ValidationFailure(
                    file_path=file_path,
                    error_type=e.error_type,
                    error_message=str(e)
                ))

            except PermissionError as e:
                failures.append(ValidationFailure(
                    file_path=file_path,
                    error_type="permission_error",
                    error_message=f"Permission denied: {str(e)}"
                ))
                self.logger.warning(f"Permission error for {file_path}: {e}")

            except OSError as e:
                failures.append(ValidationFailure(
                    file_path=file_path,
                    error_type="os_error",
                    error_message=f"OS error: {str(e)}",
                    is_recoverable=True  # Might be temporary
                ))
                self.logger.warning(f"OS error for {file_path}: {e}")

        self.logger.info(f"Validation complete: {len(valid_files)} valid, {len(failures)} errors")
        return valid_files, failures

    def _validate_mime_type(self, file_path: Path) -> bool:
        """
        Validate file MIME type matches supported formats.

        Args:
            file_path: Path to file to check

        Returns:
            True if MIME type is supported
        """
        extension = file_path.suffix.lower()
        if extension not in self.supported_extensions:
            self.logger.debug(f"Unsupported extension {extension!r} for {file_path}")
            return False

        mime_type, _ = mimetypes.guess_type(str(file_path))
        if mime_type is None:
            mime_type = self.EXTENSION_MIME_TYPES.get(extension)

        if mime_type not in self.SUPPORTED_MIME_TYPES:
            self.logger.debug(f"Unsupported MIME type {mime_type} for {file_path}")
            return False

        return True

    def get_validation_summary(self, failures: List[ValidationFailure]) -> Dict[str, int]:
        """
        Generate summary statistics for validation failures.

        Args:
            failures: List of validation failures

        Returns:
            Dictionary with error type counts
        """
        summary = {}
        for failure in failures:
            summary[failure.error_type] = summary.get(failure.error_type, 0) + 1

        return summary

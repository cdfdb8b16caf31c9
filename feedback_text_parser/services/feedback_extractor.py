"""
Feedback extraction pipeline.
Turns pasted text or a photographed feedback document into categorized entries:
image -> validation -> preprocessing -> OCR -> normalization -> section parsing.
"""
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Union

from ..config.config_manager import ConfigManager, ConfigurationError
from ..models.feedback_data import ProcessingResult
from ..utils.file_validator import FileValidator, ImageValidationError
from ..utils.logging_config import ErrorHandler
from .image_preprocessor import ImagePreprocessingError, ImagePreprocessor
from .ocr_client import OCRClient, OCRError
from .section_parser import FeedbackSectionParser
from .text_normalizer import normalize_text


class FeedbackExtractor:
    """
    Orchestrates the collaborators around the section parser.

    Text input never fails. Image input failures are reported in the returned
    ProcessingResult instead of being raised.
    """

    def __init__(self,
                 config_manager: Optional[ConfigManager] = None,
                 parser: Optional[FeedbackSectionParser] = None,
                 validator: Optional[FileValidator] = None,
                 preprocessor: Optional[ImagePreprocessor] = None,
                 ocr_client: Optional[OCRClient] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 preprocess_images: bool = True):
        """
        Initialize the extractor.

        Args:
            config_manager: Configuration manager (created from the environment if omitted)
            parser: Section parser (default notations if omitted)
            validator: Image file validator
            preprocessor: Image preprocessor
            ocr_client: OCR client; created on first image when omitted so
                text-only use needs no API key
            error_handler: Error tracker for failed inputs
            preprocess_images: Whether to enhance images before OCR
        """
        self.logger = logging.getLogger(__name__)
        self.config = config_manager or ConfigManager()
        self.parser = parser or FeedbackSectionParser()
        self.validator = validator or FileValidator(
            max_size_mb=self.config.get_max_image_size_mb(),
            supported_formats=self.config.get_supported_formats()
        )
        self.preprocessor = preprocessor or ImagePreprocessor(self.config.get_contrast_factor())
        self.error_handler = error_handler or ErrorHandler()
        self.preprocess_images = preprocess_images
        self._ocr_client = ocr_client

    @property
    def ocr_client(self) -> OCRClient:
        """OCR client, created on first use. Raises ConfigurationError without an API key."""
        if self._ocr_client is None:
            self._ocr_client = OCRClient(self.config)
        return self._ocr_client

    def extract_from_text(self, raw_text: str, source: str = "manual") -> ProcessingResult:
        """
        Parse raw text from any origin.

        Args:
            raw_text: OCR output or pasted text
            source: Name of the input for reporting

        Returns:
            ProcessingResult with status "pass" and the parsed entries
        """
        normalized = normalize_text(raw_text)
        entries = self.parser.parse(normalized)

        if not entries:
            self.logger.info(f"No feedback sections recognized in {source}")
        else:
            self.logger.info(f"Parsed {len(entries)} feedback entries from {source}")

        return ProcessingResult(source=source, status="pass", raw_text=raw_text, data=entries)

    def extract_from_image(self, image_path: Union[str, Path]) -> ProcessingResult:
        """
        Extract text from a feedback document image and parse it.

        Args:
            image_path: Path to a JPEG, PNG or WebP image

        Returns:
            ProcessingResult with status "pass", "fail" (rejected file) or
            "error" (image could not be read or transcribed)
        """
        image_path = Path(image_path)
        source = image_path.name

        try:
            self.validator.validate_image_file(image_path)
        except (ImageValidationError, PermissionError) as e:
            self.error_handler.handle_file_error(str(image_path), e)
            return ProcessingResult(source=source, status="fail", error_message=str(e))

        try:
            if self.preprocess_images:
                image_bytes = self.preprocessor.preprocess_file(image_path)
                mime_type = 'image/png'
            else:
                image_bytes = image_path.read_bytes()
                mime_type = mimetypes.guess_type(str(image_path))[0] or 'image/png'
        except (ImagePreprocessingError, OSError) as e:
            self.error_handler.handle_file_error(str(image_path), e, operation="preprocessing")
            return ProcessingResult(source=source, status="error", error_message=str(e))

        try:
            ocr_client = self.ocr_client
        except ConfigurationError as e:
            self.error_handler.handle_ocr_error(e, file_name=source)
            return ProcessingResult(
                source=source,
                status="error",
                error_message=f"{e}. Set OPENAI_API_KEY in your environment or .env file to process images"
            )

        try:
            raw_text = ocr_client.extract_text(image_bytes, file_name=source, mime_type=mime_type)
        except OCRError as e:
            self.error_handler.handle_ocr_error(e, file_name=source)
            return ProcessingResult(source=source, status="error", error_message=str(e))

        return self.extract_from_text(raw_text, source=source)

# Services module

from .text_normalizer import normalize_text
from .section_parser import (
    DEFAULT_MARKER_PATTERNS,
    FeedbackSectionParser,
    MarkerMatch,
    MarkerPattern,
    parse_feedback_sections,
    parse_feedback_text,
)
from .image_preprocessor import ImagePreprocessor, ImagePreprocessingError
from .ocr_client import OCRClient, OCRError
from .feedback_extractor import FeedbackExtractor

__all__ = [
    'normalize_text',
    'DEFAULT_MARKER_PATTERNS', 'FeedbackSectionParser', 'MarkerMatch', 'MarkerPattern',
    'parse_feedback_sections', 'parse_feedback_text',
    'ImagePreprocessor', 'ImagePreprocessingError',
    'OCRClient', 'OCRError',
    'FeedbackExtractor'
]

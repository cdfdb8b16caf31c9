"""
Text normalization for raw feedback text (OCR output or pasted text).
"""
import re

_NEWLINE_RUNS = re.compile(r'[\r\n]+')


def normalize_text(text: str) -> str:
    """
    Collapse every run of newlines into a single space and trim the result.

    Args:
        text: Raw text from OCR or manual entry

    Returns:
        str: Single-line text ready for marker scanning (empty for empty input)

    Raises:
        TypeError: If text is None or not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    return _NEWLINE_RUNS.sub(' ', text).strip()

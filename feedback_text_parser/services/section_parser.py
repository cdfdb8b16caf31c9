"""
Feedback section parser.

Scans normalized feedback text for category markers, splits the text into
sections and maps each section to a feedback category. Every supported marker
notation is a separate MarkerPattern; the scan loop picks the earliest match
across all patterns, ties going to the pattern listed first.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models.feedback_data import Category, FeedbackEntry, LABEL_CATEGORIES, ParseResult
from .text_normalizer import normalize_text


# Optional bold/underline emphasis around a label or a whole marker
EMPHASIS = r'(?:\*\*|__)?'

# Any single-line label up to 50 characters, used where the delimiters alone
# identify a marker
ANY_LABEL = r'[^#\s](?:[^#\r\n]{0,48}?[^#\s])?'

# Colon markers only open a section at the start of the text or after a
# sentence end or another marker, never mid-sentence
COLON_LEAD = r'(?:^|(?<=[.!?;:)\]#*_]))\s*'


def _known_label_pattern() -> str:
    """Alternation of the known labels, tolerant of repeated inner whitespace."""
    labels = sorted(LABEL_CATEGORIES, key=len, reverse=True)
    return '|'.join(r'\s+'.join(re.escape(word) for word in label.split()) for label in labels)


KNOWN_LABEL = f'(?:{_known_label_pattern()})'


@dataclass(frozen=True)
class MarkerMatch:
    """A marker found in the scanned text."""
    notation: str
    label: str
    start: int
    end: int


class MarkerPattern:
    """
    Recognizer for one marker notation.

    The regular expression must define a named group ``label`` and must
    consume at least one character.
    """

    def __init__(self, notation: str, pattern: str, flags: int = re.IGNORECASE):
        self.notation = notation
        self.regex = re.compile(pattern, flags)

    def search(self, text: str, pos: int = 0) -> Optional[MarkerMatch]:
        """
        Find the first marker of this notation starting at or after pos.

        Args:
            text: Text to scan
            pos: Index to start scanning from

        Returns:
            MarkerMatch or None if the notation does not occur again
        """
        match = self.regex.search(text, pos)
        if match is None:
            return None
        return MarkerMatch(
            notation=self.notation,
            label=match.group('label'),
            start=match.start(),
            end=match.end()
        )

    def __repr__(self) -> str:
        return f"MarkerPattern({self.notation!r})"


DOUBLE_HASH = MarkerPattern(
    'double_hash',
    rf'{EMPHASIS}#{{2,}}\s*{EMPHASIS}\s*(?P<label>{ANY_LABEL})\s*{EMPHASIS}\s*#{{2,}}{EMPHASIS}'
)

SINGLE_HASH = MarkerPattern(
    'single_hash',
    rf'{EMPHASIS}(?<!#)#(?!#)\s*{EMPHASIS}\s*(?P<label>{KNOWN_LABEL})\s*{EMPHASIS}\s*#(?!#){EMPHASIS}'
)

BRACKET = MarkerPattern(
    'bracket',
    rf'{EMPHASIS}\[\s*{EMPHASIS}\s*(?P<label>{KNOWN_LABEL})\s*{EMPHASIS}\s*\]{EMPHASIS}(?:\s*:)?'
)

BOLD = MarkerPattern(
    'bold',
    rf'(?:\*\*|__)\s*(?P<label>{KNOWN_LABEL})\s*:?\s*(?:\*\*|__)(?:\s*:)?'
)

COLON = MarkerPattern(
    'colon',
    rf'{COLON_LEAD}{EMPHASIS}(?P<label>{KNOWN_LABEL}){EMPHASIS}\s*:{EMPHASIS}'
)

# Precedence order for markers starting at the same position
DEFAULT_MARKER_PATTERNS = (DOUBLE_HASH, SINGLE_HASH, BRACKET, BOLD, COLON)


class FeedbackSectionParser:
    """
    Splits feedback text into categorized sections.

    Parsing is total: unrecognized labels, empty sections and marker-less
    text never raise, they just contribute nothing to the result.
    """

    def __init__(self, patterns: Optional[Sequence[MarkerPattern]] = None):
        """
        Initialize the parser.

        Args:
            patterns: Marker recognizers in precedence order (defaults to all
                supported notations)
        """
        self.patterns = tuple(patterns) if patterns is not None else DEFAULT_MARKER_PATTERNS
        if not self.patterns:
            raise ValueError("At least one marker pattern is required")
        self.logger = logging.getLogger(__name__)

    def find_markers(self, text: str) -> List[MarkerMatch]:
        """
        Scan text left to right and collect non-overlapping markers.

        At each step the marker with the smallest start position wins; when
        two notations start at the same position the one listed first wins.
        Scanning resumes right after the consumed marker.

        Args:
            text: Text to scan

        Returns:
            List of MarkerMatch in source order
        """
        markers: List[MarkerMatch] = []
        if not text:
            return markers

        upcoming = [pattern.search(text, 0) for pattern in self.patterns]
        pos = 0

        while True:
            for index, pattern in enumerate(self.patterns):
                candidate = upcoming[index]
                if candidate is not None and candidate.start < pos:
                    upcoming[index] = pattern.search(text, pos)

            best = None
            for candidate in upcoming:
                if candidate is not None and (best is None or candidate.start < best.start):
                    best = candidate

            if best is None:
                break

            markers.append(best)
            # Zero-width matches from custom patterns must still advance the scan
            pos = best.end if best.end > best.start else best.start + 1

        return markers

    def parse(self, text: str) -> ParseResult:
        """
        Parse normalized text into categorized feedback entries.

        Args:
            text: Normalized feedback text

        Returns:
            ParseResult in marker order, empty when nothing was recognized
        """
        if not text:
            return ParseResult()

        markers = self.find_markers(text)
        self.logger.debug(f"Found {len(markers)} section markers in {len(text)} characters")

        entries = []
        for index, marker in enumerate(markers):
            section_end = markers[index + 1].start if index + 1 < len(markers) else len(text)

            category = Category.from_label(marker.label)
            if category is None:
                self.logger.debug(f"Skipping section with unrecognized label '{marker.label}'")
                continue

            body = text[marker.end:section_end].strip()
            if not body:
                self.logger.debug(f"Skipping empty '{category.label}' section at {marker.start}")
                continue

            entries.append(FeedbackEntry(category=category, text=body))

        return ParseResult(tuple(entries))


_default_parser = FeedbackSectionParser()


def parse_feedback_sections(text: str) -> ParseResult:
    """Parse already normalized text with the default marker notations."""
    return _default_parser.parse(text)


def parse_feedback_text(raw_text: str) -> ParseResult:
    """Normalize raw OCR or pasted text and parse it."""
    return _default_parser.parse(normalize_text(raw_text))

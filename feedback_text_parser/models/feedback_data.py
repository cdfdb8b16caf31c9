"""
Data models for the feedback text parser system.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class Category(Enum):
    """
    Closed set of feedback categories a section can belong to.
    """
    POSITIVE = "positive"
    NEEDS_IMPROVEMENT = "needs_improvement"
    OBSERVATIONAL = "observational"

    @property
    def label(self) -> str:
        """Display label as written in section markers."""
        return _DISPLAY_LABELS[self]

    @property
    def legacy_type(self) -> str:
        """Short tag used by the paste-in front end ('good', 'bad', 'observational')."""
        return _LEGACY_TYPES[self]

    @classmethod
    def from_label(cls, label: str) -> Optional["Category"]:
        """
        Map marker label text to a category.

        Args:
            label: Label text found inside a marker, any casing

        Returns:
            Category for a known label, None for anything else
        """
        if not label:
            return None
        key = re.sub(r'\s+', ' ', label).strip().casefold()
        return LABEL_CATEGORIES.get(key)


_DISPLAY_LABELS = {
    Category.POSITIVE: "Positive",
    Category.NEEDS_IMPROVEMENT: "Needs Improvement",
    Category.OBSERVATIONAL: "Observational",
}

_LEGACY_TYPES = {
    Category.POSITIVE: "good",
    Category.NEEDS_IMPROVEMENT: "bad",
    Category.OBSERVATIONAL: "observational",
}

# Casefolded label -> category. Labels not in this table are discarded.
LABEL_CATEGORIES: Dict[str, Category] = {
    "positive": Category.POSITIVE,
    "needs improvement": Category.NEEDS_IMPROVEMENT,
    "observational": Category.OBSERVATIONAL,
}


@dataclass(frozen=True)
class FeedbackEntry:
    """A single categorized feedback section."""
    category: Category
    text: str

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("Feedback entry text must not be empty")

    def to_dict(self) -> Dict[str, str]:
        return {
            'category': self.category.value,
            'label': self.category.label,
            'type': self.category.legacy_type,
            'text': self.text,
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Ordered, immutable sequence of feedback entries produced by one parse call.
    Entries keep the order their markers appeared in the source text.
    """
    entries: Tuple[FeedbackEntry, ...] = ()

    def __iter__(self) -> Iterator[FeedbackEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __bool__(self) -> bool:
        return bool(self.entries)

    def by_category(self, category: Category) -> List[FeedbackEntry]:
        """Return the entries of one category, in source order."""
        return [entry for entry in self.entries if entry.category is category]

    def categories(self) -> List[Category]:
        """Return the category of every entry, in source order."""
        return [entry.category for entry in self.entries]

    def to_list(self) -> List[Dict[str, str]]:
        """Plain dictionaries suitable for JSON output."""
        return [entry.to_dict() for entry in self.entries]


@dataclass
class ProcessingResult:
    """
    Data model for tracking the processing status of one input (image or text).
    """
    source: str
    status: str  # "pass", "fail", "error"
    error_message: Optional[str] = None
    processing_timestamp: Optional[datetime] = None
    raw_text: Optional[str] = None
    data: ParseResult = field(default_factory=ParseResult)

    def __post_init__(self):
        """Set processing timestamp if not provided."""
        if self.processing_timestamp is None:
            self.processing_timestamp = datetime.now()

    def is_successful(self) -> bool:
        return self.status == "pass"

    def has_data(self) -> bool:
        return len(self.data) > 0

    def get_error_summary(self) -> str:
        """
        Get a summary of the processing result for logging.

        Returns:
            str: Summary string with source, status, and error if applicable
        """
        summary = f"Source: {self.source}, Status: {self.status}, Entries: {len(self.data)}"
        if self.error_message:
            summary += f", Error: {self.error_message}"
        return summary

    def to_dict(self) -> Dict[str, object]:
        return {
            'source': self.source,
            'status': self.status,
            'error': self.error_message,
            'entries': self.data.to_list(),
        }

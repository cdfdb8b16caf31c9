"""
Data models for feedback text parser system.
"""
from .feedback_data import (
    Category,
    FeedbackEntry,
    LABEL_CATEGORIES,
    ParseResult,
    ProcessingResult,
)

__all__ = ['Category', 'FeedbackEntry', 'LABEL_CATEGORIES', 'ParseResult', 'ProcessingResult']

"""
Feedback Text Parser System

Converts OCR output or pasted text from photographed feedback documents into
ordered, categorized feedback entries (Positive, Needs Improvement, Observational).
"""

__version__ = "1.0.0"
__author__ = "Feedback Tools Team"

"""Document classification for the deal document risk scoring core."""

from .document_classifier import ContentPattern, DocumentClassifier, FilenameRule

__all__ = [
    "ContentPattern",
    "DocumentClassifier",
    "FilenameRule",
]

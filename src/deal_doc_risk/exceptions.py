"""Custom exceptions for the deal document risk scoring core."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DocumentRiskError(Exception):
    """
    Base exception for the risk scoring core.

    Attributes:
        message: Human-readable error description.
        details: Additional error details.
    """
    message: str
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class AnalyzerError(DocumentRiskError):
    """
    Raised when an external analyzer call fails.

    The fallback analyzer catches these; callers of the pipeline never
    see them.
    """
    operation: Optional[str] = None

    def __str__(self) -> str:
        if self.operation:
            return f"{self.message} | Operation: {self.operation}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["operation"] = self.operation
        return data


@dataclass
class AnalyzerResponseError(AnalyzerError):
    """Raised when an analyzer response is empty or cannot be parsed."""
    raw_content: Optional[str] = None


@dataclass
class DocumentNotFoundError(DocumentRiskError):
    """Raised by analysis stores when a document id is unknown."""
    document_id: Optional[str] = None

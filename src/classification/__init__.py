"""Event classification module."""

from src.classification.classifier import (
    ClassificationError,
    EventClassifier,
    normalize_classification,
    parse_classification,
)
from src.classification.schemas import (
    ClassificationResult,
    ClassifyEventRequest,
    EventType,
    UserRole,
)

__all__ = [
    "ClassificationError",
    "ClassificationResult",
    "ClassifyEventRequest",
    "EventClassifier",
    "EventType",
    "UserRole",
    "normalize_classification",
    "parse_classification",
]

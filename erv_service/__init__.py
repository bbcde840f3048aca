"""ERV wheel performance and fan selection engine."""

from .engine import ERVEngine, calculate
from .exceptions import ERVServiceError, UnknownLocationError, UnknownModelError
from .models import (
    CalculationHistoryEntry,
    CalculationWarning,
    ErrorKind,
    InputRecord,
    ResultRecord,
    ValidationErrors,
    ValidationIssue,
    WarningKind,
)

__all__ = [
    "ERVEngine",
    "calculate",
    "ERVServiceError",
    "UnknownModelError",
    "UnknownLocationError",
    "CalculationHistoryEntry",
    "CalculationWarning",
    "ErrorKind",
    "InputRecord",
    "ResultRecord",
    "ValidationErrors",
    "ValidationIssue",
    "WarningKind",
]

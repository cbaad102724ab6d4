"""
Report Module - Read-only views of the correlation state.
"""

from .reporter import (
    Reporter,
    KillNotification,
    Summary,
    SummaryRow,
    confidence_qualifier,
    UNKNOWN_HERO,
)

__all__ = [
    "Reporter",
    "KillNotification",
    "Summary",
    "SummaryRow",
    "confidence_qualifier",
    "UNKNOWN_HERO",
]

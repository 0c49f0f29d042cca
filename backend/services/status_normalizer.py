"""Status Normalizer - map raw ledger status strings to ClearanceStatus.

Matching is case-sensitive: "approved" is not "Approved" and classifies as
Unknown. Absent or empty values are Pending.
"""
from typing import Optional, Union

from models import ClearanceStatus

STATUS_TABLE = {
    "Pending": ClearanceStatus.PENDING,
    "Approved": ClearanceStatus.APPROVED,
    "Cleared": ClearanceStatus.APPROVED,
    "Rejected": ClearanceStatus.REJECTED,
    "Not Cleared": ClearanceStatus.REJECTED,
    # Canonical values map to themselves so normalize() is idempotent
    "Unknown": ClearanceStatus.UNKNOWN,
}


def normalize(raw: Optional[Union[str, ClearanceStatus]]) -> ClearanceStatus:
    """Return the canonical status for a raw stored value."""
    if isinstance(raw, ClearanceStatus):
        return raw
    if raw is None or raw == "":
        return ClearanceStatus.PENDING
    return STATUS_TABLE.get(raw, ClearanceStatus.UNKNOWN)


def status_label(raw: Optional[Union[str, ClearanceStatus]]) -> str:
    """Display string for a raw value; unrecognized values pass through as-is."""
    if isinstance(raw, ClearanceStatus):
        return raw.value
    if raw is None or raw == "":
        return ClearanceStatus.PENDING.value
    return raw

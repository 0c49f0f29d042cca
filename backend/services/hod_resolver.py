"""Head-of-Department Resolver.

Scans the whole faculty collection and keeps the last record whose designation
contains "Head". The scan is requested in ascending document id order, so with
several matching records the one with the highest id wins; the store's natural
order is not relied on.

The approval status is the ledger's own hodStatus, not anything stored on the
faculty record.
"""
import logging
from typing import Optional

from database import DocumentStore
from models import LedgerDocument, FacultyRecord, HeadOfDepartmentView, NOT_AVAILABLE
from services.reference_resolver import FACULTY_COLLECTION, parse_document
from services.status_normalizer import normalize, status_label

logger = logging.getLogger(__name__)

HEAD_DESIGNATION_MARKER = "Head"
FACULTY_SCAN_ORDER = "_id"


def pick_head(records) -> Optional[FacultyRecord]:
    """Last record in iteration order whose designation contains "Head".

    Malformed records are skipped with a warning.
    """
    head = None
    matches = 0
    for doc in records:
        record = parse_document(FacultyRecord, doc, f"faculty/{doc.get('id')}")
        if record is None:
            continue
        if record.designation and HEAD_DESIGNATION_MARKER in record.designation:
            head = record
            matches += 1
    if matches > 1:
        logger.warning(f"{matches} faculty records carry a Head designation; using {head.id}")
    return head


async def resolve_head(store: DocumentStore, ledger: LedgerDocument) -> HeadOfDepartmentView:
    records = await store.query_collection(FACULTY_COLLECTION, order_by=FACULTY_SCAN_ORDER)
    head = pick_head(records)
    if head is None:
        # Placeholder head is always Pending, whatever hodStatus says
        logger.info("No Head-designated faculty record found")
        return HeadOfDepartmentView()
    return HeadOfDepartmentView(
        name=head.name or NOT_AVAILABLE,
        designation=head.designation,
        status=normalize(ledger.hod_status),
        status_label=status_label(ledger.hod_status),
    )

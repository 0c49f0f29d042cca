"""Clearance Service - resolve one student's no-dues clearance status.

Stages:
  1. locate the student's (year, section) shard (sequential probes)
  2. pick the term (given, or the most recently generated ledger) and match
     the student's ledger entry
  3. concurrently: resolve references, resolve the department head, read the
     student record
  4. assemble the StudentStatusView

Fatal failures in stages 1-2 (and any store outage) are returned as a single
ClassifiedError. Missing references in stage 3 are absorbed with placeholders.
The whole call runs under a deadline; expiry cancels every in-flight read.
"""
import asyncio
import logging
import os
from typing import Optional

from database import DocumentStore
from models import (
    ShardKey, StudentRecord, StudentStatusView, ClearanceResult, ClassifiedError,
    UNKNOWN_NAME, NOT_AVAILABLE,
)
from services.clearance_errors import ClearanceError, NoIdentityError, ResolutionTimeoutError
from services.shard_locator import locate, student_path
from services.ledger_matcher import match_entry, latest_term
from services.reference_resolver import resolve_references, parse_document
from services.hod_resolver import resolve_head
from utils.async_tasks import gather_or_cancel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = float(os.getenv("CLEARANCE_TIMEOUT_SECONDS", "10"))


async def fetch_student(store: DocumentStore, shard: ShardKey, identity: str) -> tuple[str, str]:
    """Return (name, roll number) display strings for the student."""
    doc = await store.get(student_path(shard, identity))
    record = parse_document(StudentRecord, doc, f"student {identity}")
    if record is None:
        return UNKNOWN_NAME, NOT_AVAILABLE
    return record.name or NOT_AVAILABLE, record.roll_number or NOT_AVAILABLE


class ClearanceService:
    """Resolves StudentStatusView objects against an injected DocumentStore."""

    def __init__(self, store: DocumentStore, timeout_seconds: Optional[float] = None):
        self.store = store
        self.timeout_seconds = DEFAULT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds

    async def resolve_student_status(self, identity: Optional[str], term: Optional[str] = None) -> ClearanceResult:
        """
        Resolve the clearance view for identity.

        Returns:
            ClearanceResult with either view or error set, never both.
        """
        try:
            view = await asyncio.wait_for(self.resolve(identity, term), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            error = ResolutionTimeoutError(
                f"Clearance status resolution exceeded {self.timeout_seconds:g}s"
            )
            logger.error(f"Resolution timed out for {identity}: {error.message}")
            return ClearanceResult(error=ClassifiedError(error_code=error.error_code, message=error.message))
        except ClearanceError as e:
            logger.info(f"Clearance resolution failed for {identity}: {e.error_code} - {e.message}")
            return ClearanceResult(error=ClassifiedError(error_code=e.error_code, message=e.message))
        return ClearanceResult(view=view)

    async def resolve(self, identity: Optional[str], term: Optional[str] = None) -> StudentStatusView:
        """Same as resolve_student_status but raises ClearanceError subclasses."""
        if not identity or not identity.strip():
            raise NoIdentityError()

        shard = await locate(self.store, identity)
        if not term:
            term = await latest_term(self.store, shard)
        ledger, entry = await match_entry(self.store, shard, term, identity)

        references, head, (student_name, roll_number) = await gather_or_cancel(
            resolve_references(self.store, shard, term, entry),
            resolve_head(self.store, ledger),
            fetch_student(self.store, shard, identity),
        )

        view = StudentStatusView(
            student_name=student_name,
            roll_number=roll_number,
            shard=shard,
            term=term,
            courses=references.courses,
            coordinators=references.coordinators,
            mentors=references.mentors,
            head_of_department=head,
        )
        logger.info(
            f"Resolved clearance for {identity} shard={shard} term={term} "
            f"courses={len(view.courses)} coordinators={len(view.coordinators)} mentors={len(view.mentors)}"
        )
        return view

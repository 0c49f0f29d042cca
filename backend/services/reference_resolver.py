"""Reference Resolver - join a ledger entry's ids into named, status-bearing rows.

Courses, coordinators and mentors all fan out concurrently. The only data
dependency is within a course: its faculty is found through the entry's
courses_faculty mapping for the same course id.

A missing or malformed course or faculty document never fails the resolution.
The row keeps its status and shows "Unknown" as the name ("N/A" when the
document exists but has no name).
"""
import logging
from typing import Optional, Dict, Any, Type, TypeVar

from pydantic import ValidationError

from database import DocumentStore
from models import (
    ShardKey, LedgerEntry, CourseRef, CourseFacultyRef, PersonRef, StoredModel,
    CourseRecord, FacultyRecord, CourseStatusView, PersonStatusView, ResolvedReferences,
    UNKNOWN_NAME, NOT_AVAILABLE,
)
from services.status_normalizer import normalize, status_label
from utils.async_tasks import gather_or_cancel

logger = logging.getLogger(__name__)

FACULTY_COLLECTION = "faculty"

RecordT = TypeVar("RecordT", bound=StoredModel)


def course_path(shard: ShardKey, term: str, course_id: str) -> tuple:
    return ("courses", shard.year.value, shard.section.value, term, "courseDetails", course_id)


def faculty_path(faculty_id: str) -> tuple:
    return (FACULTY_COLLECTION, faculty_id)


def parse_document(model: Type[RecordT], doc: Optional[Dict[str, Any]], label: str) -> Optional[RecordT]:
    """Validate a stored document; None when it is missing or malformed."""
    if doc is None:
        return None
    try:
        return model.model_validate(doc)
    except ValidationError as e:
        logger.warning(f"Malformed {label} document, treating as missing: {e.errors()}")
        return None


def display_name(record: Optional[StoredModel], value: Optional[str]) -> str:
    if record is None:
        return UNKNOWN_NAME
    return value or NOT_AVAILABLE


async def fetch_faculty(store: DocumentStore, faculty_id: str, role: str) -> Optional[FacultyRecord]:
    doc = await store.get(faculty_path(faculty_id))
    if doc is None:
        logger.warning(f"ReferenceNotFound: {role} faculty/{faculty_id} missing, using placeholder")
    return parse_document(FacultyRecord, doc, f"faculty/{faculty_id}")


def _faculty_mapping(entry: LedgerEntry, course_id: str) -> Optional[CourseFacultyRef]:
    for mapping in entry.courses_faculty:
        if mapping.course_id == course_id:
            return mapping
    return None


async def _fetch_course(store: DocumentStore, shard: ShardKey, term: str, course_id: str) -> Optional[CourseRecord]:
    doc = await store.get(course_path(shard, term, course_id))
    if doc is None:
        logger.warning(
            f"ReferenceNotFound: course {course_id} missing in {shard} term={term}, using placeholder"
        )
    return parse_document(CourseRecord, doc, f"course {course_id}")


async def _resolve_course(
    store: DocumentStore, shard: ShardKey, term: str, course: CourseRef, entry: LedgerEntry
) -> CourseStatusView:
    mapping = _faculty_mapping(entry, course.course_id)
    course_read = _fetch_course(store, shard, term, course.course_id)

    if mapping and mapping.faculty_id:
        course_record, faculty = await gather_or_cancel(
            course_read, fetch_faculty(store, mapping.faculty_id, "course")
        )
        faculty_name = display_name(faculty, faculty.name if faculty else None)
    else:
        course_record = await course_read
        faculty_name = UNKNOWN_NAME

    # Faculty sign-off status takes precedence over the bare course status
    raw_status = course.status
    if mapping and mapping.status:
        raw_status = mapping.status

    return CourseStatusView(
        course_id=course.course_id,
        course_name=display_name(course_record, course_record.course_name if course_record else None),
        faculty_name=faculty_name,
        status=normalize(raw_status),
        status_label=status_label(raw_status),
    )


async def _resolve_person(store: DocumentStore, ref: PersonRef, role: str) -> PersonStatusView:
    faculty = await fetch_faculty(store, ref.id, role)
    return PersonStatusView(
        id=ref.id,
        name=display_name(faculty, faculty.name if faculty else None),
        status=normalize(ref.status),
        status_label=status_label(ref.status),
    )


async def resolve_references(
    store: DocumentStore, shard: ShardKey, term: str, entry: LedgerEntry
) -> ResolvedReferences:
    """Resolve every course, coordinator and mentor reference of a ledger entry.

    Output lists keep ledger order within each category.
    """
    course_tasks = [_resolve_course(store, shard, term, c, entry) for c in entry.courses]
    coordinator_tasks = [_resolve_person(store, c, "coordinator") for c in entry.coordinators]
    mentor_tasks = [_resolve_person(store, m, "mentor") for m in entry.mentors]

    results = await gather_or_cancel(*course_tasks, *coordinator_tasks, *mentor_tasks)

    n_courses = len(course_tasks)
    n_coordinators = len(coordinator_tasks)
    return ResolvedReferences(
        courses=list(results[:n_courses]),
        coordinators=list(results[n_courses:n_courses + n_coordinators]),
        mentors=list(results[n_courses + n_coordinators:]),
    )

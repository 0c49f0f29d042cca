from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Any
from enum import Enum

# ============================================================================
# ENUMS (System Constants)
# ============================================================================

class Year(str, Enum):
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"

class Section(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

class ClearanceStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    UNKNOWN = "Unknown"

# Placeholder names shown when a referenced record is missing or incomplete
UNKNOWN_NAME = "Unknown"  # document does not exist
NOT_AVAILABLE = "N/A"     # document exists but the field is empty

# ============================================================================
# SHARD
# ============================================================================

class ShardKey(BaseModel):
    """A (year, section) partition of student, ledger and course records."""
    model_config = ConfigDict(frozen=True)

    year: Year
    section: Section

    def __str__(self) -> str:
        return f"{self.year.value}/{self.section.value}"

# ============================================================================
# STORED DOCUMENTS (read-only input, stored field names as aliases)
# ============================================================================

class StoredModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

class StudentRecord(StoredModel):
    name: Optional[str] = None
    roll_number: Optional[str] = Field(default=None, alias="rollNo")

class CourseRef(StoredModel):
    course_id: str = Field(alias="id")
    status: Optional[str] = None

class CourseFacultyRef(StoredModel):
    course_id: str = Field(alias="courseId")
    faculty_id: Optional[str] = Field(default=None, alias="facultyId")
    status: Optional[str] = None

class PersonRef(StoredModel):
    """Coordinator or mentor reference; the id is a faculty id."""
    id: str
    status: Optional[str] = None

class LedgerEntry(StoredModel):
    student_id: str = Field(alias="id")
    courses: List[CourseRef] = Field(default_factory=list)
    courses_faculty: List[CourseFacultyRef] = Field(default_factory=list)
    coordinators: List[PersonRef] = Field(default_factory=list)
    mentors: List[PersonRef] = Field(default_factory=list)

class LedgerDocument(StoredModel):
    """Ledger header; student entries stay raw until one is matched."""
    term: str = Field(alias="id")
    students: List[Any] = Field(default_factory=list)
    hod_status: Optional[str] = Field(default=None, alias="hodStatus")

class FacultyRecord(StoredModel):
    id: Optional[str] = None
    name: Optional[str] = None
    designation: Optional[str] = None

class CourseRecord(StoredModel):
    course_name: Optional[str] = Field(default=None, alias="courseName")

# ============================================================================
# STATUS VIEW (derived output, never persisted)
# ============================================================================

class CourseStatusView(BaseModel):
    course_id: str
    course_name: str
    faculty_name: str
    status: ClearanceStatus
    status_label: str

class PersonStatusView(BaseModel):
    id: str
    name: str
    status: ClearanceStatus
    status_label: str

class ResolvedReferences(BaseModel):
    courses: List[CourseStatusView] = Field(default_factory=list)
    coordinators: List[PersonStatusView] = Field(default_factory=list)
    mentors: List[PersonStatusView] = Field(default_factory=list)

class HeadOfDepartmentView(BaseModel):
    name: str = NOT_AVAILABLE
    designation: str = NOT_AVAILABLE
    status: ClearanceStatus = ClearanceStatus.PENDING
    status_label: str = ClearanceStatus.PENDING.value

class StudentStatusView(BaseModel):
    student_name: str
    roll_number: str
    shard: ShardKey
    term: str
    courses: List[CourseStatusView] = Field(default_factory=list)
    coordinators: List[PersonStatusView] = Field(default_factory=list)
    mentors: List[PersonStatusView] = Field(default_factory=list)
    head_of_department: HeadOfDepartmentView = Field(default_factory=HeadOfDepartmentView)

class ClassifiedError(BaseModel):
    error_code: str
    message: str

class ClearanceResult(BaseModel):
    """Either a populated view or exactly one classified error."""
    view: Optional[StudentStatusView] = None
    error: Optional[ClassifiedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

"""
Report record models for the Academic Report Engine
Immutable value types produced by aggregation and consumed by renderers
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

NOT_AVAILABLE = 'N/A'


@dataclass(frozen=True)
class SubjectGradeRow:
    """One raw grade row as supplied by the grade repository"""
    semester: int
    course_code: str
    course_name: str
    grade: str
    credits: float


@dataclass(frozen=True)
class SubjectOutcome:
    """A subject grade plus the grade point and status derived from its symbol"""
    course_code: str
    course_name: str
    grade: str
    credits: float
    grade_point: float
    status: str

    @property
    def passed(self):
        return self.status == 'Pass'


@dataclass(frozen=True)
class SemesterSummary:
    semester: int
    subjects: Tuple[SubjectOutcome, ...]
    sgpa: float
    total_credits: float
    credits_obtained: float
    total_grade_points: float


@dataclass(frozen=True)
class StudentIdentity:
    registration_number: str
    name: str = NOT_AVAILABLE
    address: str = NOT_AVAILABLE
    branch: str = NOT_AVAILABLE
    current_semester: Optional[int] = None


@dataclass(frozen=True)
class AggregatedRecord:
    """Academic record of one requested student

    A record with an error marker stands for an identifier that could not be
    resolved; it has no semesters and a CGPA of 0.
    """
    student: StudentIdentity
    semesters: Tuple[SemesterSummary, ...] = ()
    cgpa: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def registration_number(self):
        return self.student.registration_number

    def semester(self, number):
        """Return the summary for a semester number, or None when not enrolled"""
        for summary in self.semesters:
            if summary.semester == number:
                return summary
        return None

    @classmethod
    def not_found(cls, identifier, reason='Student not found'):
        return cls(student=StudentIdentity(registration_number=identifier), error=reason)


@dataclass(frozen=True)
class ColumnDefinition:
    key: str
    label: str
    extract: Callable[[AggregatedRecord], Any] = field(compare=False, repr=False)


@dataclass(frozen=True)
class Omission:
    """A requested student left out of the produced artifact"""
    identifier: str
    reason: str

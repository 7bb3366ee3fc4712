"""
Aggregation service for the Academic Report Engine
Turns raw grade rows into per-student academic records (SGPA / CGPA)
"""

from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType

from models.records import AggregatedRecord, SemesterSummary, SubjectOutcome
from utils.logger import get_logger

log = get_logger('aggregation')

DEFAULT_GRADE_POINTS = {
    'O': 10,
    'A+': 9,
    'A': 8,
    'B+': 7,
    'B': 6,
    'C': 5,
    'P': 4,
    'F': 0,
    'ABSENT': 0,
    'COMPLE': 10,
}
DEFAULT_FAILING_GRADES = ('F', 'ABSENT')


class GradeScale:
    """Immutable grade symbol -> grade point table with the pass/fail rule

    Symbols are matched case-insensitively. A symbol missing from the table
    is worth 0 points but still passes unless it is one of the failing
    symbols.
    """

    def __init__(self, points=None, failing=DEFAULT_FAILING_GRADES):
        table = DEFAULT_GRADE_POINTS if points is None else points
        self._points = MappingProxyType({self.normalize(k): v for k, v in table.items()})
        self._failing = frozenset(self.normalize(g) for g in failing)

    @staticmethod
    def normalize(symbol):
        return str(symbol or '').strip().upper()

    @property
    def points(self):
        return self._points

    def grade_point(self, symbol):
        return self._points.get(self.normalize(symbol), 0)

    def status(self, symbol):
        return 'Fail' if self.normalize(symbol) in self._failing else 'Pass'


def weighted_average(total_grade_points, total_credits):
    """Credit-weighted average rounded half-up to 2 places; 0 when no credits"""
    if not total_credits:
        return 0.0
    ratio = Decimal(str(total_grade_points)) / Decimal(str(total_credits))
    return float(ratio.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


class Aggregator:
    """Builds one AggregatedRecord per requested identifier, order preserved"""

    def __init__(self, repository, grade_scale=None):
        self.repository = repository
        self.grade_scale = grade_scale or GradeScale()

    def aggregate(self, identifiers):
        identifiers = list(identifiers)
        with self.repository.session_scope() as session:
            return tuple(self._aggregate_one(session, identifier) for identifier in identifiers)

    def _aggregate_one(self, session, identifier):
        student = self.repository.find_student(session, identifier)
        if student is None:
            log.warning("Student with ID %s not found.", identifier)
            return AggregatedRecord.not_found(identifier)
        rows = self.repository.grade_rows(session, identifier)
        return self.build_record(student, rows)

    def build_record(self, student, rows):
        """Group rows by semester and derive SGPA per semester and the CGPA"""
        grouped = {}
        for row in rows:
            grouped.setdefault(row.semester, []).append(row)

        semesters = []
        overall_credits = 0
        overall_points = 0
        for number in sorted(grouped):
            summary = self.summarize_semester(number, grouped[number])
            overall_credits += summary.total_credits
            overall_points += summary.total_grade_points
            semesters.append(summary)

        return AggregatedRecord(
            student=student,
            semesters=tuple(semesters),
            cgpa=weighted_average(overall_points, overall_credits),
        )

    def summarize_semester(self, number, rows):
        subjects = []
        total_credits = 0
        credits_obtained = 0
        total_points = 0
        for row in rows:
            point = self.grade_scale.grade_point(row.grade)
            status = self.grade_scale.status(row.grade)
            subjects.append(SubjectOutcome(
                course_code=row.course_code,
                course_name=row.course_name,
                grade=row.grade,
                credits=row.credits,
                grade_point=point,
                status=status,
            ))
            total_credits += row.credits
            if status == 'Pass':
                credits_obtained += row.credits
            total_points += point * row.credits

        return SemesterSummary(
            semester=number,
            subjects=tuple(subjects),
            sgpa=weighted_average(total_points, total_credits),
            total_credits=total_credits,
            credits_obtained=credits_obtained,
            total_grade_points=total_points,
        )

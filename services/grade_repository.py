"""
Grade repository for the Academic Report Engine
Read-only access to student identity and grade rows
"""

from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.orm import Session

from database import handle_db_error
from models.academic import Branch, Course
from models.grades import Grade
from models.records import NOT_AVAILABLE, StudentIdentity, SubjectGradeRow
from models.student import Student


class GradeRepository:
    """Query contract consumed by the aggregator"""

    def __init__(self, engine):
        self._engine = engine

    @contextmanager
    def session_scope(self):
        """Open one session for a batch of reads and always close it"""
        session = Session(self._engine)
        try:
            yield session
        finally:
            session.close()

    @staticmethod
    @handle_db_error
    def find_student(session, registration_number):
        row = session.execute(
            select(
                Student.registration_number,
                Student.name,
                Student.address,
                Branch.name.label('branch_name'),
                Student.current_semester,
            )
            .outerjoin(Branch, Student.branch_id == Branch.id)
            .where(Student.registration_number == registration_number)
        ).first()
        if row is None:
            return None
        return StudentIdentity(
            registration_number=row.registration_number,
            name=row.name,
            address=row.address or NOT_AVAILABLE,
            branch=row.branch_name or NOT_AVAILABLE,
            current_semester=row.current_semester,
        )

    @staticmethod
    @handle_db_error
    def grade_rows(session, registration_number):
        rows = session.execute(
            select(
                Grade.semester,
                Course.course_code,
                Course.name.label('course_name'),
                Grade.grade,
                Course.credits,
            )
            .join(Course, Grade.course_code == Course.course_code)
            .where(Grade.registration_number == registration_number)
            .order_by(Grade.semester, Course.course_code)
        ).all()
        return [
            SubjectGradeRow(
                semester=row.semester,
                course_code=row.course_code,
                course_name=row.course_name,
                grade=row.grade,
                credits=row.credits,
            )
            for row in rows
        ]

"""
Shared fixtures for the report test suites
"""

from contextlib import contextmanager

from database import db
from models.academic import Branch, Course
from models.grades import Grade
from models.records import StudentIdentity, SubjectGradeRow
from models.student import Student
from services.document_renderer import RenderEngine
from utils.errors import RenderError, RepositoryError

COURSES = [
    ('CS101', 'Programming Fundamentals', 4),
    ('CS102', 'Discrete Mathematics', 3),
    ('MA101', 'Calculus', 3),
    ('HS100', 'Induction Programme', 0),
]

def seed_students():
    """REG001: CGPA 7.70 over two semesters. REG002: a failed course and a zero-credit semester."""
    cse = Branch(name='Computer Science')
    db.session.add(cse)
    for code, name, credits in COURSES:
        db.session.add(Course(course_code=code, name=name, credits=credits))
    db.session.flush()

    db.session.add(Student(registration_number='REG001', name='Alice Johnson', address='12 Main St',
                           branch_id=cse.id, current_semester=3))
    db.session.add(Student(registration_number='REG002', name='Bob Smith', current_semester=4))
    db.session.flush()

    for reg, code, semester, grade in [
        ('REG001', 'MA101', 2, 'A'),
        ('REG001', 'CS102', 1, 'b+'),
        ('REG001', 'CS101', 1, 'A'),
        ('REG002', 'HS100', 3, 'P'),
        ('REG002', 'CS101', 1, 'F'),
        ('REG002', 'CS102', 1, 'O'),
    ]:
        db.session.add(Grade(registration_number=reg, course_code=code, semester=semester, grade=grade))
    db.session.commit()

class FakeRepository:
    """In-memory stand-in for GradeRepository"""

    def __init__(self, students=None, rows=None):
        self.students = students or {}
        self.rows = rows or {}
        self.opened = 0
        self.released = 0

    @contextmanager
    def session_scope(self):
        self.opened += 1
        try:
            yield self
        finally:
            self.released += 1

    def find_student(self, session, registration_number):
        return self.students.get(registration_number)

    def grade_rows(self, session, registration_number):
        return list(self.rows.get(registration_number, []))

class FailingRepository(FakeRepository):
    """Repository whose grade lookups fail as if the database went away"""

    def grade_rows(self, session, registration_number):
        raise RepositoryError("Database operation failed", detail='grade_rows')

def identity(reg='S1', name='Student One'):
    return StudentIdentity(registration_number=reg, name=name, branch='Physics', current_semester=2)

def row(semester, code, grade, credits, name=None):
    return SubjectGradeRow(semester=semester, course_code=code, course_name=name or code,
                           grade=grade, credits=credits)

class FakeEngine(RenderEngine):
    """Render engine that records calls instead of producing real PDF pages"""

    instances = []

    def __init__(self, fail_on_calls=()):
        self.fail_on_calls = set(fail_on_calls)
        self.stories = []
        self.closed = False
        FakeEngine.instances.append(self)

    def render(self, story):
        self.stories.append(story)
        call = len(self.stories)
        if call in self.fail_on_calls:
            raise RenderError("engine crashed", detail=f"call {call}")
        return b'%PDF-fake-' + str(call).encode()

    def close(self):
        self.closed = True

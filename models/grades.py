"""
Grade models for the Academic Report Engine
One row per course per semester per student
"""

from database import db
from datetime import datetime

class Grade(db.Model):
    """Final grade symbol a student received for a course in a semester"""
    __tablename__ = 'grades'

    id = db.Column(db.Integer, primary_key=True)
    registration_number = db.Column(db.String(30), db.ForeignKey('students.registration_number'), nullable=False, index=True)
    course_code = db.Column(db.String(20), db.ForeignKey('courses.course_code'), nullable=False)
    semester = db.Column(db.Integer, nullable=False)
    grade = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (db.UniqueConstraint('registration_number', 'course_code', 'semester', name='unique_student_course_semester'),)

    def __repr__(self):
        return f'<Grade {self.registration_number} - {self.course_code} - S{self.semester} - {self.grade}>'

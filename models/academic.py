"""
Academic structure models for the Academic Report Engine
Branch and Course models
"""

from database import db
from datetime import datetime

class Branch(db.Model):
    """Branch (department / program) a student belongs to"""
    __tablename__ = 'branches'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    students = db.relationship('Student', backref='branch', lazy='dynamic')

    def __repr__(self):
        return f'<Branch {self.name}>'

class Course(db.Model):
    """Course catalog entry carrying the credit weight used for grade points"""
    __tablename__ = 'courses'

    id = db.Column(db.Integer, primary_key=True)
    course_code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    credits = db.Column(db.Float, nullable=False, default=3)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    grades = db.relationship('Grade', backref='course', lazy='dynamic')

    def to_dict(self):
        """Convert course to dictionary"""
        return {
            'id': self.id,
            'course_code': self.course_code,
            'name': self.name,
            'credits': self.credits,
        }

    def __repr__(self):
        return f'<Course {self.course_code}: {self.name}>'

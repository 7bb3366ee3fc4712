"""
Student models for the Academic Report Engine
"""

from database import db
from datetime import datetime

class Student(db.Model):
    """Student model"""
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    registration_number = db.Column(db.String(30), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.Text, nullable=True)
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), nullable=True)
    current_semester = db.Column(db.Integer, default=1)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    grades = db.relationship('Grade', backref='student', lazy='dynamic')

    def to_dict(self):
        """Convert student to dictionary"""
        return {
            'id': self.id,
            'registration_number': self.registration_number,
            'name': self.name,
            'address': self.address,
            'branch': self.branch.name if self.branch else None,
            'current_semester': self.current_semester,
        }

    def __repr__(self):
        return f'<Student {self.registration_number}: {self.name}>'

"""
Database models package for the Academic Report Engine
"""

from .academic import Branch, Course
from .student import Student
from .grades import Grade
from .schedule import ScheduledReport

__all__ = [
    'Branch', 'Course', 'Student', 'Grade', 'ScheduledReport'
]

"""
Database models package for the Results Engine
"""

from .user import Staff
from .academic import Course
from .student import Student, Enrollment
from .assignments import CourseAssignment
from .results import Result, Assessment

__all__ = [
    'Staff', 'Course', 'Student', 'Enrollment',
    'CourseAssignment', 'Result', 'Assessment'
]

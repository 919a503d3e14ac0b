#!/usr/bin/env python3
"""
Sample data generator for the Results Engine
Creates staff, courses, students, enrollments and course assignments for demonstration
"""

import logging

from database import db
from models.user import Staff
from models.academic import Course
from models.student import Student, Enrollment
from models.assignments import CourseAssignment

logger = logging.getLogger(__name__)

ACADEMIC_YEAR = '2024/2025'
SEMESTER = 'First'

def create_sample_data():
    """Create sample data inside the current application context"""
    if Course.query.first() is not None:
        logger.info("Sample data already present, skipping")
        return False
    
    hod = Staff(staff_id='HOD001', name='Grace Okafor', username='hod_cs', role='hod', department='Computer Science')
    hod.set_password('hod12345')
    lecturers = []
    for staff_id, name, username in [
        ('LEC001', 'Daniel Mensah', 'lec_mensah'),
        ('LEC002', 'Amina Bello', 'lec_bello'),
    ]:
        lecturer = Staff(staff_id=staff_id, name=name, username=username, role='lecturer', department='Computer Science')
        lecturer.set_password('lecturer123')
        lecturers.append(lecturer)
    db.session.add_all([hod] + lecturers)
    
    courses_data = [
        {'code': 'CSC101', 'title': 'Introduction to Programming', 'credits': 3},
        {'code': 'CSC102', 'title': 'Discrete Structures', 'credits': 4},
        {'code': 'CSC103', 'title': 'Computer Systems', 'credits': 2},
    ]
    courses = [Course(department='Computer Science', **data) for data in courses_data]
    db.session.add_all(courses)
    
    students = []
    for index, name in enumerate(['Alice Johnson', 'Brian Otieno', 'Chloe Adeyemi', 'David Kim'], 1):
        student = Student(
            student_id=f'CS2024{index:03d}',
            name=name,
            username=f'student{index:03d}',
            department='Computer Science',
            level=100
        )
        student.set_password('student123')
        students.append(student)
    db.session.add_all(students)
    db.session.flush()
    
    for course in courses:
        for student in students:
            db.session.add(Enrollment(
                student_id=student.id,
                course_id=course.id,
                academic_year=ACADEMIC_YEAR,
                semester=SEMESTER
            ))
    
    for course, lecturer in zip(courses, [lecturers[0], lecturers[1], lecturers[0]]):
        db.session.add(CourseAssignment(
            course_id=course.id,
            lecturer_id=lecturer.id,
            assigned_by_id=hod.id,
            academic_year=ACADEMIC_YEAR,
            semester=SEMESTER,
            expected_students=len(students),
            contact_hours=3,
            credit_units=course.credits
        ))
    
    db.session.commit()
    logger.info(f"Created {len(courses)} courses, {len(students)} students and {len(courses)} assignments")
    return True

if __name__ == '__main__':
    from app import create_app
    app = create_app()
    with app.app_context():
        create_sample_data()

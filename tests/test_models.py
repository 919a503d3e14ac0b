"""
Unit tests for database models
"""

import unittest
from sqlalchemy.exc import IntegrityError
from app import create_app
from config import TestingConfig
from database import db
from models.results import Result, Assessment
from models.assignments import CourseAssignment
from factories import build_department, make_assignment, ACADEMIC_YEAR, SEMESTER

class TestModels(unittest.TestCase):
    
    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()
        self.world = build_department()
    
    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()
    
    def _result(self, student, **kwargs):
        assignment = self.world['assignment']
        result = Result(
            student_id=student.id,
            course_id=assignment.course_id,
            course_assignment_id=assignment.id,
            academic_year=assignment.academic_year,
            semester=assignment.semester,
            credits=3,
            **kwargs
        )
        db.session.add(result)
        return result
    
    def test_staff_model(self):
        """Test Staff model"""
        hod = self.world['hod']
        self.assertTrue(hod.check_password('password123'))
        self.assertFalse(hod.check_password('wrongpassword'))
        self.assertTrue(hod.has_role('hod', 'admin'))
        self.assertFalse(self.world['lecturer'].has_role('hod', 'admin'))
        self.assertEqual(str(hod), '<Staff HOD001: Hod_User (hod)>')
    
    def test_course_roster(self):
        """Enrolled students are listed per academic period"""
        course = self.world['course']
        roster = course.get_enrolled_students(ACADEMIC_YEAR, SEMESTER)
        self.assertEqual([s.student_id for s in roster], ['STU001', 'STU002'])
        self.assertEqual(course.get_enrolled_students(ACADEMIC_YEAR, 'Second'), [])
        self.assertTrue(course.is_student_enrolled(roster[0].id, ACADEMIC_YEAR, SEMESTER))
    
    def test_course_assignment_flags(self):
        """Assignment is modifiable only while active and unsubmitted"""
        assignment = self.world['assignment']
        self.assertTrue(assignment.can_modify())
        self.assertTrue(assignment.can_submit_results())
        self.assertEqual(assignment.get_results_status(), 'Pending')
        
        assignment.results_submitted = True
        self.assertFalse(assignment.can_modify())
        self.assertEqual(assignment.get_results_status(), 'Submitted')
        self.assertEqual(assignment.get_period_label(), '2024/2025 - First Semester')
    
    def test_one_assignment_per_course_period(self):
        """A course cannot be assigned twice in one period"""
        make_assignment(self.world['course'], self.world['other_lecturer'], self.world['hod'])
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()
    
    def test_approved_implies_submitted(self):
        """Approval flag cannot be set without submission"""
        assignment = self.world['assignment']
        assignment.results_approved = True
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()
    
    def test_result_unique_per_student_course_period(self):
        """Only one result per student, course and period"""
        student = self.world['students'][0]
        self._result(student)
        db.session.commit()
        
        self._result(student)
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()
    
    def test_result_grade_derived_from_assessments(self):
        """Percentage, letter grade and grade points follow the assessments"""
        result = self._result(self.world['students'][0])
        result.replace_assessments([
            Assessment(type='quiz', name='Quiz 1', max_score=50, obtained_score=40, weight=20),
            Assessment(type='midterm', name='Midterm', max_score=20, obtained_score=15, weight=30),
            Assessment(type='final', name='Final', max_score=50, obtained_score=45, weight=50),
        ])
        db.session.commit()
        
        self.assertEqual(result.percentage, 83.5)
        self.assertEqual(result.letter_grade, 'B')
        self.assertEqual(result.grade_points, 3.0)
        self.assertEqual([a.position for a in result.assessments], [0, 1, 2])
        self.assertTrue(result.has_balanced_weights())
        self.assertEqual([a['score_percentage'] for a in result.to_dict()['assessments']], [80.0, 75.0, 90.0])
        
        # Replacing assessments drops the old rows
        result.replace_assessments([
            Assessment(type='final', name='Final', max_score=100, obtained_score=55, weight=100),
        ])
        db.session.commit()
        self.assertEqual(Assessment.query.filter_by(result_id=result.id).count(), 1)
        self.assertEqual(result.letter_grade, 'F')
    
    def test_grade_override(self):
        """Incomplete and Withdrawn overrides carry no grade points"""
        result = self._result(self.world['students'][0], grade_override='W')
        result.replace_assessments([])
        self.assertEqual(result.letter_grade, 'W')
        self.assertIsNone(result.grade_points)
        self.assertTrue(result.is_non_graded())
    
    def test_attendance_percentage(self):
        """Attendance percentage is derived from class counts"""
        result = self._result(self.world['students'][0])
        result.set_attendance(40, 30)
        self.assertEqual(result.attendance_percentage, 75.0)
        result.set_attendance(0, 0)
        self.assertIsNone(result.attendance_percentage)
    
    def test_result_defaults_to_draft(self):
        """New results start as draft"""
        result = self._result(self.world['students'][0])
        db.session.commit()
        self.assertEqual(result.status, 'draft')
        self.assertTrue(result.is_draft())
        self.assertIn(result, self.world['assignment'].results.all())

if __name__ == '__main__':
    unittest.main()

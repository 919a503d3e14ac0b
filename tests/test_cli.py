"""
Tests for the Flask CLI commands
"""

import unittest
from app import create_app
from config import TestingConfig
from database import db
from models.academic import Course
from models.assignments import CourseAssignment

class TestCliCommands(unittest.TestCase):
    
    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()
        self.runner = self.app.test_cli_runner()
    
    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()
    
    def test_seed_sample_data(self):
        """Seeding is idempotent"""
        result = self.runner.invoke(args=['seed-sample-data'])
        self.assertIn('Sample data created', result.output)
        self.assertEqual(Course.query.count(), 3)
        self.assertEqual(CourseAssignment.query.count(), 3)
        
        result = self.runner.invoke(args=['seed-sample-data'])
        self.assertIn('already present', result.output)
    
    def test_student_gpa(self):
        """GPA command reports zero before anything is published"""
        self.runner.invoke(args=['seed-sample-data'])
        result = self.runner.invoke(args=['student-gpa', 'CS2024001'])
        self.assertEqual(result.exit_code, 0)
        self.assertIn('GPA:               0.00', result.output)
        
        result = self.runner.invoke(args=['student-gpa', 'NOPE'])
        self.assertNotEqual(result.exit_code, 0)
        
        result = self.runner.invoke(args=['student-gpa', 'CS2024001', '--semester', 'First'])
        self.assertNotEqual(result.exit_code, 0)

if __name__ == '__main__':
    unittest.main()

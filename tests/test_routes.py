"""
Integration tests for routes and workflows
"""

import unittest
from app import create_app
from config import TestingConfig
from database import db
from factories import build_department, scenario_payload, ACADEMIC_YEAR, SEMESTER

class TestRoutes(unittest.TestCase):
    
    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()
        
        world = build_department(student_count=2)
        self.assignment_id = world['assignment'].id
        self.student_id = world['students'][0].id
        self.lecturer_id = world['lecturer'].id
        self.other_lecturer_id = world['other_lecturer'].id
        self.course_id = world['course'].id
        
        self.client = self.app.test_client()
    
    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()
    
    def login_staff(self, username):
        return self.client.post('/api/auth/staff/login', json={'username': username, 'password': 'password123'})
    
    def login_student(self, username='student001'):
        return self.client.post('/api/auth/student/login', json={'username': username, 'password': 'password123'})
    
    def logout(self):
        return self.client.post('/api/auth/logout')
    
    def upload(self, payload=None, student_id=None):
        return self.client.put(
            f'/api/results/course/{self.assignment_id}/student/{student_id or self.student_id}',
            json=payload if payload is not None else scenario_payload()
        )
    
    def test_staff_login_success(self):
        """Test successful staff login"""
        response = self.login_staff('lecturer_one')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()['success'])
        
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.get_json()['data']['user_type'], 'staff')
        self.assertEqual(response.get_json()['data']['role'], 'lecturer')
    
    def test_staff_login_failure(self):
        """Test failed staff login"""
        response = self.client.post('/api/auth/staff/login', json={
            'username': 'lecturer_one',
            'password': 'wrongpassword'
        })
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['error'], 'authentication_required')
        self.assertIn('Invalid username or password', response.get_json()['message'])
    
    def test_login_requires_credentials(self):
        """Missing fields are a validation error"""
        response = self.client.post('/api/auth/student/login', json={'username': 'student001'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'], 'validation_error')
    
    def test_protected_routes_require_login(self):
        """Anonymous requests are rejected"""
        response = self.client.get(f'/api/results/course/{self.assignment_id}')
        self.assertEqual(response.status_code, 401)
        response = self.client.get('/api/results/student')
        self.assertEqual(response.status_code, 401)
        
        self.login_staff('lecturer_one')
        self.logout()
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, 401)
    
    def test_user_type_is_enforced(self):
        """Students cannot reach staff endpoints and vice versa"""
        self.login_student()
        response = self.upload()
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['error'], 'forbidden')
        
        self.logout()
        self.login_staff('lecturer_one')
        response = self.client.get('/api/results/student')
        self.assertEqual(response.status_code, 403)
    
    def test_full_result_workflow(self):
        """Upload, submit, approve, publish and view as the student"""
        self.login_staff('lecturer_one')
        response = self.upload()
        self.assertEqual(response.status_code, 200)
        data = response.get_json()['data']
        self.assertEqual(data['status'], 'draft')
        self.assertEqual(data['percentage'], 82.0)
        self.assertEqual(data['letter_grade'], 'B-')
        self.assertEqual(len(data['assessments']), 3)
        
        response = self.client.get(f'/api/results/course/{self.assignment_id}')
        roster = response.get_json()['data']['students_with_results']
        self.assertEqual(len(roster), 2)
        self.assertIsNone(roster[1]['result'])
        
        response = self.client.post(f'/api/results/course/{self.assignment_id}/submit')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['count'], 1)
        
        # Lecturers cannot approve their own submissions
        response = self.client.post(f'/api/results/course/{self.assignment_id}/approve')
        self.assertEqual(response.status_code, 403)
        
        self.logout()
        self.login_staff('hod_user')
        response = self.client.post(f'/api/results/course/{self.assignment_id}/approve')
        self.assertEqual(response.get_json()['count'], 1)
        response = self.client.post(f'/api/results/course/{self.assignment_id}/publish')
        self.assertEqual(response.get_json()['count'], 1)
        
        self.logout()
        self.login_student()
        response = self.client.get('/api/results/student', query_string={
            'academic_year': ACADEMIC_YEAR,
            'semester': SEMESTER
        })
        self.assertEqual(response.status_code, 200)
        data = response.get_json()['data']
        self.assertEqual(len(data['results']), 1)
        self.assertEqual(data['results'][0]['status'], 'published')
        self.assertEqual(data['gpa_info']['gpa'], 2.7)
        
        response = self.client.get('/api/results/student/transcript')
        transcript = response.get_json()['data']
        self.assertEqual(len(transcript['terms']), 1)
        self.assertEqual(transcript['overall']['gpa'], 2.7)
    
    def test_weight_mismatch_response(self):
        """An unbalanced result blocks submission with a 400 and per-result details"""
        self.login_staff('lecturer_one')
        payload = scenario_payload()
        payload['assessments'][2]['weight'] = 40
        self.upload(payload)
        
        response = self.client.post(f'/api/results/course/{self.assignment_id}/submit')
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body['error'], 'weight_mismatch')
        self.assertEqual(body['details']['results'][0]['total_weight'], 90)
        
        response = self.client.get(f'/api/results/course/{self.assignment_id}')
        graded = [e['result'] for e in response.get_json()['data']['students_with_results'] if e['result']]
        self.assertEqual(graded[0]['status'], 'draft')
    
    def test_state_errors_are_conflicts(self):
        """Repeating a transition returns 409"""
        self.login_staff('lecturer_one')
        self.upload()
        self.client.post(f'/api/results/course/{self.assignment_id}/submit')
        
        response = self.client.post(f'/api/results/course/{self.assignment_id}/submit')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['error'], 'no_draft_results')
        
        response = self.upload()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['error'], 'already_submitted')
    
    def test_other_lecturer_forbidden(self):
        """Only the assigned lecturer may upload results"""
        self.login_staff('lecturer_two')
        response = self.upload()
        self.assertEqual(response.status_code, 403)
    
    def test_invalid_payload(self):
        """Field errors come back under details"""
        self.login_staff('lecturer_one')
        response = self.upload({'assessments': [{'type': 'final', 'name': 'Final', 'max_score': 0,
                                                 'obtained_score': 10, 'weight': 100}]})
        self.assertEqual(response.status_code, 400)
        self.assertIn('assessments[0].max_score', response.get_json()['details']['errors'])
    
    def test_non_finite_scores_rejected(self):
        """NaN and Infinity literals in the body are validation errors, not conflicts"""
        self.login_staff('lecturer_one')
        url = f'/api/results/course/{self.assignment_id}/student/{self.student_id}'
        body = ('{"assessments": [{"type": "final", "name": "Final", "max_score": Infinity, '
                '"obtained_score": NaN, "weight": 100}]}')
        response = self.client.put(url, data=body, content_type='application/json')
        self.assertEqual(response.status_code, 400)
        errors = response.get_json()['details']['errors']
        self.assertIn('assessments[0].max_score', errors)
        
        body = ('{"assessments": [{"type": "final", "name": "Final", "max_score": 100, '
                '"obtained_score": NaN, "weight": 100}]}')
        response = self.client.put(url, data=body, content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('assessments[0].obtained_score', response.get_json()['details']['errors'])
    
    def test_malformed_body_shapes_rejected(self):
        """Attendance given as a list or a top-level array body is a 400"""
        self.login_staff('lecturer_one')
        payload = scenario_payload()
        payload['attendance'] = [40, 36]
        response = self.upload(payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'], 'validation_error')
        self.assertIn('attendance', response.get_json()['details']['errors'])
        
        response = self.upload([scenario_payload()])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'], 'validation_error')
        
        payload['attendance'] = {'total_classes': 40, 'attended_classes': 36.7}
        response = self.upload(payload)
        self.assertEqual(response.status_code, 400)
    
    def test_missing_assignment(self):
        """Unknown assignment returns 404"""
        self.login_staff('lecturer_one')
        response = self.client.get('/api/results/course/9999')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['error'], 'not_found')
    
    def test_export_results(self):
        """Course results download as an Excel workbook"""
        self.login_staff('lecturer_one')
        self.upload()
        response = self.client.get(f'/api/results/course/{self.assignment_id}/export')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Type'],
                         'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        self.assertIn('results_csc101_2024-2025_first.xlsx', response.headers['Content-Disposition'])
        self.assertTrue(response.data.startswith(b'PK'))
    
    def test_assignment_endpoints(self):
        """HOD assigns and updates courses; lecturers list their own"""
        self.login_staff('hod_user')
        response = self.client.post('/api/assignments', json={
            'course_id': self.course_id,
            'lecturer_id': self.other_lecturer_id,
            'academic_year': ACADEMIC_YEAR,
            'semester': 'Second',
            'expected_students': 20
        })
        self.assertEqual(response.status_code, 201)
        new_id = response.get_json()['data']['id']
        
        response = self.client.post('/api/assignments', json={
            'course_id': self.course_id,
            'lecturer_id': self.lecturer_id,
            'academic_year': ACADEMIC_YEAR,
            'semester': 'Second'
        })
        self.assertEqual(response.status_code, 409)
        
        response = self.client.patch(f'/api/assignments/{new_id}', json={'contact_hours': 4})
        self.assertEqual(response.get_json()['data']['contact_hours'], 4)
        
        response = self.client.get('/api/assignments')
        self.assertEqual(response.get_json()['total'], 2)
        
        response = self.client.get(f'/api/assignments/lecturer/{self.lecturer_id}/workload',
                                   query_string={'academic_year': ACADEMIC_YEAR, 'semester': SEMESTER})
        self.assertEqual(response.get_json()['data']['total_courses'], 1)
        
        response = self.client.post(f'/api/assignments/{new_id}/cancel')
        self.assertEqual(response.status_code, 200)
        
        self.logout()
        self.login_staff('lecturer_one')
        response = self.client.get('/api/assignments')
        data = response.get_json()['data']
        self.assertEqual([a['id'] for a in data], [self.assignment_id])
        
        response = self.client.post('/api/assignments', json={'course_id': self.course_id})
        self.assertEqual(response.status_code, 403)
    
    def test_available_courses_and_lecturers(self):
        """Assignment planning endpoints for a department and period"""
        self.login_staff('hod_user')
        period = {'department': 'Computer Science', 'academic_year': ACADEMIC_YEAR, 'semester': SEMESTER}
        
        response = self.client.get('/api/assignments/available-courses', query_string=period)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['data'], [])
        
        response = self.client.get('/api/assignments/available-courses',
                                   query_string=dict(period, semester='Second'))
        self.assertEqual([c['code'] for c in response.get_json()['data']], ['CSC101'])
        
        response = self.client.get('/api/assignments/available-courses',
                                   query_string={'department': 'Computer Science'})
        self.assertEqual(response.status_code, 400)
        
        response = self.client.get('/api/assignments/available-lecturers', query_string=period)
        lecturers = {staff['staff_id']: staff for staff in response.get_json()['data']}
        self.assertEqual(lecturers['LEC001']['workload']['total_courses'], 1)
        self.assertEqual(lecturers['LEC002']['workload']['total_courses'], 0)
        
        response = self.client.get('/api/assignments', query_string={'department': 'Mathematics'})
        self.assertEqual(response.get_json()['total'], 0)
        
        self.logout()
        self.login_staff('lecturer_one')
        response = self.client.get('/api/assignments/available-lecturers', query_string=period)
        self.assertEqual(response.status_code, 403)

if __name__ == '__main__':
    unittest.main()

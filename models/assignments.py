"""
Assignment models for the Results Engine
CourseAssignment binds one lecturer to one course for one academic period
and carries the flags that gate the result lifecycle.
"""

from database import db
from datetime import datetime

ASSIGNMENT_STATUSES = ('active', 'completed', 'cancelled')

class CourseAssignment(db.Model):
    """Course assignment to a lecturer for an academic period"""
    __tablename__ = 'course_assignment'
    
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('course.id'), nullable=False)
    lecturer_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=False)
    assigned_by_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=False)
    academic_year = db.Column(db.String(9), nullable=False)
    semester = db.Column(db.String(10), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    assignment_date = db.Column(db.DateTime, default=datetime.utcnow)
    
    # Course load
    expected_students = db.Column(db.Integer, default=0)
    actual_students = db.Column(db.Integer, default=0)
    contact_hours = db.Column(db.Integer, default=0)
    credit_units = db.Column(db.Integer, default=0)
    notes = db.Column(db.String(500), nullable=True)
    
    # Results status
    results_submitted = db.Column(db.Boolean, nullable=False, default=False)
    results_submission_date = db.Column(db.DateTime, nullable=True)
    results_approved = db.Column(db.Boolean, nullable=False, default=False)
    results_approved_by_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=True)
    results_approval_date = db.Column(db.DateTime, nullable=True)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    lecturer = db.relationship('Staff', foreign_keys=[lecturer_id],
                               backref=db.backref('course_assignments', lazy='dynamic'))
    assigned_by = db.relationship('Staff', foreign_keys=[assigned_by_id])
    results_approved_by = db.relationship('Staff', foreign_keys=[results_approved_by_id])
    results = db.relationship('Result', backref='course_assignment', lazy='dynamic')
    
    # One assignment per course per academic period
    __table_args__ = (
        db.UniqueConstraint('course_id', 'academic_year', 'semester', name='unique_course_period_assignment'),
        db.CheckConstraint('NOT results_approved OR results_submitted', name='approved_implies_submitted'),
    )
    
    def can_submit_results(self):
        """Check if results can still be submitted"""
        return self.status == 'active' and not self.results_submitted
    
    def can_modify(self):
        """Check if assignment can be modified"""
        return self.status == 'active' and not self.results_submitted
    
    def is_lecturer(self, staff_id):
        """Check if the given staff member teaches this assignment"""
        return staff_id is not None and self.lecturer_id == staff_id
    
    def get_enrolled_students(self):
        """Get the cohort enrolled in this course offering"""
        return self.course.get_enrolled_students(self.academic_year, self.semester)
    
    def get_period_label(self):
        """Human readable academic period"""
        return f'{self.academic_year} - {self.semester} Semester'
    
    def get_results_status(self):
        """Get results status label"""
        if self.results_approved:
            return 'Approved'
        if self.results_submitted:
            return 'Submitted'
        return 'Pending'
    
    def get_summary(self):
        """Get assignment summary"""
        return {
            'course_code': self.course.code if self.course else None,
            'course_title': self.course.title if self.course else None,
            'lecturer_name': self.lecturer.name if self.lecturer else None,
            'academic_period': self.get_period_label(),
            'status': self.status,
            'results_status': self.get_results_status(),
            'student_count': self.actual_students or self.expected_students
        }
    
    @staticmethod
    def get_lecturer_workload(lecturer_id, academic_year, semester):
        """Get totals over a lecturer's active assignments for a period"""
        assignments = CourseAssignment.query.filter_by(
            lecturer_id=lecturer_id,
            academic_year=academic_year,
            semester=semester,
            status='active'
        ).all()
        
        return {
            'total_courses': len(assignments),
            'total_credits': sum((a.course.credits if a.course else 0) for a in assignments),
            'total_students': sum((a.actual_students or 0) for a in assignments),
            'assignments': assignments
        }
    
    def to_dict(self):
        """Convert assignment to dictionary"""
        return {
            'id': self.id,
            'course_id': self.course_id,
            'course_code': self.course.code if self.course else None,
            'course_title': self.course.title if self.course else None,
            'lecturer_id': self.lecturer_id,
            'lecturer_name': self.lecturer.name if self.lecturer else None,
            'assigned_by_id': self.assigned_by_id,
            'academic_year': self.academic_year,
            'semester': self.semester,
            'status': self.status,
            'assignment_date': self.assignment_date.isoformat() if self.assignment_date else None,
            'expected_students': self.expected_students,
            'actual_students': self.actual_students,
            'contact_hours': self.contact_hours,
            'credit_units': self.credit_units,
            'notes': self.notes,
            'results_submitted': self.results_submitted,
            'results_submission_date': self.results_submission_date.isoformat() if self.results_submission_date else None,
            'results_approved': self.results_approved,
            'results_approved_by_id': self.results_approved_by_id,
            'results_approval_date': self.results_approval_date.isoformat() if self.results_approval_date else None
        }
    
    def __repr__(self):
        course_code = self.course.code if self.course else "Unknown"
        lecturer_name = self.lecturer.name if self.lecturer else "Unknown"
        return f'<CourseAssignment {lecturer_name} -> {course_code} ({self.academic_year} {self.semester})>'

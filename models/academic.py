"""
Academic structure models for the Results Engine
Course model and academic period constants
"""

from database import db
from datetime import datetime

SEMESTERS = ('First', 'Second', 'Summer')

class Course(db.Model):
    """Course offered by a department"""
    __tablename__ = 'course'
    
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    credits = db.Column(db.Integer, default=3, nullable=False)
    department = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)
    
    # Relationships
    enrollments = db.relationship('Enrollment', backref='course', lazy='dynamic')
    assignments = db.relationship('CourseAssignment', backref='course', lazy='dynamic')
    results = db.relationship('Result', backref='course', lazy='dynamic')
    
    def get_enrolled_students(self, academic_year, semester):
        """Get students actively enrolled for one academic period"""
        from models.student import Student, Enrollment
        return (Student.query
            .join(Enrollment, Enrollment.student_id == Student.id)
            .filter(
                Enrollment.course_id == self.id,
                Enrollment.academic_year == academic_year,
                Enrollment.semester == semester,
                Enrollment.status == 'enrolled'
            )
            .order_by(Student.student_id.asc())
            .all())
    
    def is_student_enrolled(self, student_id, academic_year, semester):
        """Check if a student is enrolled in this course for a period"""
        return self.enrollments.filter_by(
            student_id=student_id,
            academic_year=academic_year,
            semester=semester,
            status='enrolled'
        ).first() is not None
    
    def to_dict(self):
        """Convert course to dictionary"""
        return {
            'id': self.id,
            'code': self.code,
            'title': self.title,
            'credits': self.credits,
            'department': self.department,
            'is_active': self.is_active
        }
    
    def __repr__(self):
        return f'<Course {self.code}: {self.title}>'

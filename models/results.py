"""
Result models for the Results Engine
Result aggregate (one per student, course and academic period) and its
ordered Assessment records
"""

from database import db
from datetime import datetime
from services.grade_calculator import compute_grade, total_weight, weights_balanced, NON_GRADED_LETTERS

RESULT_STATUSES = ('draft', 'under-review', 'finalized', 'published')
ASSESSMENT_TYPES = ('assignment', 'quiz', 'midterm', 'final', 'project', 'presentation', 'lab', 'attendance')

class Assessment(db.Model):
    """Single graded item belonging to a result"""
    __tablename__ = 'assessment'
    
    id = db.Column(db.Integer, primary_key=True)
    result_id = db.Column(db.Integer, db.ForeignKey('result.id', ondelete='CASCADE'), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    type = db.Column(db.String(20), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    max_score = db.Column(db.Float, nullable=False)
    obtained_score = db.Column(db.Float, nullable=False)
    weight = db.Column(db.Float, nullable=False)
    date = db.Column(db.Date, nullable=True)
    remarks = db.Column(db.String(200), nullable=True)
    
    __table_args__ = (
        db.CheckConstraint('max_score > 0', name='assessment_max_score_positive'),
        db.CheckConstraint('obtained_score >= 0 AND obtained_score <= max_score', name='assessment_score_in_range'),
        db.CheckConstraint('weight >= 0 AND weight <= 100', name='assessment_weight_in_range'),
    )
    
    def get_score_percentage(self):
        """Score scaled to 100"""
        return round(self.obtained_score / self.max_score * 100, 2)
    
    def to_dict(self):
        """Convert assessment to dictionary"""
        return {
            'type': self.type,
            'name': self.name,
            'max_score': self.max_score,
            'obtained_score': self.obtained_score,
            'weight': self.weight,
            'score_percentage': self.get_score_percentage(),
            'date': self.date.isoformat() if self.date else None,
            'remarks': self.remarks
        }
    
    def __repr__(self):
        return f'<Assessment {self.type}:{self.name} {self.obtained_score}/{self.max_score} @{self.weight}%>'

class Result(db.Model):
    """Graded record for one student in one course in one academic period"""
    __tablename__ = 'result'
    
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id'), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey('course.id'), nullable=False)
    course_assignment_id = db.Column(db.Integer, db.ForeignKey('course_assignment.id'), nullable=False, index=True)
    academic_year = db.Column(db.String(9), nullable=False)
    semester = db.Column(db.String(10), nullable=False)
    
    # Derived grade
    percentage = db.Column(db.Float, nullable=True)
    letter_grade = db.Column(db.String(2), nullable=True)
    grade_points = db.Column(db.Float, nullable=True)
    grade_override = db.Column(db.String(1), nullable=True)  # 'I' or 'W'
    credits = db.Column(db.Integer, nullable=False, default=0)
    
    # Attendance
    total_classes = db.Column(db.Integer, nullable=True)
    attended_classes = db.Column(db.Integer, nullable=True)
    attendance_percentage = db.Column(db.Float, nullable=True)
    
    status = db.Column(db.String(20), nullable=False, default='draft', index=True)
    remarks = db.Column(db.Text, nullable=True)
    
    # Workflow stamps
    submitted_by_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=True)
    submission_date = db.Column(db.DateTime, nullable=True)
    evaluated_by_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=True)
    evaluation_date = db.Column(db.DateTime, nullable=True)
    published_by_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=True)
    published_date = db.Column(db.DateTime, nullable=True)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    assessments = db.relationship('Assessment', backref='result', order_by='Assessment.position',
                                  cascade='all, delete-orphan', passive_deletes=True)
    submitted_by = db.relationship('Staff', foreign_keys=[submitted_by_id])
    evaluated_by = db.relationship('Staff', foreign_keys=[evaluated_by_id])
    published_by = db.relationship('Staff', foreign_keys=[published_by_id])
    
    # One result per student, course and academic period
    __table_args__ = (
        db.UniqueConstraint('student_id', 'course_id', 'academic_year', 'semester',
                            name='unique_student_course_period_result'),
    )
    
    def is_draft(self):
        return self.status == 'draft'
    
    def replace_assessments(self, assessments):
        """Replace assessments in order and recompute the grade"""
        self.assessments = []
        for position, assessment in enumerate(assessments):
            assessment.position = position
            self.assessments.append(assessment)
        self.recalculate_grade()
    
    def recalculate_grade(self):
        """Derive percentage, letter grade and grade points"""
        percentage, letter, points = compute_grade(self.assessments)
        self.percentage = percentage
        if self.grade_override:
            self.letter_grade = self.grade_override
            self.grade_points = None
        else:
            self.letter_grade = letter
            self.grade_points = points
    
    def set_attendance(self, total_classes, attended_classes):
        """Store attendance figures and derive the percentage"""
        self.total_classes = total_classes
        self.attended_classes = attended_classes
        if total_classes:
            self.attendance_percentage = round(attended_classes / total_classes * 100, 2)
        else:
            self.attendance_percentage = None
    
    def get_total_weight(self):
        return total_weight(self.assessments)
    
    def has_balanced_weights(self, tolerance=0.01):
        """Check assessment weights sum to 100"""
        return weights_balanced(self.assessments, tolerance)
    
    def is_non_graded(self):
        """Incomplete or Withdrawn results carry no grade points"""
        return self.letter_grade in NON_GRADED_LETTERS
    
    def to_dict(self, include_assessments=True):
        """Convert result to dictionary"""
        data = {
            'id': self.id,
            'student_id': self.student_id,
            'student_number': self.student.student_id if self.student else None,
            'student_name': self.student.name if self.student else None,
            'course_id': self.course_id,
            'course_code': self.course.code if self.course else None,
            'course_title': self.course.title if self.course else None,
            'course_assignment_id': self.course_assignment_id,
            'academic_year': self.academic_year,
            'semester': self.semester,
            'percentage': self.percentage,
            'letter_grade': self.letter_grade,
            'grade_points': self.grade_points,
            'grade_override': self.grade_override,
            'credits': self.credits,
            'attendance': {
                'total_classes': self.total_classes,
                'attended_classes': self.attended_classes,
                'attendance_percentage': self.attendance_percentage
            },
            'status': self.status,
            'remarks': self.remarks,
            'submitted_by_id': self.submitted_by_id,
            'submission_date': self.submission_date.isoformat() if self.submission_date else None,
            'evaluated_by_id': self.evaluated_by_id,
            'evaluation_date': self.evaluation_date.isoformat() if self.evaluation_date else None,
            'published_by_id': self.published_by_id,
            'published_date': self.published_date.isoformat() if self.published_date else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_assessments:
            data['assessments'] = [a.to_dict() for a in self.assessments]
            data['total_weight'] = self.get_total_weight()
        return data
    
    def __repr__(self):
        student_number = self.student.student_id if self.student else "Unknown"
        course_code = self.course.code if self.course else "Unknown"
        return f'<Result {student_number} - {course_code} ({self.academic_year} {self.semester}): {self.status}>'

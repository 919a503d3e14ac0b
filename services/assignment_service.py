"""
Assignment service for the Results Engine
Creation and maintenance of course assignments by an assigning authority
"""

import logging

from flask import current_app

from database import db
from models.academic import Course
from models.assignments import CourseAssignment
from models.user import Staff
from services.auth_service import AuthService
from utils.db_helpers import commit_or_conflict, get_or_404, paginate_query
from utils.validators import validate_academic_year, validate_semester
from errors import ValidationError, AssignmentLockedError, ConflictError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('expected_students', 'actual_students', 'notes', 'contact_hours')
TEACHING_ROLES = ('lecturer', 'hod')

class AssignmentService:
    """Course assignment service class"""
    
    @staticmethod
    def assign_course(data, caller):
        """Assign a course to a lecturer for one academic period"""
        assigner = AuthService.require_role(caller, current_app.config['ASSIGNING_ROLES'], 'Assigning courses')
        data = data or {}
        
        course_id = data.get('course_id')
        lecturer_id = data.get('lecturer_id')
        academic_year = data.get('academic_year')
        semester = data.get('semester')
        
        if not course_id or not lecturer_id or not academic_year or not semester:
            raise ValidationError("Course, lecturer, academic year, and semester are required")
        
        errors = {}
        for field, (is_valid, message) in (
            ('academic_year', validate_academic_year(academic_year)),
            ('semester', validate_semester(semester)),
        ):
            if not is_valid:
                errors[field] = message
        try:
            expected_students = int(data.get('expected_students') or 0)
            if expected_students < 0:
                errors['expected_students'] = "Expected students cannot be negative"
        except (ValueError, TypeError):
            errors['expected_students'] = "Expected students must be a whole number"
        if errors:
            raise ValidationError("Invalid assignment data", details={'errors': errors})
        
        course = get_or_404(Course, course_id, 'Course')
        lecturer = get_or_404(Staff, lecturer_id, 'Lecturer')
        if not lecturer.is_active:
            raise ValidationError("Lecturer account is inactive")
        
        existing = CourseAssignment.query.filter_by(
            course_id=course.id,
            academic_year=academic_year,
            semester=semester
        ).first()
        if existing:
            raise ConflictError("Course is already assigned for this academic period")
        
        assignment = CourseAssignment(
            course_id=course.id,
            lecturer_id=lecturer.id,
            assigned_by_id=assigner.id,
            academic_year=academic_year,
            semester=semester,
            expected_students=expected_students,
            notes=data.get('notes'),
            contact_hours=data.get('contact_hours') or current_app.config['DEFAULT_CONTACT_HOURS'],
            credit_units=course.credits
        )
        db.session.add(assignment)
        commit_or_conflict("Course is already assigned for this academic period")
        
        logger.info(f"Course {course.code} assigned to {lecturer.staff_id} for "
                    f"{academic_year} {semester} by {assigner.staff_id}")
        return assignment
    
    @staticmethod
    def update_assignment(assignment_id, updates, caller):
        """Update load details of an assignment that is still open"""
        AuthService.require_role(caller, current_app.config['ASSIGNING_ROLES'], 'Updating course assignments')
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        
        if not assignment.can_modify():
            raise AssignmentLockedError("Assignment cannot be modified after results are submitted")
        
        errors = {}
        for key, value in (updates or {}).items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key == 'notes':
                if value is not None and len(str(value)) > 500:
                    errors[key] = "Notes cannot exceed 500 characters"
                else:
                    assignment.notes = value
                continue
            try:
                number = int(value)
            except (ValueError, TypeError):
                errors[key] = "Must be a whole number"
                continue
            if number < 0:
                errors[key] = "Cannot be negative"
                continue
            setattr(assignment, key, number)
        
        if errors:
            db.session.rollback()
            raise ValidationError("Invalid assignment data", details={'errors': errors})
        
        commit_or_conflict()
        logger.info(f"Course assignment {assignment.id} updated")
        return assignment
    
    @staticmethod
    def cancel_assignment(assignment_id, caller):
        """Cancel an assignment whose results have not been submitted"""
        AuthService.require_role(caller, current_app.config['ASSIGNING_ROLES'], 'Cancelling course assignments')
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        
        if not assignment.can_modify():
            raise AssignmentLockedError("Assignment cannot be cancelled after results are submitted")
        
        assignment.status = 'cancelled'
        commit_or_conflict()
        logger.info(f"Course assignment {assignment.id} cancelled")
        return assignment
    
    @staticmethod
    def list_assignments(caller, academic_year=None, semester=None, department=None, page=1, per_page=None):
        """Assignments visible to the caller: their own, or all for assigning roles"""
        staff = AuthService.resolve_staff(caller)
        query = CourseAssignment.query
        if department:
            query = query.join(Course, CourseAssignment.course_id == Course.id).filter(Course.department == department)
        if not staff.has_role(*current_app.config['ASSIGNING_ROLES']):
            query = query.filter_by(lecturer_id=staff.id)
        if academic_year:
            query = query.filter_by(academic_year=academic_year)
        if semester:
            query = query.filter_by(semester=semester)
        query = query.order_by(CourseAssignment.academic_year.desc(), CourseAssignment.id.asc())
        
        return paginate_query(query, page=page, per_page=per_page or current_app.config['ITEMS_PER_PAGE'])
    
    @staticmethod
    def get_lecturer_workload(lecturer_id, academic_year, semester):
        """Workload totals for a lecturer in one academic period"""
        lecturer = get_or_404(Staff, lecturer_id, 'Lecturer')
        workload = CourseAssignment.get_lecturer_workload(lecturer.id, academic_year, semester)
        workload['assignments'] = [a.get_summary() for a in workload['assignments']]
        return workload
    
    @staticmethod
    def _require_period(academic_year, semester):
        errors = {}
        for field, (is_valid, message) in (
            ('academic_year', validate_academic_year(academic_year)),
            ('semester', validate_semester(semester)),
        ):
            if not is_valid:
                errors[field] = message
        if errors:
            raise ValidationError("Invalid academic period", details={'errors': errors})
    
    @staticmethod
    def available_courses(department, academic_year, semester, caller):
        """Active courses of a department with no assignment yet for the period"""
        AuthService.require_role(caller, current_app.config['ASSIGNING_ROLES'], 'Viewing available courses')
        if not department:
            raise ValidationError("Department is required")
        AssignmentService._require_period(academic_year, semester)
        
        # A cancelled assignment still holds the (course, period) slot
        assigned = db.select(CourseAssignment.course_id).where(
            CourseAssignment.academic_year == academic_year,
            CourseAssignment.semester == semester
        )
        return (Course.query
            .filter_by(department=department, is_active=True)
            .filter(Course.id.notin_(assigned))
            .order_by(Course.code.asc())
            .all())
    
    @staticmethod
    def available_lecturers(department, caller, academic_year=None, semester=None):
        """Active teaching staff of a department, with workload when a period is given"""
        AuthService.require_role(caller, current_app.config['ASSIGNING_ROLES'], 'Viewing available lecturers')
        if not department:
            raise ValidationError("Department is required")
        with_workload = bool(academic_year or semester)
        if with_workload:
            AssignmentService._require_period(academic_year, semester)
        
        lecturers = (Staff.query
            .filter_by(department=department, is_active=True)
            .filter(Staff.role.in_(TEACHING_ROLES))
            .order_by(Staff.name.asc())
            .all())
        
        available = []
        for lecturer in lecturers:
            data = lecturer.to_dict()
            if with_workload:
                data['workload'] = AssignmentService.get_lecturer_workload(lecturer.id, academic_year, semester)
            available.append(data)
        return available

"""
Result service for the Results Engine
Drives the result lifecycle: draft -> under-review -> finalized -> published
"""

import logging
from datetime import datetime

from flask import current_app

from database import db
from models.assignments import CourseAssignment
from models.results import Result, Assessment
from models.student import Student
from services.auth_service import AuthService
from services.grade_calculator import NON_GRADED_LETTERS, total_weight
from utils.db_helpers import commit_or_conflict, flush_or_conflict, get_or_404
from utils.validators import (
    validate_assessment_type, validate_max_score, validate_score,
    validate_weight, validate_date, validate_attendance, parse_date, parse_whole_number
)
from errors import (
    ValidationError, WeightMismatchError, StateError, AlreadySubmittedError,
    AssignmentLockedError, NoDraftResultsError, NoSubmittedResultsError,
    NoFinalizedResultsError, AuthorizationError, ConflictError
)

logger = logging.getLogger(__name__)

class ResultService:
    """Lifecycle controller for course results"""
    
    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    
    @staticmethod
    def get_course_results(assignment_id, caller):
        """Cohort roster for an assignment joined with existing results.

        Students without a result yet appear with ``result`` set to None.
        Visible to the assignment's lecturer and to approving roles.
        """
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        staff = AuthService.resolve_staff(caller)
        if not assignment.is_lecturer(staff.id) and not staff.has_role(*current_app.config['APPROVING_ROLES']):
            raise AuthorizationError("Access denied. You can only view results for your assigned courses")
        
        results_by_student = {r.student_id: r for r in assignment.results.all()}
        students_with_results = []
        for student in assignment.get_enrolled_students():
            result = results_by_student.pop(student.id, None)
            students_with_results.append({
                'student': student.to_dict(),
                'result': result.to_dict() if result else None
            })
        
        # Results whose student has since left the roster are still part of the record
        for result in results_by_student.values():
            students_with_results.append({
                'student': result.student.to_dict() if result.student else None,
                'result': result.to_dict()
            })
        
        return {
            'assignment': assignment.to_dict(),
            'students_with_results': students_with_results
        }
    
    @staticmethod
    def get_result_for_student(assignment, student_id):
        """Find the result for a student in an assignment's course offering"""
        return Result.query.filter_by(
            student_id=student_id,
            course_id=assignment.course_id,
            academic_year=assignment.academic_year,
            semester=assignment.semester
        ).first()
    
    @staticmethod
    def get_student_results(caller, academic_year=None, semester=None):
        """Caller's own published results, with semester GPA when a period is given"""
        from services.gpa_service import GPAService
        
        student = AuthService.resolve_student(caller)
        results = sorted(student.get_published_results(academic_year, semester),
                         key=lambda r: (r.academic_year, r.semester, r.course.code if r.course else ''))
        
        gpa_info = None
        if academic_year and semester:
            gpa_info = GPAService.semester_gpa(student.id, academic_year, semester)
        
        return {
            'student': student.to_dict(),
            'results': [r.to_dict() for r in results],
            'gpa_info': gpa_info
        }
    
    # ------------------------------------------------------------------
    # Draft editing
    # ------------------------------------------------------------------
    
    @staticmethod
    def _require_lecturer(assignment, caller):
        staff = AuthService.resolve_staff(caller)
        if not assignment.is_lecturer(staff.id):
            logger.warning(f"{caller} is not the lecturer of assignment {assignment.id}")
            raise AuthorizationError("Access denied. You can only manage results for your assigned courses")
        return staff
    
    @staticmethod
    def _new_result(assignment, student, lecturer):
        """Add a draft result for a student and flush it so duplicates surface now"""
        if not assignment.course.is_student_enrolled(student.id, assignment.academic_year, assignment.semester):
            raise ValidationError(f"Student {student.student_id} is not enrolled in {assignment.course.code} "
                                  f"for {assignment.get_period_label()}")
        
        if ResultService.get_result_for_student(assignment, student.id):
            raise ConflictError(f"A result already exists for student {student.student_id} in "
                                f"{assignment.course.code} ({assignment.get_period_label()})")
        
        result = Result(
            student_id=student.id,
            course_id=assignment.course_id,
            course_assignment_id=assignment.id,
            academic_year=assignment.academic_year,
            semester=assignment.semester,
            credits=assignment.course.credits,
            submitted_by_id=lecturer.id,
            status='draft'
        )
        db.session.add(result)
        flush_or_conflict(f"A result already exists for student {student.student_id} in this course and period")
        return result
    
    @staticmethod
    def create_result(assignment_id, student_id, caller):
        """Create an empty draft result for an enrolled student"""
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        lecturer = ResultService._require_lecturer(assignment, caller)
        if not assignment.can_modify():
            raise AssignmentLockedError("Results for this course assignment can no longer be edited")
        student = get_or_404(Student, student_id, 'Student')
        
        result = ResultService._new_result(assignment, student, lecturer)
        commit_or_conflict(f"A result already exists for student {student.student_id} in this course and period")
        logger.info(f"Draft result {result.id} created for student {student.student_id} in assignment {assignment.id}")
        return result
    
    @staticmethod
    def build_assessments(items):
        """Validate raw assessment payloads and build Assessment objects.

        Every problem is collected so the caller can fix all fields at once.
        """
        if not isinstance(items, list):
            raise ValidationError("Assessments must be a list")
        
        errors = {}
        assessments = []
        for index, item in enumerate(items):
            prefix = f'assessments[{index}]'
            if not isinstance(item, dict):
                errors[prefix] = "Assessment must be an object"
                continue
            
            name = item.get('name').strip() if isinstance(item.get('name'), str) else ''
            max_score_check = validate_max_score(item.get('max_score'))
            checks = {
                'type': validate_assessment_type(item.get('type')),
                'max_score': max_score_check,
                'weight': validate_weight(item.get('weight')),
                'name': (bool(name), "Assessment name is required"),
            }
            # Score range is only meaningful against a valid maximum
            if max_score_check[0]:
                checks['obtained_score'] = validate_score(item.get('obtained_score'), item.get('max_score'))
            if item.get('date') not in (None, ''):
                checks['date'] = validate_date(item.get('date'))

            item_valid = True
            for field, (is_valid, message) in checks.items():
                if not is_valid:
                    errors[f'{prefix}.{field}'] = message
                    item_valid = False
            
            if item_valid:
                assessments.append(Assessment(
                    type=item['type'],
                    name=name,
                    max_score=float(item['max_score']),
                    obtained_score=float(item['obtained_score']),
                    weight=float(item['weight']),
                    date=parse_date(item.get('date')),
                    remarks=item.get('remarks')
                ))
        
        if not errors and total_weight(assessments) > 100:
            errors['assessments'] = f"Assessment weights total {total_weight(assessments)}, which exceeds 100"
        
        if errors:
            raise ValidationError("Invalid assessment data", details={'errors': errors})
        
        return assessments
    
    @staticmethod
    def upsert_assessments(assignment_id, student_id, payload, caller):
        """Create or replace a draft result's assessments, attendance and remarks"""
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        lecturer = ResultService._require_lecturer(assignment, caller)
        student = get_or_404(Student, student_id, 'Student')
        payload = payload or {}
        if not isinstance(payload, dict):
            raise ValidationError("Result data must be a JSON object")
        
        result = ResultService.get_result_for_student(assignment, student.id)
        if result is not None and not result.is_draft():
            raise AlreadySubmittedError(f"Cannot modify a result that is {result.status}")
        if not assignment.can_modify():
            raise AssignmentLockedError("Results for this course assignment can no longer be edited")
        
        assessments = ResultService.build_assessments(payload.get('assessments', []))
        
        grade_override = payload.get('grade_override') or None
        if grade_override is not None and grade_override not in NON_GRADED_LETTERS:
            raise ValidationError("Invalid grade override",
                                  details={'errors': {'grade_override': f"Must be one of: {', '.join(NON_GRADED_LETTERS)}"}})
        
        attendance = payload.get('attendance') or {}
        if not isinstance(attendance, dict):
            raise ValidationError("Invalid attendance data",
                                  details={'errors': {'attendance': "Attendance must be an object with total_classes and attended_classes"}})
        total_classes = attendance.get('total_classes')
        attended_classes = attendance.get('attended_classes')
        if total_classes is not None or attended_classes is not None:
            is_valid, message = validate_attendance(total_classes, attended_classes)
            if not is_valid:
                raise ValidationError("Invalid attendance data", details={'errors': {'attendance': message}})
        
        created = result is None
        if created:
            result = ResultService._new_result(assignment, student, lecturer)
        
        result.grade_override = grade_override
        result.replace_assessments(assessments)
        if total_classes is not None:
            result.set_attendance(parse_whole_number(total_classes), parse_whole_number(attended_classes))
        result.remarks = payload.get('remarks')
        
        commit_or_conflict(f"A result already exists for student {student.student_id} in this course and period")
        logger.info(f"{'Created' if created else 'Updated'} draft result {result.id} for student "
                    f"{student.student_id} in assignment {assignment.id}: {result.percentage} {result.letter_grade}")
        return result
    
    # ------------------------------------------------------------------
    # Batch transitions
    # ------------------------------------------------------------------
    
    @staticmethod
    def _apply_batch(assignment, results, from_status, result_values, assignment_filters=None, assignment_values=None):
        """Move every result in the batch forward in one transaction.

        Uses conditional updates on the current status and on the assignment
        flags; if any row changed underneath us the whole batch is rolled back.
        """
        ids = [r.id for r in results]
        try:
            updated = (Result.query
                .filter(Result.id.in_(ids),
                        Result.course_assignment_id == assignment.id,
                        Result.status == from_status)
                .update(result_values, synchronize_session=False))
            if updated != len(ids):
                raise ConflictError(f"Results changed while processing: expected {len(ids)} "
                                    f"{from_status} results, updated {updated}")
            
            if assignment_values:
                flagged = (CourseAssignment.query
                    .filter_by(id=assignment.id, **(assignment_filters or {}))
                    .update(assignment_values, synchronize_session=False))
                if flagged != 1:
                    raise ConflictError("Course assignment changed while processing; reload and retry")
            
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        
        db.session.expire_all()
        return updated
    
    @staticmethod
    def _results_in_status(assignment, status):
        return (Result.query
            .filter_by(course_assignment_id=assignment.id, status=status)
            .order_by(Result.id.asc())
            .all())
    
    @staticmethod
    def submit_all(assignment_id, caller):
        """Submit all draft results of an assignment for review (draft -> under-review)"""
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        ResultService._require_lecturer(assignment, caller)
        
        drafts = ResultService._results_in_status(assignment, 'draft')
        if not drafts:
            raise NoDraftResultsError("No draft results found to submit")
        
        if not assignment.can_submit_results():
            raise AssignmentLockedError("Results for this course assignment can no longer be submitted")
        
        tolerance = current_app.config['WEIGHT_TOLERANCE']
        mismatched = [r for r in drafts if not r.grade_override and not r.has_balanced_weights(tolerance)]
        if mismatched:
            logger.warning(f"Submission of assignment {assignment.id} blocked: "
                           f"{len(mismatched)} of {len(drafts)} results have unbalanced weights")
            raise WeightMismatchError(
                f"{len(mismatched)} of {len(drafts)} results have assessment weights not summing to 100",
                details={'results': [{
                    'result_id': r.id,
                    'student_id': r.student_id,
                    'student_number': r.student.student_id if r.student else None,
                    'total_weight': r.get_total_weight()
                } for r in mismatched]}
            )
        
        now = datetime.utcnow()
        count = ResultService._apply_batch(
            assignment, drafts, 'draft',
            {'status': 'under-review', 'submission_date': now},
            assignment_filters={'status': 'active', 'results_submitted': False},
            assignment_values={
                'results_submitted': True,
                'results_submission_date': now,
                'actual_students': len(drafts)
            }
        )
        logger.info(f"Assignment {assignment_id}: {count} results submitted for review by {caller}")
        return count
    
    @staticmethod
    def approve(assignment_id, caller):
        """Approve all results under review (under-review -> finalized) and complete the assignment"""
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        approver = AuthService.require_role(caller, current_app.config['APPROVING_ROLES'], 'Approving results')
        
        under_review = ResultService._results_in_status(assignment, 'under-review')
        if not under_review:
            raise NoSubmittedResultsError("No submitted results found to approve")
        
        if not assignment.results_submitted:
            raise StateError("Results for this course assignment have not been submitted")
        
        now = datetime.utcnow()
        count = ResultService._apply_batch(
            assignment, under_review, 'under-review',
            {'status': 'finalized', 'evaluated_by_id': approver.id, 'evaluation_date': now},
            assignment_filters={'results_submitted': True},
            assignment_values={
                'results_approved': True,
                'results_approved_by_id': approver.id,
                'results_approval_date': now,
                'status': 'completed'
            }
        )
        logger.info(f"Assignment {assignment_id}: {count} results approved by {approver.staff_id}")
        return count
    
    @staticmethod
    def publish(assignment_id, caller):
        """Publish all finalized results to students (finalized -> published)"""
        assignment = get_or_404(CourseAssignment, assignment_id, 'Course assignment')
        publisher = AuthService.require_role(caller, current_app.config['PUBLISHING_ROLES'], 'Publishing results')
        
        finalized = ResultService._results_in_status(assignment, 'finalized')
        if not finalized:
            raise NoFinalizedResultsError("No approved results found to publish")
        
        if not assignment.results_approved:
            raise StateError("Results for this course assignment have not been approved")
        
        now = datetime.utcnow()
        count = ResultService._apply_batch(
            assignment, finalized, 'finalized',
            {'status': 'published', 'published_date': now, 'published_by_id': publisher.id}
        )
        logger.info(f"Assignment {assignment_id}: {count} results published by {publisher.staff_id}")
        return count

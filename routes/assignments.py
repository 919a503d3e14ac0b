"""
Course assignment routes for the Results Engine
"""

from flask import Blueprint, request, jsonify
from routes.auth import login_required, current_caller
from services.assignment_service import AssignmentService
from errors import ValidationError

assignments_bp = Blueprint('assignments', __name__)

@assignments_bp.route('', methods=['GET'])
@login_required('staff')
def list_assignments():
    """Assignments visible to the caller"""
    page = request.args.get('page', 1, type=int)
    pagination = AssignmentService.list_assignments(
        current_caller(),
        academic_year=request.args.get('academic_year'),
        semester=request.args.get('semester'),
        department=request.args.get('department'),
        page=page
    )
    return jsonify({
        'success': True,
        'data': [a.to_dict() for a in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total
    })

@assignments_bp.route('', methods=['POST'])
@login_required('staff')
def assign_course():
    """Assign course to lecturer (HOD/Admin)"""
    assignment = AssignmentService.assign_course(request.get_json(silent=True) or {}, current_caller())
    return jsonify({
        'success': True,
        'message': 'Course assigned successfully',
        'data': assignment.to_dict()
    }), 201

@assignments_bp.route('/<int:assignment_id>', methods=['PATCH'])
@login_required('staff')
def update_assignment(assignment_id):
    """Update course assignment load details"""
    assignment = AssignmentService.update_assignment(
        assignment_id, request.get_json(silent=True) or {}, current_caller())
    return jsonify({
        'success': True,
        'message': 'Assignment updated successfully',
        'data': assignment.to_dict()
    })

@assignments_bp.route('/<int:assignment_id>/cancel', methods=['POST'])
@login_required('staff')
def cancel_assignment(assignment_id):
    """Cancel course assignment"""
    AssignmentService.cancel_assignment(assignment_id, current_caller())
    return jsonify({'success': True, 'message': 'Assignment cancelled successfully'})

@assignments_bp.route('/lecturer/<int:lecturer_id>/workload')
@login_required('staff')
def lecturer_workload(lecturer_id):
    """Lecturer workload for an academic period"""
    academic_year = request.args.get('academic_year')
    semester = request.args.get('semester')
    if not academic_year or not semester:
        raise ValidationError('Academic year and semester are required')
    
    workload = AssignmentService.get_lecturer_workload(lecturer_id, academic_year, semester)
    return jsonify({'success': True, 'data': workload})

@assignments_bp.route('/available-courses')
@login_required('staff')
def available_courses():
    """Department courses still open for assignment in a period"""
    courses = AssignmentService.available_courses(
        request.args.get('department'),
        request.args.get('academic_year'),
        request.args.get('semester'),
        current_caller()
    )
    return jsonify({'success': True, 'data': [c.to_dict() for c in courses]})

@assignments_bp.route('/available-lecturers')
@login_required('staff')
def available_lecturers():
    """Department lecturers, with workload when a period is given"""
    lecturers = AssignmentService.available_lecturers(
        request.args.get('department'),
        current_caller(),
        academic_year=request.args.get('academic_year'),
        semester=request.args.get('semester')
    )
    return jsonify({'success': True, 'data': lecturers})

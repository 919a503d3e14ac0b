"""
Result routes for the Results Engine
JSON endpoints for the result lifecycle
"""

from flask import Blueprint, request, jsonify, make_response
from routes.auth import login_required, current_caller
from services.result_service import ResultService
from services.excel_export_service import ExcelExportService

results_bp = Blueprint('results', __name__)

@results_bp.route('/course/<int:assignment_id>')
@login_required('staff')
def course_results(assignment_id):
    """Lecturer view: enrolled cohort joined with existing results"""
    data = ResultService.get_course_results(assignment_id, current_caller())
    return jsonify({'success': True, 'data': data})

@results_bp.route('/course/<int:assignment_id>/student/<int:student_id>', methods=['PUT'])
@login_required('staff')
def upload_result(assignment_id, student_id):
    """Create or update a student's draft result"""
    payload = request.get_json(silent=True) or {}
    result = ResultService.upsert_assessments(assignment_id, student_id, payload, current_caller())
    return jsonify({
        'success': True,
        'message': 'Result saved successfully',
        'data': result.to_dict()
    })

@results_bp.route('/course/<int:assignment_id>/submit', methods=['POST'])
@login_required('staff')
def submit_results(assignment_id):
    """Submit all draft results of a course for review"""
    count = ResultService.submit_all(assignment_id, current_caller())
    return jsonify({'success': True, 'message': f'{count} results submitted successfully', 'count': count})

@results_bp.route('/course/<int:assignment_id>/approve', methods=['POST'])
@login_required('staff')
def approve_results(assignment_id):
    """Approve submitted results (HOD/Admin)"""
    count = ResultService.approve(assignment_id, current_caller())
    return jsonify({'success': True, 'message': f'{count} results approved successfully', 'count': count})

@results_bp.route('/course/<int:assignment_id>/publish', methods=['POST'])
@login_required('staff')
def publish_results(assignment_id):
    """Publish approved results to students (HOD/Admin)"""
    count = ResultService.publish(assignment_id, current_caller())
    return jsonify({'success': True, 'message': f'{count} results published successfully', 'count': count})

@results_bp.route('/course/<int:assignment_id>/export')
@login_required('staff')
def export_results(assignment_id):
    """Download the course result sheet as Excel"""
    report = ResultService.get_course_results(assignment_id, current_caller())
    wb = ExcelExportService.export_course_results(report)
    
    response = make_response(ExcelExportService.workbook_to_bytes(wb))
    response.headers['Content-Type'] = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    code = (report['assignment']['course_code'] or 'course').lower()
    year = report['assignment']['academic_year'].replace('/', '-')
    fname = f"results_{code}_{year}_{report['assignment']['semester'].lower()}.xlsx"
    response.headers['Content-Disposition'] = f'attachment; filename={fname}'
    return response

@results_bp.route('/student')
@login_required('student')
def student_results():
    """Caller's own published results with semester GPA"""
    data = ResultService.get_student_results(
        current_caller(),
        academic_year=request.args.get('academic_year'),
        semester=request.args.get('semester')
    )
    return jsonify({'success': True, 'data': data})

@results_bp.route('/student/transcript')
@login_required('student')
def student_transcript():
    """Caller's published results grouped by period with cumulative GPA"""
    from services.gpa_service import GPAService
    caller = current_caller()
    return jsonify({'success': True, 'data': GPAService.transcript(caller.student_id)})

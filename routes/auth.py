"""
Authentication routes for the Results Engine
Handles login, logout and the access-control decorator used by the API
"""

from functools import wraps

from flask import Blueprint, request, session, jsonify
from services.auth_service import AuthService, SessionManager
from utils.validators import validate_username
from errors import AuthenticationError, AuthorizationError, ValidationError

auth_bp = Blueprint('auth', __name__)

def _credentials():
    data = request.get_json(silent=True) or request.form
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    
    # Validate input
    if not username or not password:
        raise ValidationError('Username and password are required')
    
    is_valid, message = validate_username(username)
    if not is_valid:
        raise ValidationError(message)
    
    return username, password

@auth_bp.route('/staff/login', methods=['POST'])
def staff_login():
    """Staff login handler"""
    username, password = _credentials()
    success, user, message = AuthService.authenticate_staff(username, password)
    
    if not success:
        raise AuthenticationError(message)
    
    SessionManager.create_session(session, 'staff', user.id, user.username, user.role)
    return jsonify({'success': True, 'message': message, 'data': user.to_dict()})

@auth_bp.route('/student/login', methods=['POST'])
def student_login():
    """Student login handler"""
    username, password = _credentials()
    success, user, message = AuthService.authenticate_student(username, password)
    
    if not success:
        raise AuthenticationError(message)
    
    SessionManager.create_session(session, 'student', user.id, user.username, 'student')
    return jsonify({'success': True, 'message': message, 'data': user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout handler for all user types"""
    SessionManager.clear_session(session)
    return jsonify({'success': True, 'message': 'You have been logged out successfully'})

@auth_bp.route('/me')
def me():
    """Current session information"""
    info = SessionManager.get_session_info(session)
    if info is None:
        raise AuthenticationError('Authentication required')
    return jsonify({'success': True, 'data': info})

def current_caller():
    """Caller identity for the current request"""
    return SessionManager.get_caller(session)

# Authentication decorator
def login_required(user_type=None):
    """Decorator to require an authenticated caller, optionally of one user type"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not SessionManager.is_authenticated(session):
                raise AuthenticationError('Please log in to access this resource')
            
            if user_type and session.get('user_type') != user_type:
                raise AuthorizationError(f'Access denied. {user_type.capitalize()} login required.')
            
            return f(*args, **kwargs)
        return decorated_function
    return decorator

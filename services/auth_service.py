"""
Authentication service for the Results Engine
Handles login, session utilities and resolution of the calling identity
"""

import logging

from sqlalchemy import func

from database import db
from models.user import Staff
from models.student import Student
from errors import AuthenticationError, AuthorizationError
from datetime import datetime

logger = logging.getLogger(__name__)

class Caller:
    """Identity of whoever invokes a service operation"""
    
    def __init__(self, user_type, user_id, role=None):
        self.user_type = user_type  # 'staff' or 'student'
        self.user_id = user_id
        self.role = role
    
    @property
    def is_staff(self):
        return self.user_type == 'staff'
    
    @property
    def is_student(self):
        return self.user_type == 'student'
    
    @property
    def staff_id(self):
        return self.user_id if self.is_staff else None
    
    @property
    def student_id(self):
        return self.user_id if self.is_student else None
    
    @staticmethod
    def for_staff(staff):
        return Caller('staff', staff.id, staff.role)
    
    def __repr__(self):
        return f'<Caller {self.user_type}:{self.user_id} ({self.role})>'

class AuthService:
    """Authentication service class"""
    
    @staticmethod
    def authenticate_staff(username, password):
        """Authenticate a staff member, returning (success, user, message)"""
        # Case-insensitive username match
        normalized = (username or '').strip()
        user = (
            Staff.query
            .filter(func.lower(Staff.username) == func.lower(normalized))
            .filter_by(is_active=True)
            .first()
        )
        
        if user and user.check_password(password):
            user.update_last_login()
            return True, user, "Login successful"
        
        logger.warning(f"Failed staff login for '{normalized}'")
        return False, None, "Invalid username or password"
    
    @staticmethod
    def authenticate_student(username, password):
        """Authenticate a student, returning (success, user, message)"""
        normalized = (username or '').strip()
        user = (
            Student.query
            .filter(func.lower(Student.username) == func.lower(normalized))
            .filter_by(is_active=True)
            .first()
        )
        
        if user and user.check_password(password):
            user.update_last_login()
            return True, user, "Login successful"
        
        logger.warning(f"Failed student login for '{normalized}'")
        return False, None, "Invalid username or password"
    
    @staticmethod
    def resolve_staff(caller):
        """Return the active Staff record behind a caller"""
        if caller is None:
            raise AuthenticationError("Authentication required")
        if not caller.is_staff:
            raise AuthorizationError("Staff access required")
        staff = db.session.get(Staff, caller.user_id)
        if not staff or not staff.is_active:
            raise AuthorizationError("Staff record not found or inactive")
        return staff
    
    @staticmethod
    def resolve_student(caller):
        """Return the active Student record behind a caller"""
        if caller is None:
            raise AuthenticationError("Authentication required")
        if not caller.is_student:
            raise AuthorizationError("Student access required")
        student = db.session.get(Student, caller.user_id)
        if not student or not student.is_active:
            raise AuthorizationError("Student record not found or inactive")
        return student
    
    @staticmethod
    def require_role(caller, roles, action):
        """Resolve the caller's staff record and check it holds one of roles"""
        staff = AuthService.resolve_staff(caller)
        if not staff.has_role(*roles):
            logger.warning(f"{caller} denied: {action} requires one of {', '.join(roles)}")
            raise AuthorizationError(f"Access denied. {action} requires one of: {', '.join(roles)}")
        return staff

class SessionManager:
    """Session management utilities"""
    
    @staticmethod
    def create_session(session, user_type, user_id, username, role):
        """Create user session"""
        session['user_type'] = user_type
        session['user_id'] = user_id
        session['username'] = username
        session['role'] = role
        session['login_time'] = datetime.utcnow().isoformat()
        session.permanent = True
    
    @staticmethod
    def clear_session(session):
        """Clear user session"""
        session.clear()
    
    @staticmethod
    def is_authenticated(session):
        """Check if user is authenticated"""
        return 'user_type' in session and 'user_id' in session
    
    @staticmethod
    def get_caller(session):
        """Build the Caller for the current session, or None when anonymous"""
        if not SessionManager.is_authenticated(session):
            return None
        return Caller(session.get('user_type'), session.get('user_id'), session.get('role'))
    
    @staticmethod
    def get_session_info(session):
        """Get complete session information"""
        if not SessionManager.is_authenticated(session):
            return None
        
        return {
            'user_type': session.get('user_type'),
            'user_id': session.get('user_id'),
            'username': session.get('username'),
            'role': session.get('role'),
            'login_time': session.get('login_time')
        }

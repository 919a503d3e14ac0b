"""
User models for the Results Engine
Staff accounts (lecturers, heads of department, administrators)
"""

from database import db
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

STAFF_ROLES = ('lecturer', 'hod', 'admin')

class Staff(db.Model):
    """Staff member who teaches, approves or publishes results"""
    __tablename__ = 'staff'
    
    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    role = db.Column(db.String(20), nullable=False, default='lecturer')  # 'lecturer', 'hod', 'admin'
    department = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)
    is_active = db.Column(db.Boolean, default=True)
    
    def set_password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)
    
    def check_password(self, password):
        """Check password against hash"""
        return check_password_hash(self.password_hash, password)
    
    def update_last_login(self):
        """Update last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()
    
    def has_role(self, *roles):
        """Check if staff member holds one of the given roles"""
        return self.role in roles
    
    def to_dict(self):
        """Convert staff to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'staff_id': self.staff_id,
            'name': self.name,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'department': self.department,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'is_active': self.is_active
        }
    
    def __repr__(self):
        return f'<Staff {self.staff_id}: {self.name} ({self.role})>'

"""
Database configuration and initialization for the Results Engine
"""

import logging
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Initialize SQLAlchemy instance
db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Initialize database with application context"""
    with app.app_context():
        # Import all models to ensure they are registered
        from models import (
            Staff, Student, Enrollment, Course,
            CourseAssignment, Result, Assessment
        )
        
        # Create all tables
        db.create_all()
        
        if app.config.get('CREATE_DEFAULT_ADMIN', True):
            create_default_admin()
        
        logger.info("Database initialized")

def create_default_admin():
    """Create default admin staff account for initial access"""
    from models.user import Staff
    
    existing_user = Staff.query.filter_by(username='admin').first()
    
    if not existing_user:
        default_user = Staff(
            staff_id='ADM001',
            name='System Administrator',
            username='admin',
            role='admin'
        )
        default_user.set_password('admin123')
        
        try:
            db.session.add(default_user)
            db.session.commit()
            logger.info("Default admin account created: admin/admin123")
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating default admin: {e}")

def reset_database(app):
    """Reset database - WARNING: This will delete all data"""
    with app.app_context():
        db.drop_all()
        db.create_all()
        create_default_admin()
        logger.warning("Database reset completed")

class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass

def handle_db_error(func):
    """Decorator that rolls back the session and wraps unexpected database errors"""
    from functools import wraps
    from sqlalchemy.exc import SQLAlchemyError
    
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DatabaseError(f"Database operation failed: {str(e)}") from e
    return wrapper

"""
Configuration settings for the Results Engine
"""

import os
from datetime import timedelta

class Config:
    """Base configuration class"""
    
    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'results-engine-dev-secret-key'
    
    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///results_engine.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(hours=2)
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    
    # Result lifecycle settings
    WEIGHT_TOLERANCE = 0.01  # Allowed drift when checking assessment weights sum to 100
    APPROVING_ROLES = ('hod', 'admin')
    PUBLISHING_ROLES = ('hod', 'admin')
    ASSIGNING_ROLES = ('hod', 'admin')
    DEFAULT_CONTACT_HOURS = 3
    
    # Application settings
    ITEMS_PER_PAGE = 20
    
    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

class TestingConfig(Config):
    """Configuration used by the test suite"""
    
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'WARNING'
    CREATE_DEFAULT_ADMIN = False

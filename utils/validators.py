"""
Validation utilities for the Results Engine
Each validator returns an (is_valid, message) tuple
"""

import math
import re
from datetime import datetime, date

def validate_username(username):
    """Validate username format"""
    if not username or len(username.strip()) == 0:
        return False, "Username is required"
    
    if len(username) < 3:
        return False, "Username must be at least 3 characters long"
    
    if len(username) > 80:
        return False, "Username must be 80 characters or less"
    
    # Allow alphanumeric and underscore
    if not re.match(r'^[A-Za-z0-9_]+$', username):
        return False, "Username can only contain letters, numbers, and underscores"
    
    return True, "Valid username"

def validate_academic_year(academic_year):
    """Validate academic year in YYYY/YYYY format with consecutive years"""
    if not academic_year or not isinstance(academic_year, str):
        return False, "Academic year is required"
    
    match = re.match(r'^(\d{4})/(\d{4})$', academic_year.strip())
    if not match:
        return False, "Academic year must be in format YYYY/YYYY (e.g., 2024/2025)"
    
    start, end = int(match.group(1)), int(match.group(2))
    if end != start + 1:
        return False, "Academic year must span two consecutive years"
    
    return True, "Valid academic year"

def validate_semester(semester):
    """Validate semester name"""
    from models.academic import SEMESTERS
    if semester not in SEMESTERS:
        return False, f"Semester must be one of: {', '.join(SEMESTERS)}"
    
    return True, "Valid semester"

def validate_assessment_type(assessment_type):
    """Validate assessment type"""
    from models.results import ASSESSMENT_TYPES
    if assessment_type not in ASSESSMENT_TYPES:
        return False, f"Assessment type must be one of: {', '.join(ASSESSMENT_TYPES)}"
    
    return True, "Valid assessment type"

def validate_max_score(max_score):
    """Validate maximum score"""
    try:
        max_score_float = float(max_score)
    except (ValueError, TypeError):
        return False, "Maximum score must be a valid number"
    
    if not math.isfinite(max_score_float):
        return False, "Maximum score must be a finite number"
    
    if max_score_float <= 0:
        return False, "Maximum score must be greater than zero"
    
    return True, "Valid maximum score"

def validate_score(score, max_score):
    """Validate obtained score against maximum score"""
    try:
        score_float = float(score)
        max_score_float = float(max_score)
    except (ValueError, TypeError):
        return False, "Score must be a valid number"
    
    if not math.isfinite(score_float) or not math.isfinite(max_score_float):
        return False, "Score must be a finite number"
    
    if score_float < 0:
        return False, "Score cannot be negative"
    
    if score_float > max_score_float:
        return False, f"Score cannot exceed maximum score ({max_score_float})"
    
    return True, "Valid score"

def validate_weight(weight):
    """Validate assessment weight (0-100)"""
    try:
        weight_float = float(weight)
    except (ValueError, TypeError):
        return False, "Weight must be a valid number"
    
    if not math.isfinite(weight_float):
        return False, "Weight must be a finite number"
    
    if weight_float < 0 or weight_float > 100:
        return False, "Weight must be between 0 and 100"
    
    return True, "Valid weight"

def parse_whole_number(value):
    """Convert an int, integral float or digit string to int without truncating"""
    if isinstance(value, bool):
        raise ValueError("Booleans are not whole numbers")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value} is not a whole number")
        return int(value)
    if isinstance(value, (int, str)):
        return int(value)
    raise TypeError(f"Cannot read a whole number from {type(value).__name__}")

def validate_attendance(total_classes, attended_classes):
    """Validate attendance figures"""
    try:
        total = parse_whole_number(total_classes)
        attended = parse_whole_number(attended_classes)
    except (ValueError, TypeError):
        return False, "Attendance figures must be whole numbers"
    
    if total < 0 or attended < 0:
        return False, "Attendance figures cannot be negative"
    
    if attended > total:
        return False, f"Attended classes cannot exceed total classes ({total})"
    
    return True, "Valid attendance"

def validate_date(date_str):
    """Validate date format"""
    try:
        if isinstance(date_str, str):
            datetime.strptime(date_str, '%Y-%m-%d')
        elif isinstance(date_str, date):
            pass  # Already a date object
        else:
            return False, "Invalid date format"
        
        return True, "Valid date"
    except ValueError:
        return False, "Date must be in YYYY-MM-DD format"

def parse_date(value):
    """Parse a YYYY-MM-DD string (or date) into a date, None passes through"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, '%Y-%m-%d').date()

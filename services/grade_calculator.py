"""
Grade calculator for the Results Engine
Pure functions turning assessments into a percentage, letter grade and grade points
"""

import math

from errors import ValidationError

# Descending lower bounds; each band includes its lower bound
GRADE_SCALE = (
    (97.0, 'A+', 4.0),
    (93.0, 'A', 4.0),
    (90.0, 'A-', 3.7),
    (87.0, 'B+', 3.3),
    (83.0, 'B', 3.0),
    (80.0, 'B-', 2.7),
    (77.0, 'C+', 2.3),
    (73.0, 'C', 2.0),
    (70.0, 'C-', 1.7),
    (67.0, 'D+', 1.3),
    (60.0, 'D', 1.0),
    (0.0, 'F', 0.0),
)

# Letter grades that carry credits attempted but no grade points
NON_GRADED_LETTERS = {
    'I': 'Incomplete',
    'W': 'Withdrawn',
}

GRADE_POINTS = {letter: points for _, letter, points in GRADE_SCALE}


def _value(assessment, field):
    if isinstance(assessment, dict):
        return assessment[field]
    return getattr(assessment, field)


def weighted_percentage(assessments):
    """Weighted percentage over assessments, or None when there are none.

    Each assessment contributes ``obtained_score / max_score * weight``, which is
    the same as scaling its score to 100 and taking ``weight`` percent of it.
    The total is rounded to two decimals before any grade lookup.
    """
    if not assessments:
        return None
    
    total = 0.0
    for assessment in assessments:
        max_score = float(_value(assessment, 'max_score'))
        if not math.isfinite(max_score) or max_score <= 0:
            raise ValidationError('Maximum score must be a finite number greater than zero')
        total += float(_value(assessment, 'obtained_score')) * float(_value(assessment, 'weight')) / max_score
    
    return round(total, 2)


def total_weight(assessments):
    """Sum of weights across assessments"""
    return round(sum(float(_value(a, 'weight')) for a in assessments), 4)


def weights_balanced(assessments, tolerance=0.01):
    """Check that weights sum to 100 within tolerance"""
    if not assessments:
        return False
    return abs(total_weight(assessments) - 100.0) <= tolerance


def grade_for_percentage(percentage):
    """Look up (letter_grade, grade_points) for a percentage in [0, 100]"""
    if percentage is None:
        return None, None
    if not math.isfinite(percentage) or percentage < 0 or percentage > 100:
        raise ValidationError(f'Percentage {percentage} is outside 0-100')
    
    for lower_bound, letter, points in GRADE_SCALE:
        if percentage >= lower_bound:
            return letter, points
    raise ValidationError(f'No grade band covers {percentage}')


def compute_grade(assessments):
    """Compute (percentage, letter_grade, grade_points) for a list of assessments"""
    percentage = weighted_percentage(assessments)
    letter, points = grade_for_percentage(percentage)
    return percentage, letter, points

"""
Error taxonomy for the Results Engine

Every failure raised by the services carries a machine-readable ``kind`` and
the HTTP status the API layer answers with.
"""


class ResultsError(Exception):
    """Base exception for all result lifecycle failures."""
    
    kind = 'error'
    status_code = 400
    
    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def to_dict(self):
        """Convert error to a JSON-friendly dictionary"""
        payload = {
            'success': False,
            'error': self.kind,
            'message': self.message
        }
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(ResultsError):
    """Raised when submitted data is malformed."""
    kind = 'validation_error'
    status_code = 400


class WeightMismatchError(ValidationError):
    """Raised when assessment weights of one or more results do not sum to 100."""
    kind = 'weight_mismatch'


class StateError(ResultsError):
    """Raised when an operation is attempted outside the required status."""
    kind = 'state_error'
    status_code = 409


class AlreadySubmittedError(StateError):
    """Raised when editing a result that has left draft."""
    kind = 'already_submitted'


class AssignmentLockedError(StateError):
    """Raised when a course assignment can no longer be modified."""
    kind = 'assignment_locked'


class NoDraftResultsError(StateError):
    kind = 'no_draft_results'


class NoSubmittedResultsError(StateError):
    kind = 'no_submitted_results'


class NoFinalizedResultsError(StateError):
    kind = 'no_finalized_results'


class AuthenticationError(ResultsError):
    """Raised when no authenticated caller is present."""
    kind = 'authentication_required'
    status_code = 401


class AuthorizationError(ResultsError):
    """Raised when the caller does not hold the required identity or role."""
    kind = 'forbidden'
    status_code = 403


class NotFoundError(ResultsError):
    """Raised when an assignment, result, student or course does not exist."""
    kind = 'not_found'
    status_code = 404


class ConflictError(ResultsError):
    """Raised on duplicate keys or concurrent conflicting writes."""
    kind = 'conflict'
    status_code = 409

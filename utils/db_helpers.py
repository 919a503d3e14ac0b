"""
Database helper utilities for the Results Engine
"""

import logging

from sqlalchemy.exc import IntegrityError

from database import db, handle_db_error
from errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

def _is_unique_violation(error):
    text = str(error.orig if getattr(error, 'orig', None) is not None else error).lower()
    return 'unique' in text or 'duplicate' in text

@handle_db_error
def commit_or_conflict(conflict_message="Record with this identifier already exists"):
    """Commit the session, turning unique-key violations into ConflictError"""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if _is_unique_violation(e):
            logger.warning(f"Unique constraint violation: {e.orig}")
            raise ConflictError(conflict_message) from e
        raise ConflictError("Database constraint violation") from e

@handle_db_error
def flush_or_conflict(conflict_message="Record with this identifier already exists"):
    """Flush pending changes inside the current transaction, mapping duplicates to ConflictError"""
    try:
        db.session.flush()
    except IntegrityError as e:
        db.session.rollback()
        if _is_unique_violation(e):
            raise ConflictError(conflict_message) from e
        raise ConflictError("Database constraint violation") from e

def get_or_404(model, object_id, label=None):
    """Get object by primary key or raise NotFoundError"""
    obj = db.session.get(model, object_id) if object_id is not None else None
    if obj is None:
        raise NotFoundError(f"{label or model.__name__} not found")
    return obj

def paginate_query(query, page=1, per_page=20):
    """Paginate query results"""
    return query.paginate(
        page=page,
        per_page=per_page,
        error_out=False
    )

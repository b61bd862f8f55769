"""
Utility functions for turning service errors into operator flash messages
"""

from functools import wraps

from flask import flash, redirect, url_for

from voter_desk.services.exceptions import (
    DuplicateIdentityError,
    ExtractionError,
    ImageTooLargeError,
    ServiceError,
)
from voter_desk.shared import messages
from voter_desk.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)


def handle_service_errors(redirect_endpoint='desk.index'):
    """
    Decorator to handle service errors and convert them to flash messages
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DuplicateIdentityError:
                flash(messages.DUPLICATE_IDENTITY, 'warning')
            except ImageTooLargeError:
                flash(messages.IMAGE_TOO_LARGE, 'error')
            except ExtractionError as e:
                logger.info(f"Extraction failed in {func.__name__}: {e}")
                flash(messages.EXTRACTION_FAILED, 'warning')
            except ServiceError as e:
                flash(str(e), 'error')
            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
                flash(f'Unexpected error: {str(e)}', 'error')
            return redirect(url_for(redirect_endpoint))
        return wrapper
    return decorator

"""
Application error taxonomy.

Services raise these; ``main.py`` turns them into the failure envelope
``{"success": false, "error": ...}`` with the matching status code.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Lỗi máy chủ nội bộ"


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[list] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequestError(AppError):
    """Malformed or missing input, invalid enumerated value or date ordering"""

    status_code = 400


class BusinessRuleError(AppError):
    """Request is well formed but violates a business rule (e.g. deleting a referenced record)"""

    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InternalError(AppError):
    status_code = 500


class LoginRequiredError(Exception):
    """Raised by page dependencies when no valid session cookie is present"""

    def __init__(self, next_url: str = "/admin"):
        super().__init__(next_url)
        self.next_url = next_url


@contextmanager
def database_errors(message: str):
    """Wrap database failures into an InternalError carrying an operation-specific message"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(f"❌ Database error: {message}")
        raise InternalError(message) from e

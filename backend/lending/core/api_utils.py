"""
Common API utilities for consistent response formatting across all controllers.
"""

from typing import Any, Optional

from flask import jsonify

from lending.core.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    DuplicateBookError,
    DuplicateUserError,
    InvalidInputError,
    LendingError,
    NoActiveLoanError,
    OutOfStockError,
    UserNotFoundError,
)

ERROR_STATUS_CODES = {
    InvalidInputError: 400,
    UserNotFoundError: 404,
    BookNotFoundError: 404,
    NoActiveLoanError: 404,
    OutOfStockError: 409,
    AlreadyBorrowedError: 409,
    DuplicateBookError: 409,
    DuplicateUserError: 409,
}


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def error_response(error: LendingError) -> tuple:
    """Translate a LendingError into the standard envelope and HTTP status."""
    status_code = ERROR_STATUS_CODES.get(type(error), 400)
    return api_response(False, error.message, {"code": error.code}, status_code)

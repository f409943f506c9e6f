"""
Custom exceptions for the AccessMenu ordering core.

The domain services resolve failures to typed results; these exceptions
are raised only at the HTTP boundary where a result has to become a
status code.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""
    
    # Validation (ValidationRejected)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOTE_TOO_LONG = "NOTE_TOO_LONG"
    EMPTY_NOTE = "EMPTY_NOTE"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_LINE_ITEM = "INVALID_LINE_ITEM"
    UNKNOWN_DISH = "UNKNOWN_DISH"
    UNKNOWN_VARIANT = "UNKNOWN_VARIANT"
    VARIANT_REQUIRED = "VARIANT_REQUIRED"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    
    # State machine (InvalidTransition)
    INVALID_TRANSITION = "INVALID_TRANSITION"
    SESSION_DISPOSED = "SESSION_DISPOSED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SCHEDULER_UNAVAILABLE = "SCHEDULER_UNAVAILABLE"
    
    # Catalog
    CATALOG_UNAVAILABLE = "CATALOG_UNAVAILABLE"
    CATALOG_WRITE_FAILED = "CATALOG_WRITE_FAILED"
    
    # Generic errors
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class AccessMenuException(Exception):
    """Base exception for the ordering core."""
    
    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ValidationRejectedError(AccessMenuException):
    """Raised when a mutation was rejected because a precondition failed."""
    
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=422
        )


class SessionNotFoundError(AccessMenuException):
    """Raised when an order session id is unknown or already disposed."""
    
    def __init__(self, session_id: str):
        super().__init__(
            message=f"Order session '{session_id}' not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
            status_code=404
        )


class CatalogUnavailableError(AccessMenuException):
    """Raised when the catalog provider could not supply a menu."""
    
    def __init__(self, menu_id: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Menu '{menu_id}' is currently unavailable",
            error_code=ErrorCode.CATALOG_UNAVAILABLE,
            details=details or {"menu_id": menu_id},
            status_code=503
        )


class UnsupportedLanguageError(AccessMenuException):
    """Raised when requested language is not supported."""
    
    def __init__(self, language: str, supported_languages: Optional[list] = None):
        details = {"requested_language": language}
        if supported_languages:
            details["supported_languages"] = supported_languages
            
        super().__init__(
            message=f"Language '{language}' is not supported",
            error_code=ErrorCode.UNSUPPORTED_LANGUAGE,
            details=details,
            status_code=400
        )

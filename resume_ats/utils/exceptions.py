"""
Custom Exception Classes for Resume ATS API
"""
import asyncio
import functools
import inspect
import time
from random import uniform
from typing import Dict, Any

from fastapi import HTTPException


class ResumeATSError(Exception):
    """Base exception for Resume ATS API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeATSError):
    """Raised when data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)[:200]
        kwargs.setdefault('error_code', "VALIDATION_ERROR")
        super().__init__(message, details=details, **kwargs)


class InvalidInputError(ValidationError):
    """Raised when the scoring engine receives malformed input"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        if not message.lower().startswith("invalid input"):
            message = f"Invalid input: {message}"
        kwargs.setdefault('error_code', "INVALID_INPUT")
        super().__init__(message, field=field, value=value, **kwargs)


class DatabaseError(ResumeATSError):
    """Raised when database operations fail"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


class ProcessingError(ResumeATSError):
    """Raised when resume analysis processing fails"""

    def __init__(self, message: str, resume_id: str = None, stage: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if resume_id:
            details['resume_id'] = resume_id
        if stage:
            details['stage'] = stage
        super().__init__(message, error_code="PROCESSING_ERROR", details=details, **kwargs)


class ExternalServiceError(ResumeATSError):
    """Raised when external service calls fail"""

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, error_code="EXTERNAL_SERVICE_ERROR", details=details, **kwargs)


class AuthenticationError(ResumeATSError):
    """Raised when the caller identity is missing"""

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ResumeATSError) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        InvalidInputError: 400,
        AuthenticationError: 401,
        DatabaseError: 500,
        ProcessingError: 500,
        ExternalServiceError: 502,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


# Exception context manager for better error handling
class ExceptionContext:
    """Context manager for handling exceptions with additional context"""

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        # Custom and HTTP exceptions pass through untouched
        if isinstance(exc_val, (ResumeATSError, HTTPException)):
            return False

        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            raise ValidationError(
                f"Validation error in {self.operation}: {str(exc_val)}",
                details=dict(self.context),
                cause=exc_val
            ) from exc_val
        if "database" in str(exc_val).lower() or "mongo" in str(exc_val).lower():
            raise DatabaseError(
                f"Database error in {self.operation}: {str(exc_val)}",
                operation=self.operation,
                details=dict(self.context),
                cause=exc_val
            ) from exc_val
        raise ProcessingError(
            f"Processing error in {self.operation}: {str(exc_val)}",
            details=dict(self.context),
            cause=exc_val
        ) from exc_val


# Retry decorator with exponential backoff
def retry_with_logging(
    max_attempts: int = 3,
    backoff_factor: float = 1.0,
    exceptions: tuple = (Exception,),
    logger=None
):
    """Decorator to retry operations with exponential backoff and logging"""

    def decorator(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if logger:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {str(e)}"
                        )
                    if attempt == max_attempts - 1:
                        if logger:
                            logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    await asyncio.sleep(backoff_factor * (2 ** attempt) + uniform(0, 1))

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if logger:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {str(e)}"
                        )
                    if attempt == max_attempts - 1:
                        if logger:
                            logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    time.sleep(backoff_factor * (2 ** attempt) + uniform(0, 1))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator

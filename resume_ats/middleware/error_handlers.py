"""
Global Exception Handling and Request Middleware for Resume ATS API
"""
import time
import traceback
import uuid
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

from resume_ats.utils.exceptions import ResumeATSError, map_to_http_exception
from resume_ats.utils.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Create standardized error response"""
    if isinstance(detail, str):
        detail = {"message": detail}
    elif not isinstance(detail, dict):
        detail = {"message": str(detail)}

    body = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }
    return JSONResponse(status_code=status_code, content=body, headers={"X-Request-ID": request_id})


async def resume_ats_exception_handler(request: Request, exc: ResumeATSError) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))
    logger.error(
        f"Custom exception in {request.method} {request.url.path}: {exc.message}",
        extra={
            "request_id": request_id,
            "exception_type": exc.__class__.__name__,
            "error_code": exc.error_code,
            "details": exc.details,
        }
    )
    http_exc = map_to_http_exception(exc)
    return error_response(request_id, http_exc.status_code, http_exc.detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResumeATSError, resume_ats_exception_handler)


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Global exception handler middleware"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)

            logger.info(
                f"Request completed: {request.method} {request.url.path} - {response.status_code}",
                extra={"request_id": request_id, "status_code": response.status_code}
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except ResumeATSError as exc:
            return await resume_ats_exception_handler(request, exc)

        except ValidationError as exc:
            # Pydantic errors raised inside handlers, not request parsing
            logger.error(
                f"Pydantic validation error in {request.method} {request.url.path}: {exc}",
                extra={"request_id": request_id, "validation_errors": exc.errors()}
            )
            return error_response(request_id, 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_context=False),
            })

        except HTTPException as exc:
            logger.warning(
                f"HTTP exception in {request.method} {request.url.path}: {exc.detail}",
                extra={"request_id": request_id, "status_code": exc.status_code}
            )
            return error_response(request_id, exc.status_code, exc.detail)

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            # Don't expose internal errors
            return error_response(request_id, 500, {
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            })


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for detailed request/response logging"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))

        logger.debug(
            f"Request details: {request.method} {request.url}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {time.time() - start_time:.3f}s",
                extra={"request_id": request_id, "exception": str(exc)}
            )
            raise

        processing_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code, "processing_time": processing_time}
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))

        response = await call_next(request)

        processing_time = time.time() - start_time
        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time,
                    "threshold": self.slow_request_threshold,
                }
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

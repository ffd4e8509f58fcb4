from typing import Optional

from fastapi import Header

from resume_ats.utils.exceptions import AuthenticationError, map_to_http_exception


async def require_student(x_student_id: Optional[str] = Header(None)) -> str:
    """Caller identity, set by the upstream gateway after authentication"""
    if not x_student_id or not x_student_id.strip():
        raise map_to_http_exception(AuthenticationError("Missing X-Student-Id header"))
    return x_student_id.strip()

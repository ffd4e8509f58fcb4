import uuid
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Request

from resume_ats.helpers.parsing import clean_text, is_text_usable
from resume_ats.models.request_schemas import ResumeUploadPayload
from resume_ats.models.response import HistoryEntry, HistoryResponse, ResumeSummary, StoredAnalysis
from resume_ats.models.schemas import ResumeModel
from resume_ats.routers.dependencies import require_student
from resume_ats.services.db import analyses_coll, resumes_coll
from resume_ats.utils.exceptions import ExceptionContext
from resume_ats.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


@router.post("/", response_model=ResumeSummary)
async def store_resume(payload: ResumeUploadPayload, request: Request, student_id: str = Depends(require_student)):
    """Store extracted resume text for the caller"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    text = clean_text(payload.text)
    if not text:
        raise HTTPException(status_code=400, detail="Resume text is empty")

    resume = ResumeModel(
        resume_id=str(uuid.uuid4()),
        student_id=student_id,
        file_name=payload.file_name,
        parsed_text=text,
    )

    with ExceptionContext("store_resume", logger, request_id=request_id, resume_id=resume.resume_id):
        await resumes_coll.insert_one(resume.dict())

    logger.info(f"Stored resume {resume.resume_id} for student {student_id}", extra={"request_id": request_id})
    return ResumeSummary(
        resume_id=resume.resume_id,
        file_name=resume.file_name,
        created_at=resume.created_at,
        text_usable=is_text_usable(text),
    )


@router.get("/history", response_model=HistoryResponse)
async def resume_history(request: Request, student_id: str = Depends(require_student)):
    """Caller's resumes, newest first, each with its analyses"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    with PerformanceMonitor("resume_history", logger):
        with ExceptionContext("fetch_resume_history", logger, request_id=request_id, student_id=student_id):
            resumes = await resumes_coll.find(
                {"student_id": student_id}, {"parsed_text": 0}
            ).sort("created_at", -1).to_list(length=None)
            analyses = await analyses_coll.find(
                {"student_id": student_id}
            ).sort("created_at", -1).to_list(length=None)

    by_resume = defaultdict(list)
    for a in analyses:
        by_resume[a.get("resume_id")].append(StoredAnalysis(**a))

    entries = []
    for r in resumes:
        items = by_resume.get(r["resume_id"], [])
        entries.append(HistoryEntry(
            resume_id=r["resume_id"],
            file_name=r.get("file_name", ""),
            created_at=r.get("created_at"),
            analyses=items,
            latest_score=items[0].ats_score if items else None,
            total_analyses=len(items),
        ))

    return HistoryResponse(resumes=entries, total=len(entries))

import uuid
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from resume_ats.helpers.parsing import clean_text, is_text_usable
from resume_ats.models.models import ATSScoreResult
from resume_ats.models.request_schemas import AnalyzePayload, ScorePayload
from resume_ats.models.response import AnalysisResponse, ComparisonResponse, StoredAnalysis
from resume_ats.models.schemas import AnalysisModel
from resume_ats.routers.dependencies import require_student
from resume_ats.services.ats_scorer import calculate_ats_score
from resume_ats.services.db import analyses_coll, resumes_coll
from resume_ats.services.pipeline import run_analysis
from resume_ats.services.reports import comparison_csv, comparison_markdown
from resume_ats.services.requirements_service import RequirementsService
from resume_ats.services.text_matching import build_synonym_table
from resume_ats.utils.exceptions import InvalidInputError, ExceptionContext, map_to_http_exception
from resume_ats.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)

UNUSABLE_TEXT_WARNING = (
    "Resume text looks incomplete or corrupted; the score may be lower than expected. "
    "Consider re-uploading your resume."
)


@router.post("/score", response_model=ATSScoreResult)
async def score_resume(payload: ScorePayload, request: Request):
    """Score resume text against requirements without storing anything"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    synonyms = build_synonym_table(payload.extra_synonyms) if payload.extra_synonyms else None

    with PerformanceMonitor("score_resume", logger, threshold_ms=250):
        try:
            result = calculate_ats_score(payload.resume_text, payload.requirements, synonyms)
        except InvalidInputError as e:
            logger.warning(f"Rejected scoring input: {e.message}", extra={"request_id": request_id})
            raise map_to_http_exception(e)

    logger.info(
        f"Scored resume for {payload.requirements.get('company_name')}: {result.total_score}",
        extra={"request_id": request_id, "total_score": result.total_score}
    )
    return result


async def _resolve_resume_text(payload: AnalyzePayload, student_id: str) -> Tuple[Optional[str], str]:
    if not payload.resume_id:
        return None, payload.resume_text

    resume = await resumes_coll.find_one({"resume_id": payload.resume_id, "student_id": student_id})
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return payload.resume_id, resume.get("parsed_text") or ""


@router.post("/", response_model=AnalysisResponse)
async def analyze_resume(payload: AnalyzePayload, request: Request, student_id: str = Depends(require_student)):
    """Run ATS analysis on a resume against a company and role, then store it"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    resume_id, raw_text = await _resolve_resume_text(payload, student_id)
    resume_text = clean_text(raw_text)
    if not resume_text:
        raise HTTPException(
            status_code=400,
            detail="Resume text could not be extracted. Please re-upload your resume."
        )

    text_warning = None
    if not is_text_usable(resume_text):
        logger.warning(
            f"Resume text for {resume_id or 'inline resume'} looks unusable, scoring anyway",
            extra={"request_id": request_id, "text_length": len(resume_text)}
        )
        text_warning = UNUSABLE_TEXT_WARNING

    requirements = await RequirementsService.resolve(payload.company_id, payload.company_name, payload.target_role)

    with PerformanceMonitor("run_analysis", logger, threshold_ms=5000):
        state = await run_in_threadpool(
            run_analysis, resume_text, requirements, payload.student, payload.include_feedback
        )

    result: ATSScoreResult = state["ats_result"]
    feedback = state.get("feedback")

    analysis = AnalysisModel(
        analysis_id=str(uuid.uuid4()),
        resume_id=resume_id,
        student_id=student_id,
        company_name=requirements.company_name,
        company_id=requirements.company_id,
        target_role=payload.target_role,
        feedback=feedback.dict() if feedback else None,
        **result.to_record(),
    )

    with ExceptionContext("store_analysis", logger, request_id=request_id, analysis_id=analysis.analysis_id):
        await analyses_coll.insert_one(analysis.dict())

    logger.info(
        f"Stored analysis {analysis.analysis_id} ({requirements.company_name}, score {result.total_score})",
        extra={"request_id": request_id, "analysis_id": analysis.analysis_id}
    )

    data = analysis.dict()
    data.pop("student_id")
    data["feedback"] = feedback
    data["text_warning"] = text_warning
    return AnalysisResponse(**data)


@router.get("/compare")
async def compare_analyses(
    resume_id: str = Query(..., description="Resume whose analyses are compared"),
    fmt: str = Query("json", alias="format", pattern="^(json|csv|markdown)$"),
    student_id: str = Depends(require_student),
):
    """All analyses of one resume across companies, best score first"""
    resume = await resumes_coll.find_one({"resume_id": resume_id, "student_id": student_id})
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")

    cursor = analyses_coll.find({"resume_id": resume_id, "student_id": student_id}).sort("ats_score", -1)
    analyses = await cursor.to_list(length=None)

    if fmt == "csv":
        return Response(content=comparison_csv(analyses), media_type="text/csv")
    if fmt == "markdown":
        return PlainTextResponse(comparison_markdown(resume_id, analyses), media_type="text/markdown")

    return ComparisonResponse(
        resume_id=resume_id,
        file_name=resume.get("file_name", ""),
        comparisons=[StoredAnalysis(**a) for a in analyses],
        total=len(analyses),
    )

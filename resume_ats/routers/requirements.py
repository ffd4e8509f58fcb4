from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from resume_ats.helpers.role_defaults import build_role_requirements
from resume_ats.models.models import CompanyRequirements
from resume_ats.models.request_schemas import RequirementsPayload
from resume_ats.models.response import CompanySummary
from resume_ats.routers.dependencies import require_student
from resume_ats.services.requirements_service import RequirementsService
from resume_ats.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/", response_model=List[CompanySummary])
async def list_companies():
    """Companies and roles with stored requirements, by company name"""
    rows = await RequirementsService.list_companies()
    return [CompanySummary(**row) for row in rows]


@router.get("/{company_id}", response_model=CompanyRequirements)
async def get_requirements(company_id: str, role: Optional[str] = Query(None, description="Target role")):
    """Requirements for a company, optionally for a specific role"""
    requirements = await RequirementsService.get(company_id, role)
    if not requirements:
        raise HTTPException(status_code=404, detail="Company requirements not found")
    return requirements


@router.put("/", response_model=CompanyRequirements)
async def upsert_requirements(payload: RequirementsPayload, student_id: str = Depends(require_student)):
    """Create or replace the record for (company_id, role); role defaults fill omitted fields"""
    requirements = build_role_requirements(**payload.dict())
    logger.info(f"Requirements for {requirements.company_id} / {requirements.role} updated by {student_id}")
    return await RequirementsService.upsert(requirements)

# models/response.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from resume_ats.models.models import SectionScore, FeedbackResult


class AnalysisResponse(BaseModel):
    analysis_id: str
    resume_id: Optional[str] = None
    company_name: str
    company_id: str
    target_role: str
    ats_score: int
    section_scores: List[SectionScore]
    matched_skills: List[str]
    missing_skills: List[str]
    matched_keywords: List[str]
    missing_keywords: List[str]
    feedback: Optional[FeedbackResult] = None
    text_warning: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class StoredAnalysis(BaseModel):
    analysis_id: str
    resume_id: Optional[str] = None
    company_name: str
    company_id: str
    target_role: str
    ats_score: int
    section_scores: List[SectionScore]
    created_at: Optional[datetime] = None


class ComparisonResponse(BaseModel):
    resume_id: str
    file_name: str
    comparisons: List[StoredAnalysis]
    total: int


class ResumeSummary(BaseModel):
    resume_id: str
    file_name: str
    created_at: Optional[datetime] = None
    text_usable: bool


class HistoryEntry(BaseModel):
    resume_id: str
    file_name: str
    created_at: Optional[datetime] = None
    analyses: List[StoredAnalysis]
    latest_score: Optional[int] = None
    total_analyses: int


class HistoryResponse(BaseModel):
    resumes: List[HistoryEntry]
    total: int


class CompanySummary(BaseModel):
    company_id: str
    company_name: str
    role: str

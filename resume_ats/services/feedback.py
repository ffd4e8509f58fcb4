"""
AI Feedback Generator

Asks the LLM for qualitative commentary on an already-computed ATS score:
rejection reasons, skill gaps, improvement steps and bullet rewrites.
The LLM never touches the numeric score. When it is disabled, unreachable
or answers with something unusable, feedback is derived from the rule-based
result instead.
"""
import os

import requests
from pydantic import ValidationError as PydanticValidationError

from resume_ats.helpers.parsing import truncate_for_prompt
from resume_ats.helpers.prompts import FEEDBACK_SYSTEM_PROMPT, FEEDBACK_USER_PROMPT
from resume_ats.models.models import (
    ATSScoreResult, CompanyRequirements, FeedbackResult, StudentContext,
    RejectionReason, SkillGap, ImprovementStep,
)
from resume_ats.utils.exceptions import ExternalServiceError, retry_with_logging
from resume_ats.utils.logging_config import get_logger
from resume_ats.utils.utils import ollama_generate, safe_json, env_flag

logger = get_logger(__name__)

FEEDBACK_TEMPERATURE = float(os.getenv("FEEDBACK_TEMPERATURE", "0.7"))
REQUIRED_KEYS = ("rejection_reasons", "skill_gap_analysis", "improvement_steps")


def feedback_enabled() -> bool:
    return env_flag("FEEDBACK_ENABLED", default=True)


def _or_none(values) -> str:
    return ", ".join(values) or "None"


def build_feedback_prompt(
    resume_text: str,
    ats_result: ATSScoreResult,
    requirements: CompanyRequirements,
    student: StudentContext,
) -> str:
    section_lines = "\n".join(
        f"- {s.name}: {s.score}/{s.max_score} ({s.details})" for s in ats_result.section_scores
    )
    user_prompt = FEEDBACK_USER_PROMPT.format(
        company_name=requirements.company_name,
        role=requirements.role,
        student_name=student.name,
        college=student.college or "Not specified",
        program=student.program or "Not specified",
        year=f"Year {student.year}" if student.year else "Not specified",
        gpa=student.gpa or "Not specified",
        known_skills=", ".join(student.technical_skills) or "Not specified",
        required_skills=", ".join(requirements.required_skills),
        keywords=", ".join(requirements.keywords),
        project_expectations=requirements.project_expectations or "Standard project work expected",
        min_experience_months=requirements.min_experience_months,
        total_score=ats_result.total_score,
        section_lines=section_lines,
        matched_skills=_or_none(ats_result.matched_skills),
        missing_skills=_or_none(ats_result.missing_skills),
        matched_keywords=_or_none(ats_result.matched_keywords),
        missing_keywords=_or_none(ats_result.missing_keywords),
        resume_text=truncate_for_prompt(resume_text),
    )
    return FEEDBACK_SYSTEM_PROMPT.format() + "\n" + user_prompt


@retry_with_logging(max_attempts=2, backoff_factor=0.5, exceptions=(requests.RequestException,), logger=logger)
def _ask_llm(prompt: str) -> str:
    return ollama_generate(prompt, temperature=FEEDBACK_TEMPERATURE, json_mode=True)


def parse_feedback(raw: str) -> FeedbackResult:
    """Validate an LLM answer; raises ExternalServiceError when it is unusable."""
    data = safe_json(raw, fallback={})
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise ExternalServiceError(
            f"LLM feedback is missing keys: {', '.join(missing)}",
            service_name="ollama",
        )
    try:
        return FeedbackResult(**{**data, "source": "llm"})
    except PydanticValidationError as e:
        raise ExternalServiceError("LLM feedback has an invalid structure", service_name="ollama", cause=e) from e


def fallback_feedback(ats_result: ATSScoreResult, requirements: CompanyRequirements) -> FeedbackResult:
    """Feedback derived from the rule-based result alone."""
    rejection_reasons = [
        RejectionReason(
            reason=f"Missing required skill: {skill}",
            severity="major",
            fix=f"Add {skill} to your resume. Consider building a project using {skill}.",
        )
        for skill in ats_result.missing_skills[:3]
    ]

    skill_gaps = [
        SkillGap(
            skill=skill,
            importance="must-have",
            current_level="missing",
            recommendation=(
                f"Learn {skill} through online courses or projects. "
                f"Add it to your skills section once proficient."
            ),
        )
        for skill in ats_result.missing_skills
    ]

    improvement_steps = [
        ImprovementStep(
            priority=1,
            area="Skills",
            action=f"Add missing skills: {', '.join(ats_result.missing_skills)}",
            expected_impact="Could improve score by 10-15 points",
            time_estimate="1-2 weeks",
        ),
        ImprovementStep(
            priority=2,
            area="Keywords",
            action=f"Include these keywords naturally: {', '.join(ats_result.missing_keywords)}",
            expected_impact="Could improve score by 5-10 points",
            time_estimate="1 day",
        ),
        ImprovementStep(
            priority=3,
            area="Projects",
            action="Add quantified outcomes to your project descriptions (e.g., '40% faster', '1000+ users')",
            expected_impact="Could improve score by 5-10 points",
            time_estimate="1 day",
        ),
    ]

    return FeedbackResult(
        rejection_reasons=rejection_reasons,
        skill_gap_analysis=skill_gaps,
        improvement_steps=improvement_steps,
        bullet_suggestions=[],
        overall_verdict=(
            f"Your resume scores {ats_result.total_score}/100 for {requirements.company_name}. "
            f"Focus on adding missing skills and quantifying your achievements to improve significantly."
        ),
        source="fallback",
    )


def generate_feedback(
    resume_text: str,
    ats_result: ATSScoreResult,
    requirements: CompanyRequirements,
    student: StudentContext = None,
) -> FeedbackResult:
    student = student or StudentContext()

    if not feedback_enabled():
        logger.debug("LLM feedback disabled, using rule-based feedback")
        return fallback_feedback(ats_result, requirements)

    prompt = build_feedback_prompt(resume_text, ats_result, requirements, student)
    try:
        raw = _ask_llm(prompt)
        if not raw.strip():
            raise ExternalServiceError("Empty response from LLM", service_name="ollama")
        feedback = parse_feedback(raw)
        logger.info(f"LLM feedback generated for {requirements.company_name}")
        return feedback
    except (requests.RequestException, ExternalServiceError) as e:
        logger.warning(f"LLM feedback failed, falling back to rule-based feedback: {e}")
        return fallback_feedback(ats_result, requirements)

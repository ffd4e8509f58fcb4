"""
ATS Scoring Engine

Rule-based resume scoring against company-specific requirements.
Scoring breakdown (100 points total):
    Skills Match   30 pts  required skills found in resume
    Keywords       20 pts  role-specific keywords detected
    Projects       20 pts  project section, tech mentions, quantified outcomes
    Experience     15 pts  experience section, durations, action verbs
    Structure      15 pts  education, skills, contact info, section count

Every function here is pure: no I/O, no shared state, no clock.
"""
from typing import List, Mapping, NamedTuple, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from resume_ats.helpers import vocabulary as vocab
from resume_ats.models.models import ATSScoreResult, CompanyRequirements, SectionScore
from resume_ats.services.text_matching import SynonymTable, normalize_text, text_contains
from resume_ats.utils.exceptions import InvalidInputError
from resume_ats.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

SKILLS_MAX = 30
KEYWORDS_MAX = 20
PROJECTS_MAX = 20
EXPERIENCE_MAX = 15
STRUCTURE_MAX = 15


class MatchOutcome(NamedTuple):
    score: int
    matched: List[str]
    missing: List[str]


def round_half_up(max_score: int, matched: int, total: int) -> int:
    """round(max_score * matched / total), halves rounded up, in exact integer arithmetic."""
    return (2 * max_score * matched + total) // (2 * total)


def _partition(resume_normalized: str, terms: List[str], max_score: int, synonyms: SynonymTable) -> MatchOutcome:
    if not terms:
        return MatchOutcome(max_score, [], [])

    matched, missing = [], []
    for term in terms:
        if text_contains(resume_normalized, term, synonyms):
            matched.append(term)
        else:
            missing.append(term)

    return MatchOutcome(round_half_up(max_score, len(matched), len(terms)), matched, missing)


def score_skills(
    resume_normalized: str,
    required_skills: List[str],
    synonyms: SynonymTable = vocab.SYNONYM_TABLE,
) -> MatchOutcome:
    """Skills Match (0-30). No required skills means full credit."""
    return _partition(resume_normalized, required_skills, SKILLS_MAX, synonyms)


def score_keywords(
    resume_normalized: str,
    keywords: List[str],
    synonyms: SynonymTable = vocab.SYNONYM_TABLE,
) -> MatchOutcome:
    """Keywords (0-20). No keywords means full credit."""
    return _partition(resume_normalized, keywords, KEYWORDS_MAX, synonyms)


def _any_present(resume_normalized: str, phrases) -> bool:
    return any(p in resume_normalized for p in phrases)


def score_projects(resume_normalized: str) -> SectionScore:
    """
    Projects (0-20), four independent checks worth 5 points each:
    project section, tech-stack mention, quantified outcome, two or more project mentions.
    """
    score = 0
    details = []

    if _any_present(resume_normalized, vocab.PROJECT_HEADERS):
        score += 5
        details.append("Project section found")
    else:
        details.append("No dedicated project section detected")

    if _any_present(resume_normalized, vocab.TECH_STACK_INDICATORS):
        score += 5
        details.append("Tech stack mentioned in projects")
    else:
        details.append("No tech stack details in projects")

    if vocab.QUANTIFIED_OUTCOME_PATTERN.search(resume_normalized):
        score += 5
        details.append("Quantified outcomes found")
    else:
        details.append("No quantified outcomes (add metrics like '30% improvement')")

    project_count = len(vocab.PROJECT_MENTION_PATTERN.findall(resume_normalized))
    if project_count >= vocab.MIN_PROJECT_MENTIONS:
        score += 5
        details.append(f"{project_count} projects detected")
    else:
        details.append("Consider adding more projects (aim for 2-3)")

    return SectionScore(name="Projects", score=score, max_score=PROJECTS_MAX, details="; ".join(details))


def score_experience(resume_normalized: str) -> SectionScore:
    """
    Experience (0-15): section (+5), durations (+5), action verbs (0/+2/+5).
    """
    score = 0
    details = []

    if _any_present(resume_normalized, vocab.EXPERIENCE_HEADERS):
        score += 5
        details.append("Experience section found")
    else:
        details.append("No experience/internship section detected")

    if vocab.DURATION_PATTERN.search(resume_normalized):
        score += 5
        details.append("Duration/dates mentioned")
    else:
        details.append("No work durations found (add dates)")

    found_verbs = [v for v in vocab.ACTION_VERBS if v in resume_normalized]
    if len(found_verbs) >= vocab.STRONG_VERB_COUNT:
        score += 5
        details.append(f"Strong action verbs used ({len(found_verbs)} found)")
    elif found_verbs:
        score += 2
        details.append(f"Few action verbs ({len(found_verbs)}). Use more: led, optimized, built...")
    else:
        details.append("No action verbs found. Start bullets with: Developed, Led, Built...")

    return SectionScore(name="Experience", score=score, max_score=EXPERIENCE_MAX, details="; ".join(details))


def score_structure(resume_normalized: str) -> SectionScore:
    """
    Structure (0-15): education (+4), skills section (+4),
    contact info (0/+2/+4), number of standard sections (0/+1/+3).
    """
    score = 0
    details = []

    if _any_present(resume_normalized, vocab.EDUCATION_INDICATORS):
        score += 4
        details.append("Education section found")
    else:
        details.append("No education section detected")

    if _any_present(resume_normalized, vocab.SKILLS_SECTION_INDICATORS):
        score += 4
        details.append("Skills section found")
    else:
        details.append("No dedicated skills section")

    contact_count = sum(1 for c in vocab.CONTACT_INDICATORS if c in resume_normalized)
    if contact_count >= vocab.FULL_CONTACT_COUNT:
        score += 4
        details.append("Contact information present")
    elif contact_count >= 1:
        score += 2
        details.append("Partial contact info (add LinkedIn/GitHub)")
    else:
        details.append("No contact information detected")

    found_sections = [s for s in vocab.STRUCTURE_SECTIONS if s in resume_normalized]
    if len(found_sections) >= vocab.WELL_STRUCTURED_COUNT:
        score += 3
        details.append(f"Well-structured ({len(found_sections)} sections)")
    elif len(found_sections) >= vocab.BASIC_STRUCTURE_COUNT:
        score += 1
        details.append(f"Basic structure ({len(found_sections)} sections). Add more sections.")
    else:
        details.append("Poor structure. Add clear section headings.")

    return SectionScore(name="Structure", score=score, max_score=STRUCTURE_MAX, details="; ".join(details))


def _coerce_requirements(requirements: Union[CompanyRequirements, Mapping, None]) -> CompanyRequirements:
    if isinstance(requirements, CompanyRequirements):
        return requirements
    if requirements is None:
        raise InvalidInputError("requirements must not be None", field="requirements")
    if not isinstance(requirements, Mapping):
        raise InvalidInputError(
            f"requirements must be CompanyRequirements or a mapping, got {type(requirements).__name__}",
            field="requirements",
        )
    try:
        return CompanyRequirements(**requirements)
    except PydanticValidationError as e:
        raise InvalidInputError(
            f"requirements failed validation: {e.errors()}",
            field="requirements",
            cause=e,
        ) from e


@log_function_call
def calculate_ats_score(
    resume_text: str,
    requirements: Union[CompanyRequirements, Mapping],
    synonyms: Optional[SynonymTable] = None,
) -> ATSScoreResult:
    """
    Score a resume against company requirements.

    Raises InvalidInputError when resume_text is not a string or the
    requirements are missing or malformed; never raises otherwise.
    """
    if not isinstance(resume_text, str):
        raise InvalidInputError(
            f"resume_text must be a string, got {type(resume_text).__name__}",
            field="resume_text",
        )
    reqs = _coerce_requirements(requirements)
    table = vocab.SYNONYM_TABLE if synonyms is None else synonyms

    resume_normalized = normalize_text(resume_text)

    skills = score_skills(resume_normalized, reqs.required_skills, table)
    keywords = score_keywords(resume_normalized, reqs.keywords, table)

    section_scores = [
        SectionScore(
            name="Skills Match",
            score=skills.score,
            max_score=SKILLS_MAX,
            details=f"Matched {len(skills.matched)}/{len(reqs.required_skills)} required skills",
        ),
        SectionScore(
            name="Keywords",
            score=keywords.score,
            max_score=KEYWORDS_MAX,
            details=f"Matched {len(keywords.matched)}/{len(reqs.keywords)} keywords",
        ),
        score_projects(resume_normalized),
        score_experience(resume_normalized),
        score_structure(resume_normalized),
    ]
    total_score = sum(s.score for s in section_scores)

    logger.debug(
        f"ATS score for {reqs.company_name} / {reqs.role}: {total_score}",
        extra={"company_id": reqs.company_id, "total_score": total_score},
    )

    return ATSScoreResult(
        total_score=total_score,
        section_scores=section_scores,
        matched_skills=skills.matched,
        missing_skills=skills.missing,
        matched_keywords=keywords.matched,
        missing_keywords=keywords.missing,
    )

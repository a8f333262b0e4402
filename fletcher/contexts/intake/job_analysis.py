"""
Job analysis data structure for the Intake context.

JobAnalysis is the structured representation of a job posting's requirements,
produced by an external LLM extraction call and validated here at the boundary.
It is immutable input to scoring and assembly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from fletcher.contexts.intake.logger import _log_debug, _log_error, _log_info
from fletcher.contexts.intake.prompts import JD_ANALYSIS_SYSTEM_PROMPT, jd_analysis_prompt
from fletcher.contexts.templating.resume_data_structure import MasterRecord
from fletcher.utils.exceptions import JobAnalysisError
from fletcher.utils.llm import LLMProvider, complete, parse_json_object

SENIORITY_LEVELS = ("junior", "mid", "senior", "staff", "principal", "unknown")
DOMAIN_FITS = ("strong", "moderate", "weak", "mismatch")
SKILL_CATEGORIES = ("EXACT", "ADJACENT", "LEARNABLE", "DOMAIN_CHANGE")
SKILL_PRIORITIES = ("must-have", "nice-to-have")

# Categories the candidate already covers (directly or trivially)
MATCHED_CATEGORIES = frozenset({"EXACT", "ADJACENT"})


def _field(data: Mapping[str, Any], key: str, expected: type, where: str) -> Any:
    if key not in data:
        raise JobAnalysisError(f"Job analysis is missing field '{where}{key}'")
    value = data[key]
    if not isinstance(value, expected):
        raise JobAnalysisError(
            f"Job analysis field '{where}{key}' must be {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _enum(data: Mapping[str, Any], key: str, allowed: Tuple[str, ...], where: str = "") -> str:
    value = _field(data, key, str, where)
    if value not in allowed:
        raise JobAnalysisError(
            f"Job analysis field '{where}{key}' has invalid value '{value}'",
            hint=f"Expected one of: {', '.join(allowed)}",
        )
    return value


def _strings(data: Mapping[str, Any], key: str) -> Tuple[str, ...]:
    values = _field(data, key, list, "")
    for i, value in enumerate(values):
        if not isinstance(value, str):
            raise JobAnalysisError(f"Job analysis field '{key}[{i}]' must be str")
    return tuple(values)


@dataclass(frozen=True)
class SkillAssessment:
    """
    One required skill and how it relates to the candidate.

    Attributes:
        skill: Skill name as written in the job description
        category: EXACT, ADJACENT, LEARNABLE or DOMAIN_CHANGE
        reason: Why this classification was chosen
        priority: must-have or nice-to-have
    """

    skill: str
    category: str
    reason: str
    priority: str

    @property
    def is_matched(self) -> bool:
        return self.category in MATCHED_CATEGORIES

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "SkillAssessment":
        where = f"skills[{index}]."
        if not isinstance(data, Mapping):
            raise JobAnalysisError(f"Job analysis entry 'skills[{index}]' must be an object")
        return cls(
            skill=_field(data, "skill", str, where),
            category=_enum(data, "category", SKILL_CATEGORIES, where),
            reason=_field(data, "reason", str, where),
            priority=_enum(data, "priority", SKILL_PRIORITIES, where),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "skill": self.skill,
            "category": self.category,
            "reason": self.reason,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class JobAnalysis:
    """
    Structured job requirements extracted from a job description.

    Wire format is the camelCase JSON object returned by the extraction service.
    """

    title: str
    company: str
    seniority: str
    domain: str
    domain_fit: str
    domain_fit_reason: str = ""
    skills: Tuple[SkillAssessment, ...] = field(default_factory=tuple)
    key_terminology: Tuple[str, ...] = field(default_factory=tuple)
    emphasis_areas: Tuple[str, ...] = field(default_factory=tuple)
    summary_recommendation: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "JobAnalysis":
        """
        Validate an extraction payload and build a JobAnalysis.

        Raises:
            JobAnalysisError: If any field is missing, mistyped or outside its enum
        """
        if not isinstance(data, Mapping):
            raise JobAnalysisError(
                f"Job analysis must be a JSON object, got {type(data).__name__}"
            )
        raw_skills = _field(data, "skills", list, "")
        return cls(
            title=_field(data, "title", str, ""),
            company=_field(data, "company", str, ""),
            seniority=_enum(data, "seniority", SENIORITY_LEVELS),
            domain=_field(data, "domain", str, ""),
            domain_fit=_enum(data, "domainFit", DOMAIN_FITS),
            domain_fit_reason=_field(data, "domainFitReason", str, ""),
            skills=tuple(SkillAssessment.from_dict(s, i) for i, s in enumerate(raw_skills)),
            key_terminology=_strings(data, "keyTerminology"),
            emphasis_areas=_strings(data, "emphasisAreas"),
            summary_recommendation=_field(data, "summaryRecommendation", str, ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the extraction wire format."""
        return {
            "title": self.title,
            "company": self.company,
            "seniority": self.seniority,
            "domain": self.domain,
            "domainFit": self.domain_fit,
            "domainFitReason": self.domain_fit_reason,
            "skills": [s.to_dict() for s in self.skills],
            "keyTerminology": list(self.key_terminology),
            "emphasisAreas": list(self.emphasis_areas),
            "summaryRecommendation": self.summary_recommendation,
        }

    def matched_skill_names(self) -> List[str]:
        """Lowercased names of EXACT and ADJACENT skills, in payload order."""
        return [s.skill.lower() for s in self.skills if s.is_matched]


def parse_job_analysis(raw: str) -> JobAnalysis:
    """
    Parse and validate a raw extraction response.

    The response may be wrapped in a markdown code fence.

    Raises:
        JobAnalysisError: On malformed JSON or schema mismatch
    """
    try:
        payload = parse_json_object(raw)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        raise JobAnalysisError("Failed to parse job analysis response", hint=str(e)) from e
    return JobAnalysis.from_dict(payload)


def candidate_skills(master: MasterRecord) -> List[str]:
    """Unique skill items of the master record, first occurrence order."""
    return list(dict.fromkeys(master.all_skill_items()))


def analyze_job(
    text: str,
    skills: List[str],
    provider: Optional[LLMProvider] = None,
) -> JobAnalysis:
    """
    Extract a JobAnalysis from a raw job description via the LLM.

    Args:
        text: Raw job description text
        skills: Candidate skills included in the prompt for classification
        provider: LLM provider (default: from environment)

    Returns:
        Validated JobAnalysis

    Raises:
        JobAnalysisError: If the request fails or the response cannot be parsed or validated
    """
    _log_info(f"Analyzing job description ({len(text)} chars)")
    try:
        raw = complete(
            jd_analysis_prompt(text, skills),
            provider=provider,
            system_prompt=JD_ANALYSIS_SYSTEM_PROMPT,
        )
    except Exception as e:
        _log_error(f"Analysis request failed: {e}")
        raise JobAnalysisError("Job analysis request failed", hint=str(e)) from e
    try:
        analysis = parse_job_analysis(raw)
    except JobAnalysisError as e:
        _log_error(f"Invalid analysis payload: {e.message}")
        _log_debug(f"Raw response: {raw}")
        raise
    _log_info(f"Analysis: {analysis.title} at {analysis.company} ({len(analysis.skills)} skills)")
    return analysis

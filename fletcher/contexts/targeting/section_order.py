"""
Section Order Advisor

Reorders résumé sections for a job analysis. The base weights and keyword
associations are configuration constants, kept as literal read-only tables:

    section     | Frontend Web Development | Full-Stack | Backend | default
    ------------|--------------------------|------------|---------|--------
    experience  | 3                        | 3          | 2       | 3
    projects    | 2                        | 2          | 1       | 2
    skills      | -                        | -          | -       | 1
    education   | -                        | -          | -       | 0

A section scores its base weight (by domain, else its default, else 0), +1 when
an emphasis area mentions one of its keywords, and experience gets +1 more for
senior, staff and principal roles.
"""

from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from fletcher.contexts.intake.job_analysis import JobAnalysis

SECTION_WEIGHTS: Mapping[Tuple[str, str], int] = MappingProxyType(
    {
        ("experience", "Frontend Web Development"): 3,
        ("experience", "Full-Stack"): 3,
        ("experience", "Backend"): 2,
        ("projects", "Frontend Web Development"): 2,
        ("projects", "Full-Stack"): 2,
        ("projects", "Backend"): 1,
    }
)

SECTION_DEFAULT_WEIGHTS: Mapping[str, int] = MappingProxyType(
    {
        "experience": 3,
        "projects": 2,
        "skills": 1,
        "education": 0,
    }
)

SECTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "experience": ("experience", "track record"),
        "projects": ("project", "portfolio"),
        "skills": ("skill", "technical"),
        "education": ("degree", "education"),
    }
)

SENIOR_LEVELS = frozenset({"senior", "staff", "principal"})


def section_score(section: str, analysis: JobAnalysis) -> int:
    """Score one section name for the given job analysis."""
    score = SECTION_WEIGHTS.get(
        (section, analysis.domain), SECTION_DEFAULT_WEIGHTS.get(section, 0)
    )

    keywords = SECTION_KEYWORDS.get(section, ())
    emphasis = [area.lower() for area in analysis.emphasis_areas]
    if any(keyword in area for area in emphasis for keyword in keywords):
        score += 1

    if section == "experience" and analysis.seniority in SENIOR_LEVELS:
        score += 1

    return score


def suggest_section_order(sections: Sequence[str], analysis: JobAnalysis) -> List[str]:
    """
    Reorder sections by descending score.

    Never drops or adds a section; ties keep their input order, so applying
    this to its own output returns the same list.

    Example:
        >>> suggest_section_order(["skills", "experience"], backend_senior_analysis)
        ['experience', 'skills']
    """
    return sorted(sections, key=lambda section: -section_score(section, analysis))

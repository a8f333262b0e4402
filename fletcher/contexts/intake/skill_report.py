"""
Skill report: groups a job analysis' skill assessments by classification.
"""

from dataclasses import dataclass
from typing import Tuple

from fletcher.contexts.intake.job_analysis import JobAnalysis, SkillAssessment
from fletcher.utils.report_formatter import percent


@dataclass(frozen=True)
class SkillReport:
    """
    Skill assessments grouped by classification.

    Attributes:
        match_score: Percentage of must-have skills classified EXACT or ADJACENT
            (0 when the analysis lists no must-have skills)
    """

    exact: Tuple[SkillAssessment, ...]
    adjacent: Tuple[SkillAssessment, ...]
    learnable: Tuple[SkillAssessment, ...]
    domain_change: Tuple[SkillAssessment, ...]
    match_score: int


def build_skill_report(analysis: JobAnalysis) -> SkillReport:
    """Group the analysis' skills and compute must-have coverage."""

    def by_category(category: str) -> Tuple[SkillAssessment, ...]:
        return tuple(s for s in analysis.skills if s.category == category)

    must_haves = [s for s in analysis.skills if s.priority == "must-have"]
    covered = [s for s in must_haves if s.is_matched]

    return SkillReport(
        exact=by_category("EXACT"),
        adjacent=by_category("ADJACENT"),
        learnable=by_category("LEARNABLE"),
        domain_change=by_category("DOMAIN_CHANGE"),
        match_score=percent(len(covered), len(must_haves)),
    )

"""
Targeting Context

Responsibilities:
- Scores how well each profile fits a job analysis
- Determines section ordering for the target job
- Rewrites selected bullets and the summary toward the job's terminology

Owns: Profile scoring, section ordering tables, rewrite prompts
Never: Writes files or renders LaTeX
"""

from fletcher.contexts.targeting.profile_scorer import (
    DEFAULT_WEIGHTS,
    ScoreResult,
    ScoringWeights,
    score_profile,
    score_profiles,
)
from fletcher.contexts.targeting.section_order import section_score, suggest_section_order

__all__ = [
    # Profile scoring
    "score_profile",
    "score_profiles",
    "ScoreResult",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    # Section ordering
    "section_score",
    "suggest_section_order",
]

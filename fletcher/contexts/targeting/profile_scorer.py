"""
Profile Scorer

Heuristic fit score of a profile against a job analysis. Pure: no I/O, no side
effects, never raises for content (absent or empty inputs score 0).

Three sub-scores:
    skill coverage   - EXACT/ADJACENT job skills found among the profile's skill items
    tag overlap      - emphasis areas found among the tags of the profile's bullets
    bullet relevance - profile bullets mentioning key terminology or tagged with a job skill

Sub-score ratios are kept as exact fractions; rounding happens only when a value
is reported, so the weighted total is computed from unrounded ratios.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Iterator, List, Sequence

from fletcher.contexts.intake.job_analysis import JobAnalysis
from fletcher.contexts.templating.resume_data_structure import Bullet, MasterRecord, Profile
from fletcher.utils.report_formatter import ratio, round_half_up


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the three sub-scores; must sum to 1."""

    skill_coverage: Fraction = Fraction(2, 5)
    tag_overlap: Fraction = Fraction(3, 10)
    bullet_relevance: Fraction = Fraction(3, 10)

    def __post_init__(self):
        total = self.skill_coverage + self.tag_overlap + self.bullet_relevance
        if total != 1:
            raise ValueError(
                "Scoring weights must sum to 1. "
                f"Got {float(total):.6f} (skill_coverage={self.skill_coverage}, "
                f"tag_overlap={self.tag_overlap}, bullet_relevance={self.bullet_relevance})."
            )


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ScoreResult:
    """
    Fit score of one profile.

    Attributes:
        profile_name: Scored profile
        total_score: Weighted total, integer 0-100
        skill_coverage: Integer percent 0-100
        tag_overlap: Integer percent 0-100
        bullet_relevance: Integer percent 0-100
        breakdown: Human-readable summary of the three sub-scores
    """

    profile_name: str
    total_score: int
    skill_coverage: int
    tag_overlap: int
    bullet_relevance: int
    breakdown: str


def substring_match(a: str, b: str) -> bool:
    """Bidirectional substring match (both arguments expected lowercase)."""
    return a in b or b in a


def matches_any(term: str, candidates: Iterable[str]) -> bool:
    return any(substring_match(term, candidate) for candidate in candidates)


def included_bullets(profile: Profile, master: MasterRecord) -> Iterator[Bullet]:
    """
    Yield the experience bullets a profile includes, in master order per entry.

    Dangling experience ids and bullet ids are skipped.
    """
    for selection in profile.experience:
        entry = master.find_experience(selection.id)
        if entry is None:
            continue
        wanted = set(selection.bullets)
        for bullet in entry.bullets:
            if bullet.id in wanted:
                yield bullet


def _skill_coverage(profile: Profile, job_skills: Sequence[str], master: MasterRecord) -> Fraction:
    selected = set(profile.skills)
    profile_items = [
        item.lower() for category in master.skills if category.id in selected
        for item in category.items
    ]
    matched = [skill for skill in job_skills if matches_any(skill, profile_items)]
    return ratio(len(matched), len(job_skills))


def _tag_overlap(bullets: Sequence[Bullet], analysis: JobAnalysis) -> Fraction:
    tags = {tag.lower() for bullet in bullets for tag in bullet.tags}
    emphasis = [area.lower() for area in analysis.emphasis_areas]
    matched = [area for area in emphasis if matches_any(area, tags)]
    return ratio(len(matched), len(emphasis))


def _bullet_relevance(
    bullets: Sequence[Bullet], analysis: JobAnalysis, job_skills: Sequence[str]
) -> Fraction:
    key_terms = [term.lower() for term in analysis.key_terminology]

    def is_relevant(bullet: Bullet) -> bool:
        text = bullet.text.lower()
        if any(term in text for term in key_terms):
            return True
        return any(matches_any(tag.lower(), job_skills) for tag in bullet.tags)

    relevant = [bullet for bullet in bullets if is_relevant(bullet)]
    return ratio(len(relevant), len(bullets))


def score_profile(
    profile: Profile,
    analysis: JobAnalysis,
    master: MasterRecord,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreResult:
    """
    Score how well a profile fits a job analysis.

    Args:
        profile: Profile to score
        analysis: Extracted job requirements
        master: Master record the profile is a view over
        weights: Sub-score weights (default: 0.4 / 0.3 / 0.3)

    Returns:
        ScoreResult with integer sub-scores and total in [0, 100]
    """
    job_skills = analysis.matched_skill_names()
    bullets = list(included_bullets(profile, master))

    coverage = _skill_coverage(profile, job_skills, master)
    overlap = _tag_overlap(bullets, analysis)
    relevance = _bullet_relevance(bullets, analysis, job_skills)

    total = round_half_up(
        100
        * (
            weights.skill_coverage * coverage
            + weights.tag_overlap * overlap
            + weights.bullet_relevance * relevance
        )
    )
    coverage_pct = round_half_up(100 * coverage)
    overlap_pct = round_half_up(100 * overlap)
    relevance_pct = round_half_up(100 * relevance)

    return ScoreResult(
        profile_name=profile.name,
        total_score=total,
        skill_coverage=coverage_pct,
        tag_overlap=overlap_pct,
        bullet_relevance=relevance_pct,
        breakdown=f"Skills: {coverage_pct}% | Emphasis: {overlap_pct}% | Bullets: {relevance_pct}%",
    )


def score_profiles(
    profiles: Iterable[Profile],
    analysis: JobAnalysis,
    master: MasterRecord,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> List[ScoreResult]:
    """
    Score every profile and rank by descending total score.

    Ties keep the input order.
    """
    results = [score_profile(p, analysis, master, weights) for p in profiles]
    return sorted(results, key=lambda r: r.total_score, reverse=True)

"""
Prompt templates for bullet and summary rewriting.
"""

from typing import Sequence

NO_EM_DASH_RULE = (
    "NEVER use em-dashes (—) in the text. The only acceptable use of dashes is "
    "en-dashes (–) for date ranges (e.g., \"2022–2024\"). Use commas, semicolons, "
    "colons, or restructure the sentence instead."
)

_BULLET_REWRITE_TEMPLATE = """\
You are a resume bullet point optimizer. Rewrite this bullet to better match the target job.

Original bullet:
"{bullet}"

Key terminology to incorporate (where naturally fitting): {terminology}
Emphasis areas: {emphasis}

Rules:
1. NEVER fabricate experience - only rephrase existing accomplishments
2. Keep quantified metrics (numbers, percentages) exactly as-is
3. Mirror the job description's language where it naturally fits
4. Maintain the STAR format (Situation/Task -> Action -> Result)
5. Keep it to 1-2 lines max
6. Start with a strong action verb
7. {no_em_dash}

Return ONLY the rewritten bullet text, nothing else."""

_SUMMARY_REFINEMENT_TEMPLATE = """\
Refine this resume summary for a "{title}" position.

Current summary:
"{summary}"

Key emphasis: {emphasis}
Terminology to mirror: {terminology}

Rules:
1. Keep it to 2-3 sentences
2. Mirror the job description's language naturally
3. Never claim experience you don't have
4. Focus on the strongest relevant qualifications
5. {no_em_dash}

Return ONLY the refined summary text."""


def bullet_rewrite_prompt(
    bullet: str, terminology: Sequence[str], emphasis: Sequence[str]
) -> str:
    return _BULLET_REWRITE_TEMPLATE.format(
        bullet=bullet,
        terminology=", ".join(terminology),
        emphasis=", ".join(emphasis),
        no_em_dash=NO_EM_DASH_RULE,
    )


def summary_refinement_prompt(
    summary: str, title: str, emphasis: Sequence[str], terminology: Sequence[str]
) -> str:
    return _SUMMARY_REFINEMENT_TEMPLATE.format(
        summary=summary,
        title=title,
        emphasis=", ".join(emphasis),
        terminology=", ".join(terminology),
        no_em_dash=NO_EM_DASH_RULE,
    )

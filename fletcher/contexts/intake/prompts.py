"""
Prompt templates for job description analysis.
"""

from typing import List

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

JD_ANALYSIS_SYSTEM_PROMPT = """\
You are a resume optimization expert. You analyze job descriptions and return
strictly structured JSON. Return ONLY the JSON object, with no prose."""

_JD_ANALYSIS_TEMPLATE = """\
Analyze this job description and return structured JSON.

The candidate has these skills: {skills}

Job Description:
---
{jd}
---

Return ONLY valid JSON matching this exact schema:
{{
  "title": "string - job title",
  "company": "string - company name (or 'Unknown' if not found)",
  "seniority": "junior|mid|senior|staff|principal|unknown",
  "domain": "string - primary domain (e.g., 'Frontend Web Development', 'Full-Stack', 'Backend')",
  "domainFit": "strong|moderate|weak|mismatch",
  "domainFitReason": "string - brief explanation of domain fit assessment",
  "skills": [
    {{
      "skill": "string - skill name from JD",
      "category": "EXACT|ADJACENT|LEARNABLE|DOMAIN_CHANGE",
      "reason": "string - why this classification",
      "priority": "must-have|nice-to-have"
    }}
  ],
  "keyTerminology": ["string - key terms/phrases from JD to mirror in resume"],
  "emphasisAreas": ["string - what the JD emphasizes most"],
  "summaryRecommendation": "string - recommended focus for resume summary"
}}

Classification rules for skills:
- EXACT: Candidate already has this exact skill
- ADJACENT: Same ecosystem, trivially learnable (e.g., React dev -> Next.js, Zustand)
- LEARNABLE: Same domain, reasonable stretch (e.g., React -> Vue.js)
- DOMAIN_CHANGE: Completely different stack (e.g., Frontend -> Java/Spring Boot)

Be thorough - extract ALL skills mentioned. Mark clearly whether must-have or nice-to-have."""


def jd_analysis_prompt(jd: str, skills: List[str]) -> str:
    """
    Build the extraction prompt for a job description.

    Args:
        jd: Raw job description text
        skills: Candidate skills used for EXACT/ADJACENT classification

    Returns:
        Prompt text
    """
    return _JD_ANALYSIS_TEMPLATE.format(skills=", ".join(skills), jd=jd)

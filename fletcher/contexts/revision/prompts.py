"""
Prompt template for free-form revisions of a generated LaTeX résumé.
"""

from typing import Optional

# Characters of job description context included in a revision prompt
MAX_CONTEXT_CHARS = 3000

REVISE_SYSTEM_PROMPT = """\
You are a resume LaTeX editor. You receive a resume in LaTeX format and the
user's revision instructions. Make ONLY the changes the user requested. Do not
alter formatting, layout commands, or any content the user didn't mention.
NEVER use em-dashes (—) in the content. The only acceptable use of dashes is
en-dashes (–) for date ranges (e.g., "2022–2024"). Return the complete revised
LaTeX document, nothing else: no markdown fences, no explanation."""

_REVISE_TEMPLATE = """\
{context}Current resume LaTeX:
---
{source}
---

User's revision instructions: {instruction}"""


def revise_prompt(source: str, instruction: str, requirement_context: Optional[str] = None) -> str:
    """
    Build the revision prompt.

    Args:
        source: Current LaTeX source
        instruction: User's revision request
        requirement_context: Optional job description text (truncated)

    Returns:
        Prompt text
    """
    context = ""
    if requirement_context:
        context = (
            "Job description context:\n---\n"
            f"{requirement_context[:MAX_CONTEXT_CHARS]}\n---\n\n"
        )
    return _REVISE_TEMPLATE.format(context=context, source=source, instruction=instruction)

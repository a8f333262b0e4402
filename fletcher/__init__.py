"""
FLETCHER - Fit-Led Editing and Tailoring of Candidate History for Employer Requirements

Tailors a candidate's master résumé record to a target job description and
typesets the result with LaTeX.

Architecture:
- Intake Context: Job description analysis and skill classification
- Targeting Context: Profile scoring, section ordering and bullet rewriting
- Templating Context: Résumé data model, document assembly and LaTeX generation
- Rendering Context: PDF compilation
- Revision Context: Interactive revise/compile/rollback loop
"""

__version__ = "0.1.0"

"""
Intake Context

Responsibilities:
- Extracts a structured job analysis from raw job description text via the LLM
- Validates the extracted payload at the boundary (never silently defaulted)
- Summarizes skill classifications into a skill report

Owns: Job analysis data structure, extraction prompt, skill report
Never: Makes targeting decisions or touches LaTeX
"""

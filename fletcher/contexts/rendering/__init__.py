"""
Rendering Context

Responsibilities:
- Compiles LaTeX to PDF
- Validates compilation success
- Handles LaTeX errors and provides diagnostic information

Owns: LaTeX compilation, PDF generation
Never: Modifies template content
"""

"""
Templating Context

Responsibilities:
- Manages résumé data representation (master record, profiles, document model)
- Assembles a render-ready document from a profile plus overrides
- Escapes user text and populates the LaTeX templates

Owns: Résumé data structures, assembly, escaping, LaTeX template system
Never: Makes content prioritization decisions or invokes the compiler
"""

from fletcher.contexts.templating.assembler import AssemblyOverrides, assemble
from fletcher.contexts.templating.latex_escaper import ensure_scheme, escape_latex, escape_url
from fletcher.contexts.templating.latex_generator import render_resume
from fletcher.contexts.templating.resume_data_structure import (
    DocumentModel,
    MasterRecord,
    Profile,
)

__all__ = [
    # Assembly
    "assemble",
    "AssemblyOverrides",
    # Rendering to LaTeX source
    "render_resume",
    "escape_latex",
    "escape_url",
    "ensure_scheme",
    # Data structure classes
    "MasterRecord",
    "Profile",
    "DocumentModel",
]

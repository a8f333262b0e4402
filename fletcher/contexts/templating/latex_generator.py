"""
LaTeX Generator

Converts a DocumentModel to LaTeX source.

Every user-authored fragment is escaped here, exactly once, before it is handed
to a template; templates only arrange already-escaped text.
"""

from typing import Any, Callable, Dict, List, Optional

from fletcher.contexts.templating.latex_escaper import ensure_scheme, escape_latex, escape_url
from fletcher.contexts.templating.logger import _log_debug
from fletcher.contexts.templating.registries import TemplateRegistry
from fletcher.contexts.templating.resume_data_structure import DocumentModel
from fletcher.utils.exceptions import DocumentShapeError
from fletcher.utils.text_processing import set_max_consecutive_blank_lines


def _date_range(start: Optional[str], end: Optional[str]) -> str:
    """Escaped 'start -- end', or whichever side is present."""
    parts = [escape_latex(d) for d in (start, end) if d]
    return " -- ".join(parts)


class DocumentToLaTeXConverter:
    """Converts a DocumentModel to a complete LaTeX document."""

    def __init__(self, template_registry: TemplateRegistry = None):
        self.template_registry = template_registry or TemplateRegistry()

        # Section name -> converter; None means "nothing to render"
        self.section_converters: Dict[str, Callable[[DocumentModel], Optional[str]]] = {
            "summary": self.convert_summary,
            "experience": self.convert_experience,
            "projects": self.convert_projects,
            "education": self.convert_education,
            "skills": self.convert_skills,
        }

    def _render(self, template_name: str, **context: Any) -> str:
        return self.template_registry.get_template(template_name).render(**context).rstrip("\n")

    def convert_header(self, model: DocumentModel) -> str:
        """
        Generate the name and contact line.

        Phone is plain text; every other contact is a hyperlink whose target is
        URL-escaped and whose label is text-escaped.
        """
        contacts = []
        for field_name, value in model.contact_fields().items():
            if not value:
                continue
            if field_name == "phone":
                contacts.append({"url": None, "label": escape_latex(value)})
            elif field_name == "email":
                contacts.append(
                    {"url": escape_url(f"mailto:{value}"), "label": escape_latex(value)}
                )
            else:
                contacts.append(
                    {"url": escape_url(ensure_scheme(value)), "label": escape_latex(value)}
                )

        return self._render("header", name=escape_latex(model.name), contacts=contacts)

    def convert_summary(self, model: DocumentModel) -> Optional[str]:
        if not model.summary or not model.summary.strip():
            return None
        return self._render("summary", summary=escape_latex(model.summary))

    def convert_experience(self, model: DocumentModel) -> Optional[str]:
        if not model.experience:
            return None
        entries = [
            {
                "title": escape_latex(exp.title),
                "dates": _date_range(exp.start_date, exp.end_date),
                "organization": escape_latex(exp.organization),
                "location": escape_latex(exp.location),
                "bullets": [escape_latex(b.text) for b in exp.bullets],
            }
            for exp in model.experience
        ]
        return self._render("experience", entries=entries)

    def convert_projects(self, model: DocumentModel) -> Optional[str]:
        if not model.projects:
            return None
        projects = []
        for project in model.projects:
            heading = rf"\textbf{{{escape_latex(project.name)}}}"
            if project.url:
                heading = rf"\href{{{escape_url(ensure_scheme(project.url))}}}{{{heading}}}"
            if project.technologies:
                technologies = escape_latex(", ".join(project.technologies))
                heading += rf" $|$ \emph{{\small {technologies}}}"
            projects.append(
                {
                    "heading": heading,
                    "dates": _date_range(project.start_date, project.end_date),
                    "bullets": [escape_latex(b.text) for b in project.bullets],
                }
            )
        return self._render("projects", projects=projects)

    def convert_education(self, model: DocumentModel) -> Optional[str]:
        if not model.education:
            return None
        entries = [
            {
                "institution": escape_latex(edu.institution),
                "dates": _date_range(edu.start_date, edu.end_date),
                "degree": escape_latex(edu.degree),
                "location": escape_latex(edu.location),
            }
            for edu in model.education
        ]
        return self._render("education", entries=entries)

    def convert_skills(self, model: DocumentModel) -> Optional[str]:
        categories = [
            {"label": escape_latex(cat.category), "skills": escape_latex(", ".join(cat.items))}
            for cat in model.skills
            if cat.items
        ]
        if not categories:
            return None
        return self._render("skills", categories=categories)

    def generate_document(self, model: DocumentModel) -> str:
        """
        Generate the complete LaTeX document.

        Sections follow model.sections; unknown names and sections with nothing
        to show are skipped.
        """
        if not isinstance(model, DocumentModel):
            raise DocumentShapeError(
                f"model must be a DocumentModel, got {type(model).__name__}"
            )

        sections: List[str] = []
        for name in model.sections:
            converter = self.section_converters.get(name)
            if converter is None:
                _log_debug(f"Skipping unknown section '{name}'")
                continue
            rendered = converter(model)
            if rendered is None:
                _log_debug(f"Skipping empty section '{name}'")
                continue
            sections.append(rendered)

        document = self._render("resume", header=self.convert_header(model), sections=sections)
        return set_max_consecutive_blank_lines(document, max_consecutive=1) + "\n"


def render_resume(model: DocumentModel, template_registry: TemplateRegistry = None) -> str:
    """
    Render a DocumentModel to LaTeX source.

    Deterministic: the same model always yields byte-identical output.
    """
    return DocumentToLaTeXConverter(template_registry).generate_document(model)

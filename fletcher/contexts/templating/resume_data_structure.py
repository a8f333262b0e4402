"""
Resume Data Structures

Defines the candidate fact base (MasterRecord), curated views over it (Profile)
and the fully-resolved, render-ready DocumentModel.

Master entities live in flat, id-keyed collections. Profiles hold id lists only,
never object references, so stale or reordered master data produces missed
lookups rather than dangling pointers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fletcher.utils.exceptions import InvalidRecordError

DEFAULT_SECTIONS = ["education", "experience", "projects", "skills"]


def _require(data: Mapping[str, Any], key: str, kind: str) -> Any:
    """Fetch a required field, raising InvalidRecordError if missing or None."""
    if not isinstance(data, Mapping):
        raise InvalidRecordError(f"{kind} must be a mapping, got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        raise InvalidRecordError(f"{kind} is missing required field '{key}'")
    return value


def _string_list(value: Any, field_name: str, kind: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidRecordError(f"{kind}.{field_name} must be a list of strings")
    return [str(item) for item in value]


def _check_unique_ids(entities: Iterable[Any], kind: str) -> None:
    seen = set()
    for entity in entities:
        if entity.id in seen:
            raise InvalidRecordError(f"Duplicate {kind} id '{entity.id}'")
        seen.add(entity.id)


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


# ============================================================================
# Master record entities
# ============================================================================


@dataclass
class Bullet:
    """
    A single tagged accomplishment statement.

    Attributes:
        id: Stable identifier (text may be overridden without changing identity)
        text: Statement text
        tags: Lowercase relevance tags
    """

    id: str
    text: str
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Bullet":
        return cls(
            id=str(_require(data, "id", "bullet")),
            text=str(_require(data, "text", "bullet")),
            tags=[tag.lower() for tag in _string_list(data.get("tags"), "tags", "bullet")],
        )


@dataclass
class SummaryVariant:
    """One interchangeable professional summary."""

    id: str
    text: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SummaryVariant":
        return cls(
            id=str(_require(data, "id", "summary")),
            text=str(_require(data, "text", "summary")),
        )


def _bullets(data: Mapping[str, Any], kind: str) -> List[Bullet]:
    raw = data.get("bullets") or []
    if not isinstance(raw, Iterable) or isinstance(raw, (str, Mapping)):
        raise InvalidRecordError(f"{kind}.bullets must be a list")
    bullets = [Bullet.from_dict(item) for item in raw]
    _check_unique_ids(bullets, f"{kind} bullet")
    return bullets


@dataclass
class Experience:
    """Work experience entry with an ordered list of bullets."""

    id: str
    organization: str
    title: str
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    bullets: List[Bullet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Experience":
        return cls(
            id=str(_require(data, "id", "experience")),
            organization=str(_require(data, "organization", "experience")),
            title=str(_require(data, "title", "experience")),
            location=str(data.get("location") or ""),
            start_date=str(data.get("start_date") or ""),
            end_date=str(data.get("end_date") or ""),
            bullets=_bullets(data, "experience"),
        )


@dataclass
class Project:
    """Project entry; technologies double as its tag list."""

    id: str
    name: str
    technologies: List[str] = field(default_factory=list)
    bullets: List[Bullet] = field(default_factory=list)
    url: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            id=str(_require(data, "id", "project")),
            name=str(_require(data, "name", "project")),
            technologies=_string_list(data.get("technologies"), "technologies", "project"),
            bullets=_bullets(data, "project"),
            url=_opt_str(data.get("url")),
            start_date=_opt_str(data.get("start_date")),
            end_date=_opt_str(data.get("end_date")),
        )


@dataclass
class Education:
    """Education entry."""

    id: str
    institution: str
    degree: str
    location: str = ""
    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            id=str(_require(data, "id", "education")),
            institution=str(_require(data, "institution", "education")),
            degree=str(_require(data, "degree", "education")),
            location=str(data.get("location") or ""),
            start_date=str(data.get("start_date") or ""),
            end_date=str(data.get("end_date") or ""),
        )


@dataclass
class SkillCategory:
    """Labelled, ordered list of skills."""

    id: str
    category: str
    items: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillCategory":
        return cls(
            id=str(_require(data, "id", "skill category")),
            category=str(_require(data, "category", "skill category")),
            items=_string_list(data.get("items"), "items", "skill category"),
        )


@dataclass
class MasterRecord:
    """
    The candidate's complete fact base.

    Ids are unique within their entity kind and are the only stable
    cross-reference key.
    """

    name: str
    email: str = ""
    phone: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    summaries: List[SummaryVariant] = field(default_factory=list)
    experience: List[Experience] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[SkillCategory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MasterRecord":
        """
        Build a MasterRecord from a plain dict (e.g. a loaded YAML file).

        Raises:
            InvalidRecordError: On missing identity fields, wrong container
                types or duplicate ids within an entity kind
        """
        record = cls(
            name=str(_require(data, "name", "master record")),
            email=str(data.get("email") or ""),
            phone=str(data.get("phone") or ""),
            linkedin=_opt_str(data.get("linkedin")),
            github=_opt_str(data.get("github")),
            website=_opt_str(data.get("website")),
            summaries=[SummaryVariant.from_dict(s) for s in data.get("summary") or []],
            experience=[Experience.from_dict(e) for e in data.get("experience") or []],
            projects=[Project.from_dict(p) for p in data.get("projects") or []],
            education=[Education.from_dict(e) for e in data.get("education") or []],
            skills=[SkillCategory.from_dict(s) for s in data.get("skills") or []],
        )
        _check_unique_ids(record.summaries, "summary")
        _check_unique_ids(record.experience, "experience")
        _check_unique_ids(record.projects, "project")
        _check_unique_ids(record.education, "education")
        _check_unique_ids(record.skills, "skill category")
        return record

    def find_summary(self, summary_id: str) -> Optional[SummaryVariant]:
        return next((s for s in self.summaries if s.id == summary_id), None)

    def find_experience(self, experience_id: str) -> Optional[Experience]:
        return next((e for e in self.experience if e.id == experience_id), None)

    def all_skill_items(self) -> List[str]:
        """Every skill string across all categories, in master order."""
        return [item for category in self.skills for item in category.items]


# ============================================================================
# Profiles
# ============================================================================


@dataclass
class EntrySelection:
    """Reference to an experience or project entry plus the bullet ids to show."""

    id: str
    bullets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EntrySelection":
        return cls(
            id=str(_require(data, "id", "profile entry")),
            bullets=_string_list(data.get("bullets"), "bullets", "profile entry"),
        )


@dataclass
class Profile:
    """
    A named, curated view over a MasterRecord.

    Every referenced id should exist in the paired master record, but dangling
    references are tolerated and dropped at assembly time.
    """

    name: str
    description: str = ""
    summary: Optional[str] = None
    sections: List[str] = field(default_factory=lambda: list(DEFAULT_SECTIONS))
    experience: List[EntrySelection] = field(default_factory=list)
    projects: List[EntrySelection] = field(default_factory=list)
    education: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        sections = data.get("sections") if isinstance(data, Mapping) else None
        return cls(
            name=str(_require(data, "name", "profile")),
            description=str(data.get("description") or ""),
            summary=_opt_str(data.get("summary")),
            sections=(
                _string_list(sections, "sections", "profile")
                if sections is not None
                else list(DEFAULT_SECTIONS)
            ),
            experience=[EntrySelection.from_dict(e) for e in data.get("experience") or []],
            projects=[EntrySelection.from_dict(p) for p in data.get("projects") or []],
            education=_string_list(data.get("education"), "education", "profile"),
            skills=_string_list(data.get("skills"), "skills", "profile"),
        )


# ============================================================================
# Render-ready model
# ============================================================================


@dataclass
class DocumentModel:
    """
    Fully-resolved, render-ready résumé.

    Produced by the assembler and consumed once by the renderer.
    """

    name: str
    email: str = ""
    phone: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = None
    sections: List[str] = field(default_factory=list)
    experience: List[Experience] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[SkillCategory] = field(default_factory=list)

    def contact_fields(self) -> Dict[str, Optional[str]]:
        """Contact values keyed by field name, in header order."""
        return {
            "phone": self.phone,
            "email": self.email,
            "linkedin": self.linkedin,
            "github": self.github,
            "website": self.website,
        }

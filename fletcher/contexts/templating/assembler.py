"""
Document Assembler

Turns a profile selection over a master record into a render-ready DocumentModel.

The transform is pure and deterministic: the master record and profile are never
mutated, and dangling profile references (entries or bullets that no longer
exist in the master) are dropped silently rather than raised. Only a wrong
entity kind or a malformed override mapping is an error.
"""

from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Sequence, TypeVar

from fletcher.contexts.templating.logger import _log_debug
from fletcher.contexts.templating.resume_data_structure import (
    Bullet,
    DocumentModel,
    EntrySelection,
    MasterRecord,
    Profile,
    SkillCategory,
)
from fletcher.utils.exceptions import DocumentShapeError

E = TypeVar("E")


@dataclass
class AssemblyOverrides:
    """
    Content substitutions applied on top of a profile.

    Attributes:
        bullet_overrides: Replacement text keyed by bullet id
        additional_skills: Extra skill strings keyed by skill category id
        summary_override: Summary text superseding the profile's summary variant
    """

    bullet_overrides: Dict[str, str] = field(default_factory=dict)
    additional_skills: Dict[str, List[str]] = field(default_factory=dict)
    summary_override: Optional[str] = None


def _validate_overrides(overrides: AssemblyOverrides) -> None:
    if not isinstance(overrides, AssemblyOverrides):
        raise DocumentShapeError(
            f"overrides must be AssemblyOverrides, got {type(overrides).__name__}"
        )
    for key, value in overrides.bullet_overrides.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise DocumentShapeError(
                f"Bullet override {key!r} must map a string id to string text"
            )
    for key, values in overrides.additional_skills.items():
        if not isinstance(key, str) or isinstance(values, str):
            raise DocumentShapeError(
                f"Additional skills for {key!r} must map a string id to a list of strings"
            )
        if not all(isinstance(v, str) for v in values):
            raise DocumentShapeError(f"Additional skills for {key!r} must all be strings")
    summary = overrides.summary_override
    if summary is not None and not isinstance(summary, str):
        raise DocumentShapeError("summary_override must be a string")


def _select_bullets(
    bullets: Sequence[Bullet], wanted_ids: Sequence[str], overrides: Mapping[str, str]
) -> List[Bullet]:
    """Filter bullets to the wanted ids in master order, then apply text overrides."""
    wanted = set(wanted_ids)
    selected = []
    for bullet in bullets:
        if bullet.id not in wanted:
            continue
        text = overrides.get(bullet.id)
        if text is not None and text.strip():
            bullet = replace(bullet, text=text, tags=list(bullet.tags))
        else:
            bullet = replace(bullet, tags=list(bullet.tags))
        selected.append(bullet)
    return selected


def _select_entries(
    entries: Sequence[E],
    selections: Sequence[EntrySelection],
    overrides: Mapping[str, str],
    kind: str,
) -> List[E]:
    """
    Entries the profile references, in master order, with filtered bullets.

    If the profile references an entry more than once, the first selection wins.
    """
    by_id: Dict[str, EntrySelection] = {}
    for selection in selections:
        by_id.setdefault(selection.id, selection)

    known = {entry.id for entry in entries}
    for missing in (i for i in by_id if i not in known):
        _log_debug(f"Dropping dangling {kind} reference '{missing}'")

    return [
        replace(entry, bullets=_select_bullets(entry.bullets, by_id[entry.id].bullets, overrides))
        for entry in entries
        if entry.id in by_id
    ]


def _select_skills(
    categories: Sequence[SkillCategory],
    wanted_ids: Sequence[str],
    additional: Mapping[str, Sequence[str]],
) -> List[SkillCategory]:
    wanted = set(wanted_ids)
    return [
        replace(category, items=list(category.items) + list(additional.get(category.id, ())))
        for category in categories
        if category.id in wanted
    ]


def _resolve_summary(
    master: MasterRecord, profile: Profile, overrides: AssemblyOverrides
) -> Optional[str]:
    if overrides.summary_override is not None and overrides.summary_override.strip():
        return overrides.summary_override
    if profile.summary is None:
        return None
    variant = master.find_summary(profile.summary)
    if variant is None:
        _log_debug(f"Dropping dangling summary reference '{profile.summary}'")
        return None
    return variant.text


def assemble(
    master: MasterRecord,
    profile: Profile,
    overrides: Optional[AssemblyOverrides] = None,
) -> DocumentModel:
    """
    Build the DocumentModel for a profile.

    Args:
        master: Candidate fact base
        profile: Curated selection over the master record
        overrides: Optional bullet text, extra skill and summary substitutions

    Returns:
        Fully-resolved DocumentModel sharing no mutable state with its inputs

    Raises:
        DocumentShapeError: If master or profile is the wrong entity kind, the
            master has no name, or overrides are not string-keyed strings
    """
    if not isinstance(master, MasterRecord):
        raise DocumentShapeError(f"master must be a MasterRecord, got {type(master).__name__}")
    if not isinstance(profile, Profile):
        raise DocumentShapeError(f"profile must be a Profile, got {type(profile).__name__}")
    if not isinstance(master.name, str) or not master.name.strip():
        raise DocumentShapeError("Master record has no name")

    overrides = overrides if overrides is not None else AssemblyOverrides()
    _validate_overrides(overrides)

    education_ids = set(profile.education)

    return DocumentModel(
        name=master.name,
        email=master.email,
        phone=master.phone,
        linkedin=master.linkedin,
        github=master.github,
        website=master.website,
        summary=_resolve_summary(master, profile, overrides),
        sections=list(profile.sections),
        experience=_select_entries(
            master.experience, profile.experience, overrides.bullet_overrides, "experience"
        ),
        projects=[
            replace(project, technologies=list(project.technologies))
            for project in _select_entries(
                master.projects, profile.projects, overrides.bullet_overrides, "project"
            )
        ],
        education=[deepcopy(entry) for entry in master.education if entry.id in education_ids],
        skills=_select_skills(master.skills, profile.skills, overrides.additional_skills),
    )

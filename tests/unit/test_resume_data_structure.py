"""Unit tests for master record and profile parsing."""

import pytest

from fletcher.contexts.templating.resume_data_structure import (
    DEFAULT_SECTIONS,
    Bullet,
    DocumentModel,
    MasterRecord,
    Profile,
    Project,
)
from fletcher.utils.exceptions import InvalidRecordError


@pytest.mark.unit
def test_master_record_from_dict(master):
    assert master.name == "Jane Doe"
    assert [s.id for s in master.summaries] == ["s1", "s2"]
    assert [e.id for e in master.experience] == ["exp1", "exp2"]
    assert master.projects[0].url == "github.com/janedoe/tracker"
    assert master.website is None


@pytest.mark.unit
def test_tags_are_lowercased():
    bullet = Bullet.from_dict({"id": "b1", "text": "x", "tags": ["React", "Design Systems"]})

    assert bullet.tags == ["react", "design systems"]


@pytest.mark.unit
def test_all_skill_items(master):
    assert master.all_skill_items() == ["React", "TypeScript", "Go", "PostgreSQL"]


@pytest.mark.unit
def test_find_helpers(master):
    assert master.find_experience("exp2").organization == "Initech"
    assert master.find_experience("nope") is None
    assert master.find_summary("nope") is None


@pytest.mark.unit
def test_project_optional_fields():
    project = Project.from_dict({"id": "p", "name": "Tool"})

    assert project.url is None
    assert project.technologies == []
    assert project.bullets == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda d: d.pop("name"), "missing required field 'name'"),
        (lambda d: d["experience"][0].pop("title"), "'title'"),
        (lambda d: d["experience"][0]["bullets"][1].update(id="b1"), "Duplicate experience bullet id 'b1'"),
        (lambda d: d["skills"][1].update(id="sk1"), "Duplicate skill category id 'sk1'"),
        (lambda d: d["skills"][0].update(items="React"), "items must be a list"),
        (lambda d: d["experience"][0].update(bullets="b1"), "bullets must be a list"),
    ],
)
def test_malformed_master_records(master_dict, mutate, message):
    mutate(master_dict)

    with pytest.raises(InvalidRecordError, match=message):
        MasterRecord.from_dict(master_dict)


@pytest.mark.unit
def test_profile_defaults():
    profile = Profile.from_dict({"name": "minimal"})

    assert profile.summary is None
    assert profile.sections == DEFAULT_SECTIONS
    assert profile.sections is not DEFAULT_SECTIONS
    assert profile.experience == []


@pytest.mark.unit
def test_profile_requires_name():
    with pytest.raises(InvalidRecordError):
        Profile.from_dict({"sections": ["experience"]})


@pytest.mark.unit
def test_profile_entry_requires_id():
    with pytest.raises(InvalidRecordError, match="profile entry"):
        Profile.from_dict({"name": "p", "experience": [{"bullets": ["b1"]}]})


@pytest.mark.unit
def test_profile_may_reference_unknown_ids():
    """Dangling references are only dropped at assembly time."""
    assert Profile.from_dict({"name": "p", "skills": ["sk-unknown"]}).skills == ["sk-unknown"]


@pytest.mark.unit
def test_contact_fields_order():
    doc = DocumentModel(name="Jane Doe", email="jane@example.com")

    assert list(doc.contact_fields()) == ["phone", "email", "linkedin", "github", "website"]

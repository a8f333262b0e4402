"""
Integration tests for the records -> scoring -> assembly -> LaTeX pipeline.

Uses the sample records shipped in data/. No compiler is needed.
"""

from pathlib import Path

import pytest

from fletcher.contexts.targeting import score_profiles, suggest_section_order
from fletcher.contexts.templating import AssemblyOverrides, assemble, render_resume
from fletcher.utils.records import list_profiles, load_master_record, load_profiles, write_tex_file

DATA_DIR = Path(__file__).parents[2] / "data"


@pytest.fixture
def master():
    return load_master_record(DATA_DIR / "master.yaml")


@pytest.fixture
def profiles():
    return load_profiles(DATA_DIR / "profiles")


@pytest.mark.integration
def test_sample_profiles_reference_the_sample_master(master, profiles):
    """Every id in the shipped profiles resolves against the shipped master."""
    summaries = {s.id for s in master.summaries}
    experience = {e.id: {b.id for b in e.bullets} for e in master.experience}
    projects = {p.id: {b.id for b in p.bullets} for p in master.projects}

    assert [p.name for p in list_profiles(DATA_DIR / "profiles")] == ["frontend.yaml", "fullstack.yaml"]
    for profile in profiles:
        assert profile.summary in summaries
        for selection in profile.experience:
            assert set(selection.bullets) <= experience[selection.id]
        for selection in profile.projects:
            assert set(selection.bullets) <= projects[selection.id]
        assert set(profile.education) <= {e.id for e in master.education}
        assert set(profile.skills) <= {s.id for s in master.skills}


@pytest.mark.integration
def test_scores_rank_every_profile(master, profiles, analysis):
    results = score_profiles(profiles, analysis, master)

    assert sorted(r.profile_name for r in results) == ["frontend", "fullstack"]
    assert [r.total_score for r in results] == sorted((r.total_score for r in results), reverse=True)
    for result in results:
        assert 0 <= result.total_score <= 100


@pytest.mark.integration
def test_tailored_resume_renders(master, profiles, analysis, tmp_path):
    profile = next(p for p in profiles if p.name == "frontend")
    profile.sections = suggest_section_order(profile.sections, analysis)
    first_bullet = profile.experience[0].bullets[0]
    overrides = AssemblyOverrides(
        bullet_overrides={first_bullet: "Led a design system & accessibility program"},
        summary_override="Frontend engineer focused on performance.",
    )

    tex = render_resume(assemble(master, profile, overrides))
    path = write_tex_file(analysis.company, master.name, tex, tmp_path)

    assert path.name == "jane-doe-globex.tex"
    content = path.read_text(encoding="utf-8")
    assert content.startswith(r"\documentclass")
    assert r"\resumeItem{Led a design system \& accessibility program}" in content
    assert "Frontend engineer focused on performance." in content
    # Section order follows the suggestion (experience first for a frontend role)
    assert content.index(r"\section{Experience}") < content.index(r"\section{Summary}")
    assert "\n\n\n" not in content


@pytest.mark.integration
def test_rendering_sample_records_is_deterministic(master, profiles):
    for profile in profiles:
        assert render_resume(assemble(master, profile)) == render_resume(assemble(master, profile))

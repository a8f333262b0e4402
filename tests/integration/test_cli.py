"""
Integration tests for the tailor_resume CLI commands that need no LLM or compiler.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import scripts.tailor_resume as tailor_resume
from fletcher.contexts.intake.job_analysis import JobAnalysis
from fletcher.utils.records import save_job_analysis
from scripts.tailor_resume import app

DATA_DIR = Path(__file__).parents[2] / "data"

runner = CliRunner()


@pytest.mark.integration
def test_profiles_lists_names():
    result = runner.invoke(app, ["profiles", "--dir", str(DATA_DIR / "profiles")])

    assert result.exit_code == 0
    assert "frontend" in result.output
    assert "fullstack" in result.output


@pytest.mark.integration
def test_profiles_empty_directory(tmp_path):
    result = runner.invoke(app, ["profiles", "--dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "No profiles found" in result.output


@pytest.mark.integration
def test_score_ranks_profiles(analysis, tmp_path):
    analysis_file = save_job_analysis(analysis, tmp_path / "globex.json")

    result = runner.invoke(
        app,
        [
            "score",
            str(analysis_file),
            "--master",
            str(DATA_DIR / "master.yaml"),
            "--dir",
            str(DATA_DIR / "profiles"),
        ],
    )

    assert result.exit_code == 0
    assert "Senior Frontend Engineer at Globex" in result.output
    assert "1. " in result.output
    assert "2. " in result.output


@pytest.mark.integration
def test_score_reports_invalid_analysis(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{broken")

    result = runner.invoke(app, ["score", str(broken)])

    assert result.exit_code == 1
    assert "Invalid job analysis file" in result.output


@pytest.fixture
def offline_generate(monkeypatch, tmp_path):
    """Run generate without a log directory, LLM calls or a LaTeX install."""
    monkeypatch.setattr(tailor_resume, "_start_logging", lambda command: tmp_path / "run.log")
    monkeypatch.setattr(tailor_resume, "compile_pdf", lambda tex_path: tex_path.with_suffix(".pdf"))
    monkeypatch.setattr(
        tailor_resume,
        "rewrite_bullets",
        lambda bullets, terminology, emphasis: {b.id: f"Rewritten {b.id}" for b in bullets},
    )
    monkeypatch.setattr(tailor_resume, "refine_summary", lambda *args: "Refined summary")

    def generate(analysis, *extra, input=None):
        analysis_file = save_job_analysis(analysis, tmp_path / "globex.json")
        args = [
            "generate",
            "--analysis",
            str(analysis_file),
            "--profile",
            "frontend",
            "--no-revise",
            "--master",
            str(DATA_DIR / "master.yaml"),
            "--dir",
            str(DATA_DIR / "profiles"),
            "--output-dir",
            str(tmp_path / "results"),
            *extra,
        ]
        result = runner.invoke(app, args, input=input)
        tex_files = list((tmp_path / "results").rglob("*.tex"))
        tex = tex_files[0].read_text(encoding="utf-8") if tex_files else ""
        return result, tex

    return generate


@pytest.mark.integration
class TestGenerate:
    """Interactive choices made before rendering."""

    def test_adjacent_skills_join_first_category(self, offline_generate, analysis):
        result, tex = offline_generate(analysis)

        assert result.exit_code == 0, result.output
        assert r"\textbf{Languages}{: TypeScript, JavaScript, Python, SQL, GraphQL}" in tex

    def test_skills_already_shown_are_not_repeated(self, offline_generate, analysis_dict):
        analysis_dict["skills"].append(
            {"skill": "redux", "category": "ADJACENT", "reason": "State", "priority": "nice-to-have"}
        )

        result, tex = offline_generate(JobAnalysis.from_dict(analysis_dict))

        assert result.exit_code == 0, result.output
        assert r"\textbf{Languages}{: TypeScript, JavaScript, Python, SQL, GraphQL}" in tex
        assert "redux" not in tex

    def test_learnable_skill_needs_confirmation(self, offline_generate, analysis_dict):
        analysis_dict["skills"].append(
            {"skill": "Vue.js", "category": "LEARNABLE", "reason": "Similar", "priority": "nice-to-have"}
        )
        analysis = JobAnalysis.from_dict(analysis_dict)

        _, declined = offline_generate(analysis, input="n\n")
        assert "Vue.js" not in declined

        result, accepted = offline_generate(analysis, input="y\n")
        assert result.exit_code == 0, result.output
        assert r"{: TypeScript, JavaScript, Python, SQL, GraphQL, Vue.js}" in accepted

    def test_each_rewrite_is_reviewed(self, offline_generate, analysis):
        # Bullets in profile order, then the summary
        result, tex = offline_generate(analysis, "--rewrite", input="y\nn\ny\ny\nn\n")

        assert result.exit_code == 0, result.output
        assert "Rewritten acme-design-system" in tex
        assert "Rewritten acme-perf" not in tex
        assert r"Reduced bundle size by 35\% through code splitting and lazy loading." in tex
        assert "Rewritten initech-migration" in tex
        assert "Rewritten initech-testing" in tex
        assert "Refined summary" not in tex
        assert r"accessible React \& TypeScript applications." in tex
        assert "Kept 3 of 4 rewritten bullets" in result.output

    def test_accepted_summary_is_used(self, offline_generate, analysis):
        result, tex = offline_generate(analysis, "--rewrite", input="y\ny\ny\ny\ny\n")

        assert result.exit_code == 0, result.output
        assert "Refined summary" in tex
        assert "Frontend engineer with 6 years" not in tex

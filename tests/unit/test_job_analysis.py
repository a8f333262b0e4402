"""Unit tests for job analysis parsing and extraction."""

import json

import pytest

from fletcher.contexts.intake.job_analysis import (
    JobAnalysis,
    analyze_job,
    candidate_skills,
    parse_job_analysis,
)
from fletcher.contexts.intake.skill_report import build_skill_report
from fletcher.utils.exceptions import JobAnalysisError


@pytest.mark.unit
class TestParseJobAnalysis:
    """Validation at the extraction boundary."""

    def test_parses_plain_json(self, analysis_dict):
        analysis = parse_job_analysis(json.dumps(analysis_dict))

        assert analysis.title == "Senior Frontend Engineer"
        assert analysis.seniority == "senior"
        assert analysis.domain_fit == "strong"
        assert [s.skill for s in analysis.skills] == ["React", "TypeScript", "GraphQL", "Kubernetes"]
        assert analysis.key_terminology == ("design system", "accessibility")
        assert analysis.emphasis_areas == ("performance", "testing")

    def test_parses_fenced_json(self, analysis_dict):
        raw = "```json\n" + json.dumps(analysis_dict, indent=2) + "\n```"

        assert parse_job_analysis(raw).company == "Globex"

    def test_malformed_json_raises(self):
        with pytest.raises(JobAnalysisError, match="Failed to parse"):
            parse_job_analysis('{"title": "Engineer",')

    def test_non_object_raises(self):
        with pytest.raises(JobAnalysisError):
            parse_job_analysis('["not", "an", "object"]')

    def test_missing_field_raises(self, analysis_dict):
        del analysis_dict["domainFit"]

        with pytest.raises(JobAnalysisError, match="domainFit"):
            JobAnalysis.from_dict(analysis_dict)

    def test_invalid_enum_raises(self, analysis_dict):
        analysis_dict["seniority"] = "intern"

        with pytest.raises(JobAnalysisError) as exc_info:
            JobAnalysis.from_dict(analysis_dict)

        assert "principal" in exc_info.value.hint

    def test_invalid_skill_category_raises(self, analysis_dict):
        analysis_dict["skills"][1]["category"] = "MAYBE"

        with pytest.raises(JobAnalysisError, match=r"skills\[1\]\.category"):
            JobAnalysis.from_dict(analysis_dict)

    def test_wrong_field_type_raises(self, analysis_dict):
        analysis_dict["keyTerminology"] = "design system"

        with pytest.raises(JobAnalysisError, match="keyTerminology"):
            JobAnalysis.from_dict(analysis_dict)

    def test_non_string_list_item_raises(self, analysis_dict):
        analysis_dict["emphasisAreas"] = ["performance", 3]

        with pytest.raises(JobAnalysisError, match=r"emphasisAreas\[1\]"):
            JobAnalysis.from_dict(analysis_dict)


@pytest.mark.unit
def test_to_dict_restores_wire_format(analysis_dict):
    assert JobAnalysis.from_dict(analysis_dict).to_dict() == analysis_dict


@pytest.mark.unit
def test_matched_skill_names(analysis):
    assert analysis.matched_skill_names() == ["react", "typescript", "graphql"]


@pytest.mark.unit
def test_candidate_skills_are_unique(master):
    master.skills[1].items.append("React")

    assert candidate_skills(master) == ["React", "TypeScript", "Go", "PostgreSQL"]


@pytest.mark.unit
def test_analyze_job_sends_skills_and_description(analysis_dict, make_provider):
    provider = make_provider([json.dumps(analysis_dict)])

    analysis = analyze_job("We need a React engineer.", ["React", "Go"], provider=provider)

    assert analysis.company == "Globex"
    assert "We need a React engineer." in provider.prompts[0]
    assert "The candidate has these skills: React, Go" in provider.prompts[0]
    assert "JSON" in provider.system_prompts[0]


@pytest.mark.unit
def test_analyze_job_rejects_bad_payload(make_provider):
    provider = make_provider(["Sorry, I cannot help with that."])

    with pytest.raises(JobAnalysisError):
        analyze_job("We need a React engineer.", ["React"], provider=provider)


@pytest.mark.unit
def test_analyze_job_wraps_service_errors(make_provider):
    provider = make_provider([ConnectionError("connection refused")])

    with pytest.raises(JobAnalysisError, match="request failed") as exc_info:
        analyze_job("We need a React engineer.", ["React"], provider=provider)

    assert exc_info.value.hint == "connection refused"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.unit
class TestSkillReport:
    """Grouping and must-have coverage."""

    def test_groups_by_category(self, analysis):
        report = build_skill_report(analysis)

        assert [s.skill for s in report.exact] == ["React", "TypeScript"]
        assert [s.skill for s in report.adjacent] == ["GraphQL"]
        assert report.learnable == ()
        assert [s.skill for s in report.domain_change] == ["Kubernetes"]

    def test_match_score_counts_must_haves(self, analysis):
        # 2 of 3 must-haves are EXACT or ADJACENT
        assert build_skill_report(analysis).match_score == 67

    def test_no_must_haves_scores_zero(self, analysis_dict):
        for skill in analysis_dict["skills"]:
            skill["priority"] = "nice-to-have"

        assert build_skill_report(JobAnalysis.from_dict(analysis_dict)).match_score == 0

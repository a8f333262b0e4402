"""Shared fixtures: a small master record, profiles, a job analysis and a fake LLM provider."""

import copy
from typing import List

import pytest

from fletcher.contexts.intake.job_analysis import JobAnalysis
from fletcher.contexts.templating.resume_data_structure import MasterRecord, Profile
from fletcher.utils.llm import LLMProvider, LLMResponse

MASTER_DICT = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "555-0100",
    "linkedin": "linkedin.com/in/janedoe",
    "github": "https://github.com/janedoe",
    "summary": [
        {"id": "s1", "text": "Frontend engineer building React apps."},
        {"id": "s2", "text": "Full-stack engineer."},
    ],
    "experience": [
        {
            "id": "exp1",
            "organization": "Acme Corp",
            "title": "Senior Engineer",
            "location": "Remote",
            "start_date": "2022",
            "end_date": "Present",
            "bullets": [
                {
                    "id": "b1",
                    "text": "Built a React design system used by 12 teams",
                    "tags": ["React", "design systems"],
                },
                {
                    "id": "b2",
                    "text": "Cut page load time by 40% with code splitting",
                    "tags": ["performance"],
                },
                {
                    "id": "b3",
                    "text": "Wrote Go microservices for billing",
                    "tags": ["go", "backend"],
                },
            ],
        },
        {
            "id": "exp2",
            "organization": "Initech",
            "title": "Engineer",
            "location": "Austin, TX",
            "start_date": "2019",
            "end_date": "2021",
            "bullets": [
                {
                    "id": "b4",
                    "text": "Migrated dashboard to TypeScript",
                    "tags": ["typescript", "migration"],
                },
            ],
        },
    ],
    "projects": [
        {
            "id": "proj1",
            "name": "Habit Tracker",
            "technologies": ["React Native", "Firebase"],
            "url": "github.com/janedoe/tracker",
            "bullets": [{"id": "p1", "text": "Reached 5k monthly users", "tags": ["mobile"]}],
        }
    ],
    "education": [
        {
            "id": "edu1",
            "institution": "UT Austin",
            "degree": "B.S. Computer Science",
            "location": "Austin, TX",
            "start_date": "2015",
            "end_date": "2019",
        }
    ],
    "skills": [
        {"id": "sk1", "category": "Frontend", "items": ["React", "TypeScript"]},
        {"id": "sk2", "category": "Backend", "items": ["Go", "PostgreSQL"]},
    ],
}

FRONTEND_PROFILE_DICT = {
    "name": "frontend",
    "description": "Frontend roles",
    "summary": "s1",
    "sections": ["summary", "experience", "projects", "skills", "education"],
    # Bullet ids deliberately listed out of master order
    "experience": [{"id": "exp1", "bullets": ["b2", "b1"]}, {"id": "exp2", "bullets": ["b4"]}],
    "projects": [{"id": "proj1", "bullets": ["p1"]}],
    "education": ["edu1"],
    "skills": ["sk1"],
}

BACKEND_PROFILE_DICT = {
    "name": "backend",
    "description": "Backend roles",
    "summary": "s2",
    "sections": ["experience", "skills"],
    "experience": [{"id": "exp1", "bullets": ["b3"]}],
    "skills": ["sk2"],
}

ANALYSIS_DICT = {
    "title": "Senior Frontend Engineer",
    "company": "Globex",
    "seniority": "senior",
    "domain": "Frontend Web Development",
    "domainFit": "strong",
    "domainFitReason": "React-heavy product role",
    "skills": [
        {"skill": "React", "category": "EXACT", "reason": "Daily use", "priority": "must-have"},
        {"skill": "TypeScript", "category": "EXACT", "reason": "Daily use", "priority": "must-have"},
        {"skill": "GraphQL", "category": "ADJACENT", "reason": "Same ecosystem", "priority": "nice-to-have"},
        {"skill": "Kubernetes", "category": "DOMAIN_CHANGE", "reason": "Ops", "priority": "must-have"},
    ],
    "keyTerminology": ["design system", "accessibility"],
    "emphasisAreas": ["performance", "testing"],
    "summaryRecommendation": "Lead with React platform work",
}


class FakeProvider(LLMProvider):
    """LLM provider that replays canned replies and records prompts."""

    _provider_prefix = "fake"
    _retry_message = "Fake provider busy"

    def __init__(self, replies: List[str]):
        self._retryable_exception = TimeoutError
        self.replies = list(replies)
        self.prompts: List[str] = []
        self.system_prompts: List[str] = []
        self.update_model("test")

    def _call_api(self, system_prompt: str, user_prompt: str, max_tokens: int) -> LLMResponse:
        self.system_prompts.append(system_prompt)
        self.prompts.append(user_prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model=self.model, input_tokens=1, output_tokens=1)


@pytest.fixture
def master_dict():
    return copy.deepcopy(MASTER_DICT)


@pytest.fixture
def master(master_dict):
    return MasterRecord.from_dict(master_dict)


@pytest.fixture
def profile():
    return Profile.from_dict(copy.deepcopy(FRONTEND_PROFILE_DICT))


@pytest.fixture
def backend_profile():
    return Profile.from_dict(copy.deepcopy(BACKEND_PROFILE_DICT))


@pytest.fixture
def analysis_dict():
    return copy.deepcopy(ANALYSIS_DICT)


@pytest.fixture
def analysis(analysis_dict):
    return JobAnalysis.from_dict(analysis_dict)


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider

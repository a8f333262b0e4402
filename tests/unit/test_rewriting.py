"""Unit tests for bullet and summary rewriting."""

import threading

import pytest

from fletcher.contexts.targeting.rewriting import (
    collect_profile_bullets,
    refine_summary,
    rewrite_bullet,
    rewrite_bullets,
)
from fletcher.utils.exceptions import RewriteError


@pytest.mark.unit
def test_collect_profile_bullets(master, profile):
    bullets = collect_profile_bullets(master, profile)

    # exp1 in master order (b1 before b2), then exp2
    assert [b.id for b in bullets] == ["b1", "b2", "b4"]


@pytest.mark.unit
def test_collect_profile_bullets_skips_unknown_entries(master, profile):
    profile.experience[0].id = "missing"

    assert [b.id for b in collect_profile_bullets(master, profile)] == ["b4"]


@pytest.mark.unit
def test_rewrite_bullets_keyed_by_id(master, profile):
    bullets = collect_profile_bullets(master, profile)
    calls = []

    def fake_rewrite(text, terminology, emphasis):
        calls.append((terminology, emphasis))
        return text.upper()

    results = rewrite_bullets(bullets, ["design system"], ["performance"], rewrite=fake_rewrite)

    assert list(results) == ["b1", "b2", "b4"]
    assert results["b4"] == "MIGRATED DASHBOARD TO TYPESCRIPT"
    assert calls == [(["design system"], ["performance"])] * 3


@pytest.mark.unit
def test_failed_rewrites_are_left_out(master, profile):
    bullets = collect_profile_bullets(master, profile)

    def flaky(text, terminology, emphasis):
        if "page load" in text:
            raise RewriteError("Failed to rewrite bullet")
        return "rewritten"

    assert rewrite_bullets(bullets, [], [], rewrite=flaky) == {"b1": "rewritten", "b4": "rewritten"}


@pytest.mark.unit
def test_rewrites_run_concurrently(master, profile):
    bullets = collect_profile_bullets(master, profile)
    # Every call waits for all three, so this only finishes with parallel workers
    barrier = threading.Barrier(len(bullets), timeout=5)

    def waiting(text, terminology, emphasis):
        barrier.wait()
        return text

    assert len(rewrite_bullets(bullets, [], [], rewrite=waiting, max_workers=3)) == 3


@pytest.mark.unit
def test_rewrite_bullets_empty():
    assert rewrite_bullets([], ["x"], ["y"]) == {}


@pytest.mark.unit
def test_rewrite_bullet_prompt(make_provider):
    provider = make_provider(["Led a React design system adopted by 12 teams"])

    result = rewrite_bullet(
        "Built a React design system used by 12 teams",
        ["design system"],
        ["performance", "testing"],
        provider=provider,
    )

    assert result == "Led a React design system adopted by 12 teams"
    prompt = provider.prompts[0]
    assert '"Built a React design system used by 12 teams"' in prompt
    assert "Key terminology to incorporate (where naturally fitting): design system" in prompt
    assert "Emphasis areas: performance, testing" in prompt
    assert "NEVER use em-dashes" in prompt


@pytest.mark.unit
def test_rewrite_bullet_wraps_service_errors(make_provider):
    with pytest.raises(RewriteError) as exc_info:
        rewrite_bullet("text", [], [], provider=make_provider([ConnectionError("refused")]))

    assert exc_info.value.hint == "refused"


@pytest.mark.unit
def test_rewrite_bullet_rejects_empty_reply(make_provider):
    with pytest.raises(RewriteError, match="empty bullet"):
        rewrite_bullet("text", [], [], provider=make_provider(["   "]))


@pytest.mark.unit
def test_refine_summary_prompt(make_provider):
    provider = make_provider(["Frontend engineer focused on performance."])

    result = refine_summary(
        "Frontend engineer building React apps.",
        "Senior Frontend Engineer",
        ["performance"],
        ["design system"],
        provider=provider,
    )

    assert result == "Frontend engineer focused on performance."
    assert 'for a "Senior Frontend Engineer" position' in provider.prompts[0]
    assert "Terminology to mirror: design system" in provider.prompts[0]

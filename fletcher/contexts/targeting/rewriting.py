"""
Bullet and summary rewriting through the external text rewrite service.

Rewrites are independent of each other and of the on-disk document, so a batch
of bullets is rewritten concurrently. Results are only ever applied through
AssemblyOverrides, never written to a shared file.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from fletcher.contexts.targeting.logger import _log_debug, _log_info, _log_warning
from fletcher.contexts.targeting.prompts import bullet_rewrite_prompt, summary_refinement_prompt
from fletcher.contexts.templating.resume_data_structure import Bullet, MasterRecord, Profile
from fletcher.utils.exceptions import RewriteError
from fletcher.utils.llm import LLMProvider, complete

REWRITE_MAX_TOKENS = 1024
DEFAULT_MAX_WORKERS = 4

RewriteFn = Callable[[str, Sequence[str], Sequence[str]], str]


def _request_rewrite(prompt: str, provider: Optional[LLMProvider], what: str) -> str:
    try:
        text = complete(prompt, provider=provider, max_tokens=REWRITE_MAX_TOKENS)
    except Exception as e:
        raise RewriteError(f"Failed to rewrite {what}", hint=str(e)) from e
    if not text:
        raise RewriteError(f"Rewrite service returned an empty {what}")
    return text


def rewrite_bullet(
    text: str,
    terminology: Sequence[str],
    emphasis: Sequence[str],
    provider: Optional[LLMProvider] = None,
) -> str:
    """
    Rewrite one bullet to mirror the job's terminology and emphasis.

    Raises:
        RewriteError: If the service call fails or returns nothing
    """
    return _request_rewrite(bullet_rewrite_prompt(text, terminology, emphasis), provider, "bullet")


def refine_summary(
    summary: str,
    title: str,
    emphasis: Sequence[str],
    terminology: Sequence[str],
    provider: Optional[LLMProvider] = None,
) -> str:
    """
    Refine a professional summary for a target job title.

    Raises:
        RewriteError: If the service call fails or returns nothing
    """
    prompt = summary_refinement_prompt(summary, title, emphasis, terminology)
    return _request_rewrite(prompt, provider, "summary")


def collect_profile_bullets(master: MasterRecord, profile: Profile) -> List[Bullet]:
    """
    Bullets a profile includes from its experience entries.

    Entries follow profile order, bullets follow master order within an entry.
    Dangling entry and bullet ids are skipped.
    """
    bullets = []
    for selection in profile.experience:
        entry = master.find_experience(selection.id)
        if entry is None:
            _log_debug(f"Skipping unknown experience '{selection.id}'")
            continue
        wanted = set(selection.bullets)
        bullets.extend(b for b in entry.bullets if b.id in wanted)
    return bullets


def rewrite_bullets(
    bullets: Sequence[Bullet],
    terminology: Sequence[str],
    emphasis: Sequence[str],
    rewrite: RewriteFn = rewrite_bullet,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Dict[str, str]:
    """
    Rewrite bullets concurrently.

    Args:
        bullets: Bullets to rewrite
        terminology: Key terminology to mirror
        emphasis: Emphasis areas to mirror
        rewrite: Rewrite function (default: rewrite_bullet)
        max_workers: Thread pool size

    Returns:
        Rewritten text keyed by bullet id, in input order. Bullets whose rewrite
        failed are left out.
    """
    if not bullets:
        return {}

    _log_info(f"Rewriting {len(bullets)} bullets ({max_workers} workers)")
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            (bullet, executor.submit(rewrite, bullet.text, terminology, emphasis))
            for bullet in bullets
        ]

        results = {}
        for bullet, future in futures:
            try:
                results[bullet.id] = future.result()
            except RewriteError as e:
                _log_warning(f"Keeping original bullet '{bullet.id}': {e.message}")

    _log_info(f"Rewrote {len(results)}/{len(bullets)} bullets")
    return results

#!/usr/bin/env python3
"""
Resume Tailoring CLI

Analyzes job descriptions, ranks profiles and generates tailored LaTeX resumes
with an interactive revise/compile loop.

Commands:
    analyze  - Extract a structured job analysis from a job description
    profiles - List available profiles
    score    - Rank profiles against a saved job analysis
    generate - Assemble, render and compile a tailored resume
    revise   - Revise an existing generated .tex file

Examples:\n

    tailor_resume.py analyze posting.txt -o outs/acme.json     # Analyze and save

    tailor_resume.py score outs/acme.json                      # Rank profiles

    tailor_resume.py generate -a outs/acme.json --reorder      # Best profile, reordered

    tailor_resume.py generate -a outs/acme.json -p frontend -r # Named profile, rewritten bullets

    tailor_resume.py revise outs/results/2026-10-19/jane-doe-acme.tex
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from fletcher.contexts.intake.job_analysis import JobAnalysis, analyze_job, candidate_skills
from fletcher.contexts.intake.skill_report import build_skill_report
from fletcher.contexts.rendering.compiler import compile_pdf
from fletcher.contexts.revision.controller import (
    InstructionRequest,
    ReviewRequest,
    RevisionOutcome,
    run_revision_loop,
)
from fletcher.contexts.revision.diff import render_word_diff
from fletcher.contexts.targeting.profile_scorer import score_profiles
from fletcher.contexts.targeting.rewriting import (
    collect_profile_bullets,
    refine_summary,
    rewrite_bullets,
)
from fletcher.contexts.targeting.section_order import suggest_section_order
from fletcher.contexts.templating.assembler import AssemblyOverrides, assemble
from fletcher.contexts.templating.latex_generator import render_resume
from fletcher.contexts.templating.resume_data_structure import Bullet, MasterRecord, Profile
from fletcher.utils.exceptions import FletcherError
from fletcher.utils.logger import setup_logger
from fletcher.utils.records import (
    load_job_analysis,
    load_master_record,
    load_profiles,
    save_job_analysis,
    write_tex_file,
)
from fletcher.utils.text_processing import truncate_display
from fletcher.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

OUTCOME_COLORS = {
    "compiled": typer.colors.GREEN,
    "rejected": typer.colors.BLUE,
    "no_changes": typer.colors.YELLOW,
    "rewrite_failed": typer.colors.RED,
    "rolled_back": typer.colors.RED,
}


app = typer.Typer(
    help="Tailor resumes to job descriptions and typeset them with LaTeX",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# ============================================================================
# Helpers
# ============================================================================


def _start_logging(command: str) -> Path:
    return setup_logger(
        context_name="tailor",
        log_dir=LOGS_PATH / f"{command}_{now()}",
        console_level="WARNING",
    )


def _fail(error: FletcherError) -> None:
    typer.secho(f"Error: {error.message}", fg=typer.colors.RED, err=True)
    if error.hint:
        typer.secho(f"  {error.hint}", fg=typer.colors.YELLOW, err=True)
    raise typer.Exit(code=1)


def _read_job_description(jd_file: Optional[Path]) -> str:
    """Read a job description from a file, or from $EDITOR when no file is given."""
    if jd_file is not None:
        return jd_file.read_text(encoding="utf-8")
    text = typer.edit("\n# Paste the job description above this line\n")
    if text is None:
        return ""
    return text.split("# Paste the job description above this line")[0].strip()


def _print_analysis(analysis: JobAnalysis) -> None:
    report = build_skill_report(analysis)
    typer.secho(f"\n{analysis.title} at {analysis.company}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Seniority: {analysis.seniority}")
    typer.echo(f"  Domain: {analysis.domain} ({analysis.domain_fit} fit)")
    if analysis.domain_fit_reason:
        typer.echo(f"  {analysis.domain_fit_reason}")

    groups = [
        ("Exact", report.exact, typer.colors.GREEN),
        ("Adjacent", report.adjacent, typer.colors.CYAN),
        ("Learnable", report.learnable, typer.colors.YELLOW),
        ("Domain change", report.domain_change, typer.colors.RED),
    ]
    for label, skills, color in groups:
        if skills:
            names = ", ".join(s.skill for s in skills)
            typer.secho(f"  {label}: {names}", fg=color)
    typer.echo(f"  Must-have match: {report.match_score}%")
    if analysis.emphasis_areas:
        typer.echo(f"  Emphasis: {', '.join(analysis.emphasis_areas)}")


def _choose_profile(
    profiles: List[Profile], analysis: JobAnalysis, master: MasterRecord, name: Optional[str]
) -> Profile:
    if not profiles:
        typer.secho("Error: no profiles found", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if name is not None:
        for profile in profiles:
            if profile.name == name:
                return profile
        available = ", ".join(p.name for p in profiles)
        typer.secho(f"Error: profile '{name}' not found (available: {available})", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    best = score_profiles(profiles, analysis, master)[0]
    typer.echo(f"Best profile: {best.profile_name} ({best.total_score}) {best.breakdown}")
    return next(p for p in profiles if p.name == best.profile_name)


def _additional_skills(
    analysis: JobAnalysis, master: MasterRecord, profile: Profile
) -> Dict[str, List[str]]:
    """
    Skills to append to the profile's first skill category.

    Adjacent skills are always added. Learnable skills are added only when
    confirmed. Skills the profile already shows are skipped.
    """
    if not profile.skills:
        return {}
    shown = {
        item.lower()
        for category in master.skills
        if category.id in profile.skills
        for item in category.items
    }

    report = build_skill_report(analysis)
    extras = [s.skill for s in report.adjacent if s.skill.lower() not in shown]
    for assessment in report.learnable:
        if assessment.skill.lower() in shown:
            continue
        if typer.confirm(f"Add learnable skill '{assessment.skill}'?", default=False):
            extras.append(assessment.skill)

    extras = list(dict.fromkeys(extras))
    if not extras:
        return {}
    typer.echo(f"Additional skills: {', '.join(extras)}")
    return {profile.skills[0]: extras}


def _review_bullet_rewrites(bullets: List[Bullet], rewrites: Dict[str, str]) -> Dict[str, str]:
    """Show each rewritten bullet as a word diff and keep the accepted ones."""
    accepted = {}
    for bullet in bullets:
        rewritten = rewrites.get(bullet.id)
        if rewritten is None or rewritten == bullet.text:
            continue
        typer.echo(f"\n  {render_word_diff(bullet.text, rewritten)}")
        if typer.confirm("Keep this rewrite?", default=True):
            accepted[bullet.id] = rewritten
    typer.echo(f"Kept {len(accepted)} of {len(rewrites)} rewritten bullets")
    return accepted


def _review_summary(original: str, refined: str) -> Optional[str]:
    if refined == original:
        return None
    typer.echo(f"\n  {render_word_diff(original, refined)}")
    if typer.confirm("Use the refined summary?", default=True):
        return refined
    return None


def _print_outcome(outcome: RevisionOutcome) -> None:
    color = OUTCOME_COLORS.get(outcome.status, typer.colors.WHITE)
    typer.secho(f"  {outcome.message}", fg=color)
    if outcome.hint:
        typer.secho(f"  {truncate_display(outcome.hint, 400)}", dim=True)


def _interactive_revision(tex_path: Path, pdf_path: Path, job_text: Optional[str]) -> Path:
    """Run the revision loop against the terminal."""
    loop = run_revision_loop(tex_path, pdf_path, job_text)
    try:
        request = next(loop)
        while True:
            if isinstance(request, InstructionRequest):
                if request.last_outcome is not None:
                    _print_outcome(request.last_outcome)
                reply = typer.prompt(
                    "\nRevisions (or press Enter to finish)", default="", show_default=False
                )
                request = loop.send(reply)
            elif isinstance(request, ReviewRequest):
                typer.secho("\n  Changes:", bold=True)
                for change in request.changes:
                    typer.echo(f"  {render_word_diff(change.old, change.new)}")
                request = loop.send(typer.confirm("Accept these changes?", default=True))
    except StopIteration as stop:
        return stop.value


# ============================================================================
# Commands
# ============================================================================


@app.command("analyze")
def analyze_command(
    jd_file: Annotated[
        Optional[Path],
        typer.Argument(help="Job description text file (default: open $EDITOR)", exists=True),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Save the analysis as JSON"),
    ] = None,
    master_path: Annotated[
        Optional[Path],
        typer.Option("--master", "-m", help="Master record YAML (default: $DATA_PATH/master.yaml)"),
    ] = None,
):
    """
    Extract a structured job analysis from a job description.

    Examples:\n

        $ tailor_resume.py analyze posting.txt

        $ tailor_resume.py analyze posting.txt --output outs/acme.json
    """
    _start_logging("analyze")
    try:
        master = load_master_record(master_path)
        text = _read_job_description(jd_file)
        if not text.strip():
            typer.secho("Error: empty job description", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        analysis = analyze_job(text, candidate_skills(master))
    except FletcherError as e:
        _fail(e)

    _print_analysis(analysis)
    if output is not None:
        save_job_analysis(analysis, output)
        typer.secho(f"\nSaved analysis: {output}", fg=typer.colors.GREEN)


@app.command("profiles")
def profiles_command(
    profiles_dir: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", help="Profiles directory (default: $DATA_PATH/profiles)"),
    ] = None,
):
    """List available profiles."""
    try:
        profiles = load_profiles(profiles_dir)
    except FletcherError as e:
        _fail(e)

    if not profiles:
        typer.secho("No profiles found", fg=typer.colors.YELLOW)
        return
    for profile in profiles:
        typer.secho(f"  {profile.name}", bold=True, nl=False)
        typer.echo(f"  {profile.description}" if profile.description else "")


@app.command("score")
def score_command(
    analysis_file: Annotated[Path, typer.Argument(help="Saved job analysis JSON", exists=True)],
    master_path: Annotated[
        Optional[Path],
        typer.Option("--master", "-m", help="Master record YAML (default: $DATA_PATH/master.yaml)"),
    ] = None,
    profiles_dir: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", help="Profiles directory (default: $DATA_PATH/profiles)"),
    ] = None,
):
    """
    Rank profiles against a saved job analysis.

    Examples:\n

        $ tailor_resume.py score outs/acme.json
    """
    try:
        analysis = load_job_analysis(analysis_file)
        master = load_master_record(master_path)
        results = score_profiles(load_profiles(profiles_dir), analysis, master)
    except FletcherError as e:
        _fail(e)

    typer.secho(f"\nProfiles for {analysis.title} at {analysis.company}", fg=typer.colors.BLUE, bold=True)
    for rank, result in enumerate(results, 1):
        typer.echo(f"  {rank}. {result.profile_name:<20} {result.total_score:>3}  {result.breakdown}")


@app.command("generate")
def generate_command(
    analysis_file: Annotated[
        Optional[Path],
        typer.Option("--analysis", "-a", help="Saved job analysis JSON (default: analyze a new JD)"),
    ] = None,
    jd_file: Annotated[
        Optional[Path],
        typer.Option("--jd", help="Job description text (analysis input and revision context)"),
    ] = None,
    profile_name: Annotated[
        Optional[str],
        typer.Option("--profile", "-p", help="Profile name (default: best scoring profile)"),
    ] = None,
    rewrite: Annotated[
        bool,
        typer.Option("--rewrite", "-r", help="Rewrite bullets and summary toward the job"),
    ] = False,
    reorder: Annotated[
        bool,
        typer.Option("--reorder", help="Reorder sections for the job"),
    ] = False,
    no_revise: Annotated[
        bool,
        typer.Option("--no-revise", help="Skip the interactive revision loop"),
    ] = False,
    master_path: Annotated[
        Optional[Path],
        typer.Option("--master", "-m", help="Master record YAML (default: $DATA_PATH/master.yaml)"),
    ] = None,
    profiles_dir: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", help="Profiles directory (default: $DATA_PATH/profiles)"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: $OUTPUT_PATH)"),
    ] = None,
):
    """
    Assemble, render and compile a tailored resume.

    Examples:\n

        $ tailor_resume.py generate -a outs/acme.json

        $ tailor_resume.py generate --jd posting.txt --rewrite --reorder --no-revise
    """
    log_file = _start_logging("generate")
    try:
        master = load_master_record(master_path)
        job_text = jd_file.read_text(encoding="utf-8") if jd_file is not None else None

        if analysis_file is not None:
            analysis = load_job_analysis(analysis_file)
        else:
            job_text = job_text or _read_job_description(None)
            analysis = analyze_job(job_text, candidate_skills(master))
        _print_analysis(analysis)

        profile = _choose_profile(load_profiles(profiles_dir), analysis, master, profile_name)

        overrides = AssemblyOverrides(
            additional_skills=_additional_skills(analysis, master, profile)
        )
        if rewrite:
            bullets = collect_profile_bullets(master, profile)
            rewrites = rewrite_bullets(bullets, analysis.key_terminology, analysis.emphasis_areas)
            overrides.bullet_overrides = _review_bullet_rewrites(bullets, rewrites)
            variant = master.find_summary(profile.summary) if profile.summary else None
            if variant is not None:
                refined = refine_summary(
                    variant.text, analysis.title, analysis.emphasis_areas, analysis.key_terminology
                )
                overrides.summary_override = _review_summary(variant.text, refined)

        if reorder:
            profile.sections = suggest_section_order(profile.sections, analysis)
            typer.echo(f"Section order: {', '.join(profile.sections)}")

        tex = render_resume(assemble(master, profile, overrides))
        tex_path = write_tex_file(analysis.company, master.name, tex, output_dir)
        typer.echo(f"LaTeX: {tex_path}")

        pdf_path = compile_pdf(tex_path)
        typer.secho(f"✓ PDF: {pdf_path}", fg=typer.colors.GREEN, bold=True)

        if not no_revise:
            pdf_path = _interactive_revision(tex_path, pdf_path, job_text)
            typer.secho(f"\nFinal PDF: {pdf_path}", fg=typer.colors.GREEN, bold=True)
    except FletcherError as e:
        typer.echo(f"Log: {log_file}", err=True)
        _fail(e)


@app.command("revise")
def revise_command(
    tex_file: Annotated[Path, typer.Argument(help="Generated .tex file", exists=True)],
    jd_file: Annotated[
        Optional[Path],
        typer.Option("--jd", help="Job description text used as revision context"),
    ] = None,
):
    """
    Revise an existing generated .tex file.

    An interrupted earlier revision is restored and re-compiled first.

    Examples:\n

        $ tailor_resume.py revise outs/results/2026-10-19/jane-doe-acme.tex --jd posting.txt
    """
    _start_logging("revise")
    job_text = jd_file.read_text(encoding="utf-8") if jd_file is not None else None
    pdf_path = tex_file.with_suffix(".pdf")
    try:
        if not pdf_path.exists():
            pdf_path = compile_pdf(tex_file)
        pdf_path = _interactive_revision(tex_file, pdf_path, job_text)
    except FletcherError as e:
        _fail(e)
    typer.secho(f"\nFinal PDF: {pdf_path}", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()

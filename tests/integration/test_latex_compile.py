"""
Integration tests for rendering and revision with a real pdflatex.

Skipped when pdflatex (or one of the packages the preamble uses) is missing.
"""

import shutil
import subprocess

import pytest

from fletcher.contexts.rendering.compiler import compile_latex, compile_pdf
from fletcher.contexts.revision.controller import RevisionLoop, RevisionSession, drive
from fletcher.contexts.templating import assemble, render_resume
from fletcher.utils.pdf_processing import page_count

PREAMBLE_PACKAGES = ["geometry", "enumitem", "hyperref", "tabularx"]


def _packages_installed() -> bool:
    if shutil.which("kpsewhich") is None:
        return False
    for package in PREAMBLE_PACKAGES:
        found = subprocess.run(
            ["kpsewhich", f"{package}.sty"], capture_output=True, text=True
        ).stdout.strip()
        if not found:
            return False
    return True


PDFLATEX_AVAILABLE = shutil.which("pdflatex") is not None
skip_if_no_pdflatex = pytest.mark.skipif(
    not PDFLATEX_AVAILABLE, reason="pdflatex not installed - install TeX Live or MacTeX"
)
skip_if_no_packages = pytest.mark.skipif(
    not (PDFLATEX_AVAILABLE and _packages_installed()),
    reason="pdflatex or preamble packages not installed",
)

MINIMAL = r"""\documentclass{article}
\begin{document}
Hello, world.
\end{document}
"""


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_compile_minimal_document(tmp_path):
    tex = tmp_path / "minimal.tex"
    tex.write_text(MINIMAL)

    result = compile_latex(tex)

    assert result.success, f"Compilation failed with errors: {result.errors}"
    assert result.pdf_path.exists()
    assert result.page_count == 1
    assert not (tmp_path / "minimal.aux").exists()


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_compile_with_intentional_error(tmp_path):
    """Test that compilation properly detects and reports errors."""
    tex = tmp_path / "broken.tex"
    tex.write_text(MINIMAL.replace("Hello, world.", r"\undefinedcommand"))

    result = compile_latex(tex)

    assert not result.success
    assert any("Undefined control sequence" in e for e in result.errors)


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_packages
def test_compile_rendered_resume(master, profile, tmp_path):
    tex = tmp_path / "resume.tex"
    tex.write_text(render_resume(assemble(master, profile)), encoding="utf-8")

    pdf = compile_pdf(tex)

    assert pdf.exists()
    assert page_count(pdf) == 1


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_revision_rolls_back_on_real_compile_error(tmp_path):
    tex = tmp_path / "resume.tex"
    tex.write_text(MINIMAL)
    pdf = compile_pdf(tex)
    pdf_bytes = pdf.read_bytes()

    def breaking(source, instruction, context):
        return source.replace("Hello, world.", r"Hello, \undefinedcommand world.")

    loop = RevisionLoop(RevisionSession(tex, pdf), rewriter=breaking)

    drive(loop.run(), ["break it", True])

    assert loop.history[-1].status == "rolled_back"
    assert "Undefined control sequence" in loop.history[-1].hint
    assert tex.read_text() == MINIMAL
    assert pdf.read_bytes() == pdf_bytes


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_revision_recompiles_accepted_change(tmp_path):
    tex = tmp_path / "resume.tex"
    tex.write_text(MINIMAL)
    pdf = compile_pdf(tex)

    def extending(source, instruction, context):
        return source.replace("Hello, world.", "Hello, wide world.")

    loop = RevisionLoop(RevisionSession(tex, pdf), rewriter=extending)

    assert drive(loop.run(), ["extend it", True]) == pdf
    assert loop.history[-1].status == "compiled"
    assert "wide world" in tex.read_text()

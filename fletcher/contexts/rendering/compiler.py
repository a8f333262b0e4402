"""
LaTeX Compilation Module

Handles compilation of .tex files to PDF using pdflatex (or $LATEX_COMPILER).
The PDF is written next to the source as <stem>.pdf.
"""

import os
import re
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from fletcher.contexts.rendering.logger import (
    _log_debug,
    log_compilation_result,
    log_compilation_start,
)
from fletcher.utils.exceptions import CompilationError
from fletcher.utils.pdf_processing import page_count

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
LATEX_TIMEOUT_S = float(os.getenv("LATEX_TIMEOUT_S", "30"))
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out"]

# Fatal log lines reported back to the user
MAX_ERROR_LINES = 10


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the compiler
        stderr: Standard error from the compiler
        errors: Fatal lines from the LaTeX log (at most MAX_ERROR_LINES)
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Error lines are those starting with "!" or mentioning "Error", in log order.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = [
        line.strip()
        for line in log_content.splitlines()
        if line.startswith("!") or "Error" in line
    ][:MAX_ERROR_LINES]

    warnings = []
    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _remove_artifacts(tex_path: Path) -> None:
    """
    Remove intermediate LaTeX files.

    Args:
        tex_path: Path to the .tex file
    """
    base_path = tex_path.parent / tex_path.stem

    for ext in LATEX_ARTIFACTS:
        artifact_path = base_path.with_suffix(ext)
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    tex_file: Path,
    num_passes: int = 1,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
    timeout: float = LATEX_TIMEOUT_S,
    compiler: Optional[str] = None,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF in its own directory.

    Never raises for compiler failures: a missing binary, a timeout or a LaTeX
    error all come back as an unsuccessful CompilationResult.

    Args:
        tex_file: Path to the .tex file to compile
        num_passes: Number of compiler passes (default: 1)
        keep_artifacts: Keep intermediate files (default: from KEEP_LATEX_ARTIFACTS env)
        timeout: Seconds allowed per pass (default: from LATEX_TIMEOUT_S env)
        compiler: Compiler binary (default: from LATEX_COMPILER env)

    Returns:
        CompilationResult with success status and diagnostic information
    """
    tex_file = Path(tex_file).resolve()
    if not tex_file.exists():
        return CompilationResult(success=False, errors=[f"TeX file not found: {tex_file}"])

    compiler = compiler or LATEX_COMPILER
    compile_dir = tex_file.parent
    pdf_path = compile_dir / f"{tex_file.stem}.pdf"
    # Only a PDF written by this run counts as output
    if pdf_path.exists():
        pdf_path.unlink()

    all_stdout = []
    all_stderr = []
    failure = None

    for _ in range(num_passes):
        cmd = [
            compiler,
            "-interaction=nonstopmode",
            "-halt-on-error",
            f"-output-directory={compile_dir}",
            tex_file.name,
        ]
        _log_debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=compile_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                timeout=timeout,
            )
        except FileNotFoundError:
            failure = f"LaTeX compiler not found: {compiler}"
            break
        except subprocess.TimeoutExpired:
            failure = f"LaTeX compilation timed out after {timeout:g}s"
            break

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        if result.returncode != 0:
            failure = f"{compiler} exited with status {result.returncode}"
            break

    # Parse log file for detailed errors and warnings
    errors: List[str] = []
    warnings: List[str] = []
    log_file = compile_dir / f"{tex_file.stem}.log"
    if log_file.exists():
        # pdflatex writes log files in latin-1 encoding (font metadata contains non-UTF-8)
        errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

    if failure is None and not pdf_path.exists():
        failure = "PDF file was not generated"

    if not keep_artifacts:
        _remove_artifacts(tex_file)

    if failure is not None:
        return CompilationResult(
            success=False,
            stdout="\n".join(all_stdout),
            stderr="\n".join(all_stderr),
            errors=errors or [failure],
            warnings=warnings,
        )

    return CompilationResult(
        success=True,
        pdf_path=pdf_path,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path),
    )


def compile_pdf(tex_file: Path, num_passes: int = 1, verbose: bool = False) -> Path:
    """
    Compile a .tex file and return the PDF path, raising on failure.

    Args:
        tex_file: Path to the .tex file to compile
        num_passes: Number of compiler passes (default: 1)
        verbose: Log compiler output even on success (default: False)

    Returns:
        Path to the generated PDF (sibling of tex_file)

    Raises:
        CompilationError: If compilation fails; the hint holds the fatal log lines
    """
    tex_file = Path(tex_file)
    log_compilation_start(tex_file, num_passes)

    start_time = time.time()
    result = compile_latex(tex_file, num_passes=num_passes)
    log_compilation_result(tex_file.stem, result, time.time() - start_time, verbose=verbose)

    if not result.success:
        raise CompilationError("LaTeX compilation failed", hint="\n".join(result.errors))
    return result.pdf_path

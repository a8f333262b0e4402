"""
Revision Loop Controller

Interactive revise -> review -> compile loop over a generated .tex file.

The loop is a generator so that a terminal, a test or any other driver can feed
it the same way:

    loop = run_revision_loop(tex_path, pdf_path, job_text)
    request = next(loop)                  # InstructionRequest
    request = loop.send("tighten summary") # ReviewRequest (or next InstructionRequest)
    request = loop.send(True)              # accept -> compile -> InstructionRequest
    loop.send("")                          # StopIteration.value is the final PDF path

State machine:

    IDLE -> REQUESTING -> REVIEWING -> COMPILING -> IDLE
                |             |            |
                +-> IDLE      +-> IDLE     +-> ROLLED_BACK -> IDLE
    IDLE --(blank instruction)--> DONE

Invariant: the source file on disk always equals its last known-good content or
a revision that compiled. The revised source is only written after acceptance,
and a failed compile restores the previous bytes. A recovery snapshot
(<source>.bak) covers interruption between the write and the compile; it is
restored and re-validated the next time the loop starts.
"""

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Generator, Iterable, List, Optional, Tuple, Union

from fletcher.contexts.rendering.compiler import compile_pdf
from fletcher.contexts.revision.diff import LineChange, diff_lines
from fletcher.contexts.revision.logger import _log_debug, _log_info, log_revision_outcome
from fletcher.contexts.revision.prompts import REVISE_SYSTEM_PROMPT, revise_prompt
from fletcher.utils.exceptions import CompilationError, FletcherError, RewriteError
from fletcher.utils.llm import LLMProvider, complete, strip_code_fence

SNAPSHOT_SUFFIX = ".bak"

# (current source, instruction, requirement context) -> revised source
Rewriter = Callable[[str, str, Optional[str]], str]
# .tex path -> PDF path; raises CompilationError on failure
Compiler = Callable[[Path], Path]


class RevisionState(Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    REVIEWING = "reviewing"
    COMPILING = "compiling"
    ROLLED_BACK = "rolled_back"
    DONE = "done"


@dataclass
class RevisionSession:
    """
    Paths held for one interactive session.

    Only a successful compile changes artifact_path.
    """

    source_path: Path
    artifact_path: Path
    requirement_context: Optional[str] = None


@dataclass(frozen=True)
class RevisionOutcome:
    """
    Result of one revision attempt.

    Attributes:
        instruction: The user's request
        status: rewrite_failed, no_changes, rejected, compiled or rolled_back
        message: Human-readable summary
        hint: Underlying diagnostic (service error, compiler log lines)
    """

    instruction: str
    status: str
    message: str
    hint: Optional[str] = None


@dataclass(frozen=True)
class InstructionRequest:
    """Yielded when the loop waits for the next instruction (send a str; blank ends)."""

    last_outcome: Optional[RevisionOutcome] = None


@dataclass(frozen=True)
class ReviewRequest:
    """Yielded when a revision awaits review (send True to accept)."""

    changes: Tuple[LineChange, ...]
    revised_source: str


LoopRequest = Union[InstructionRequest, ReviewRequest]


def rewrite_source(
    source: str,
    instruction: str,
    requirement_context: Optional[str] = None,
    provider: Optional[LLMProvider] = None,
) -> str:
    """
    Ask the LLM to apply a free-form instruction to LaTeX source.

    Raises:
        RewriteError: If the call fails or returns nothing
    """
    try:
        revised = complete(
            revise_prompt(source, instruction, requirement_context),
            provider=provider,
            system_prompt=REVISE_SYSTEM_PROMPT,
            max_tokens=8192,
        )
    except Exception as e:
        raise RewriteError("Revision request failed", hint=str(e)) from e

    revised = strip_code_fence(revised)
    if not revised:
        raise RewriteError("Revision service returned an empty document")
    return revised


def _atomic_write(path: Path, data: bytes) -> None:
    """Write bytes via a temp file in the same directory, then os.replace."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


@dataclass
class RevisionLoop:
    """
    Revision state machine for one session.

    Attributes:
        session: Source/artifact paths and optional job context
        rewriter: Revision service (default: rewrite_source)
        compiler: LaTeX compiler (default: compile_pdf)
        state: Current RevisionState
        history: Outcomes of every attempt, oldest first
    """

    session: RevisionSession
    rewriter: Rewriter = rewrite_source
    compiler: Compiler = compile_pdf
    state: RevisionState = RevisionState.IDLE
    history: List[RevisionOutcome] = field(default_factory=list)

    @property
    def snapshot_path(self) -> Path:
        source = Path(self.session.source_path)
        return source.with_name(source.name + SNAPSHOT_SUFFIX)

    def _record(
        self, instruction: str, status: str, message: str, hint: Optional[str] = None
    ) -> RevisionOutcome:
        outcome = RevisionOutcome(instruction=instruction, status=status, message=message, hint=hint)
        self.history.append(outcome)
        log_revision_outcome(outcome)
        return outcome

    def recover(self) -> Optional[RevisionOutcome]:
        """
        Restore the source from a leftover snapshot and re-validate it.

        A snapshot only survives when a previous attempt was interrupted between
        writing the revision and finishing its compile.

        Returns:
            The recovery outcome, or None when there was nothing to recover

        Raises:
            CompilationError: If the restored source no longer compiles
        """
        snapshot = self.snapshot_path
        if not snapshot.exists():
            return None

        source = Path(self.session.source_path)
        _log_info(f"Found interrupted revision, restoring {source.name} from snapshot")
        _atomic_write(source, snapshot.read_bytes())
        snapshot.unlink()

        self.state = RevisionState.COMPILING
        self.session.artifact_path = Path(self.compiler(source))
        self.state = RevisionState.IDLE
        return self._record("", "compiled", f"Recovered previous version of {source.name}")

    def _rollback(self, source: Path, content: bytes, artifact: Optional[bytes]) -> None:
        self.state = RevisionState.ROLLED_BACK
        _atomic_write(source, content)
        if artifact is not None:
            _atomic_write(Path(self.session.artifact_path), artifact)
        if self.snapshot_path.exists():
            self.snapshot_path.unlink()
        _log_debug(f"Restored {source.name} ({len(content)} bytes)")

    def _attempt(self, instruction: str) -> Generator[ReviewRequest, bool, RevisionOutcome]:
        source = Path(self.session.source_path)
        known_good = source.read_bytes()
        current = known_good.decode("utf-8")

        self.state = RevisionState.REQUESTING
        try:
            revised = self.rewriter(current, instruction, self.session.requirement_context)
        except FletcherError as e:
            return self._record(instruction, "rewrite_failed", e.message, e.hint)
        if not revised or not revised.strip():
            return self._record(instruction, "rewrite_failed", "Revision service returned nothing")

        self.state = RevisionState.REVIEWING
        changes = diff_lines(current, revised)
        if not changes:
            return self._record(instruction, "no_changes", "No changes detected")

        accepted = yield ReviewRequest(changes=tuple(changes), revised_source=revised)
        if not accepted:
            return self._record(instruction, "rejected", "Revision discarded")

        self.state = RevisionState.COMPILING
        artifact = Path(self.session.artifact_path)
        previous_artifact = artifact.read_bytes() if artifact.exists() else None

        _atomic_write(self.snapshot_path, known_good)
        _atomic_write(source, revised.encode("utf-8"))
        try:
            pdf_path = self.compiler(source)
        except CompilationError as e:
            self._rollback(source, known_good, previous_artifact)
            return self._record(
                instruction,
                "rolled_back",
                "Compilation failed, reverted to previous version",
                e.hint or e.message,
            )
        except BaseException:
            self._rollback(source, known_good, previous_artifact)
            raise

        self.snapshot_path.unlink()
        self.session.artifact_path = Path(pdf_path)
        return self._record(instruction, "compiled", f"PDF updated: {pdf_path}")

    def run(self) -> Generator[LoopRequest, Union[str, bool, None], Path]:
        """
        Drive the loop until a blank instruction arrives.

        Yields InstructionRequest (send the instruction text) and ReviewRequest
        (send True to accept). Returns the latest known-good artifact path.
        """
        self.recover()

        last_outcome = None
        while True:
            self.state = RevisionState.IDLE
            instruction = yield InstructionRequest(last_outcome)
            if not isinstance(instruction, str) or not instruction.strip():
                self.state = RevisionState.DONE
                return Path(self.session.artifact_path)
            last_outcome = yield from self._attempt(instruction.strip())


def run_revision_loop(
    source_path: Path,
    artifact_path: Path,
    requirement_context: Optional[str] = None,
    rewriter: Optional[Rewriter] = None,
    compiler: Optional[Compiler] = None,
) -> Generator[LoopRequest, Union[str, bool, None], Path]:
    """
    Start a revision session and return its generator.

    Args:
        source_path: Generated .tex file
        artifact_path: Its current compiled PDF
        requirement_context: Job description text passed to the rewriter
        rewriter: Revision service (default: rewrite_source)
        compiler: LaTeX compiler (default: compile_pdf)
    """
    loop = RevisionLoop(
        session=RevisionSession(Path(source_path), Path(artifact_path), requirement_context),
        rewriter=rewriter or rewrite_source,
        compiler=compiler or compile_pdf,
    )
    return loop.run()


def drive(
    loop: Generator[LoopRequest, Union[str, bool, None], Path],
    script: Iterable[Union[str, bool]],
) -> Path:
    """
    Run a revision loop non-interactively from a scripted sequence.

    The script alternates instructions (str) and review decisions (bool) as the
    loop asks for them. When the script runs out, pending reviews are rejected
    and the loop is ended.

    Example:
        >>> drive(run_revision_loop(tex, pdf), ["Shorten the summary", True])
        PosixPath('.../resume.pdf')
    """
    steps = iter(script)
    try:
        request = next(loop)
        while True:
            if isinstance(request, ReviewRequest):
                request = loop.send(bool(next(steps, False)))
            else:
                request = loop.send(next(steps, ""))
    except StopIteration as stop:
        return stop.value

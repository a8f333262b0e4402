"""
Revision Context

Responsibilities:
- Runs the interactive revise -> review -> compile loop on a generated .tex file
- Hides formatting-only line changes from the reviewer
- Rolls the source back when an accepted revision fails to compile

Owns: Revision state machine, recovery snapshots, revision diffs
Never: Decides content selection or renders from the data model
"""

from fletcher.contexts.revision.controller import (
    InstructionRequest,
    ReviewRequest,
    RevisionLoop,
    RevisionOutcome,
    RevisionState,
    drive,
    run_revision_loop,
)

__all__ = [
    "RevisionLoop",
    "RevisionState",
    "RevisionOutcome",
    "InstructionRequest",
    "ReviewRequest",
    "run_revision_loop",
    "drive",
]

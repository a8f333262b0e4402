"""
Line and word diffs for reviewing revised LaTeX source.

Lines are paired by position. Pairs whose sides carry no readable text (pure
markup such as spacing or list commands) are hidden from the reviewer.
"""

import difflib
import re
from dataclasses import dataclass
from itertools import zip_longest
from typing import List

# A markup line keeps fewer than this many characters once commands are stripped
MIN_TEXT_CHARS = 6

_COMMAND_PATTERN = re.compile(r"\\[a-zA-Z]+(\{[^}\s]*\})?")
_RESERVED_PATTERN = re.compile(r"[{}\\%&$#_^~]")


@dataclass(frozen=True)
class LineChange:
    """One changed line pair (either side may be empty)."""

    old: str
    new: str


def is_markup_only(line: str) -> bool:
    """
    Whether a LaTeX line has no human-readable text.

    Example:
        >>> is_markup_only(r"\\vspace{-2pt}\\item")
        True
        >>> is_markup_only(r"\\resumeItem{Built a billing service}")
        False
    """
    stripped = _RESERVED_PATTERN.sub("", _COMMAND_PATTERN.sub("", line)).strip()
    return len(stripped) < MIN_TEXT_CHARS


def diff_lines(old: str, new: str) -> List[LineChange]:
    """
    Pair lines of two sources by position and keep the content changes.

    Lines are trimmed before comparison. Identical pairs, pairs that are blank
    on both sides and pairs that are markup-only on both sides are skipped.
    """
    changes = []
    for old_line, new_line in zip_longest(old.split("\n"), new.split("\n"), fillvalue=""):
        old_line, new_line = old_line.strip(), new_line.strip()
        if old_line == new_line:
            continue
        if is_markup_only(old_line) and is_markup_only(new_line):
            continue
        changes.append(LineChange(old=old_line, new=new_line))
    return changes


def render_word_diff(old: str, new: str) -> str:
    """
    Word-level diff with removals as [-...-] and additions as {+...+}.

    Example:
        >>> render_word_diff("Built a service", "Built a billing service")
        'Built a {+billing+} service'
    """
    old_words, new_words = old.split(), new.split()
    parts = []
    matcher = difflib.SequenceMatcher(a=old_words, b=new_words, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(" ".join(old_words[i1:i2]))
            continue
        if tag in ("replace", "delete"):
            parts.append(f"[-{' '.join(old_words[i1:i2])}-]")
        if tag in ("replace", "insert"):
            parts.append(f"{{+{' '.join(new_words[j1:j2])}+}}")
    return " ".join(parts)

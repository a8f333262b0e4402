"""
LaTeX escaping for user-authored text and URLs.

Free text is escaped in a single pass, so the replacement sequences themselves
(which contain backslashes and braces) are never escaped a second time.
"""

import re

LATEX_SPECIAL_CHARS = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "\\": r"\textbackslash{}",
}

# Typographic characters replaced by their LaTeX ASCII ligatures
TYPOGRAPHIC_REPLACEMENTS = {
    "—": "---",  # em dash
    "–": "--",  # en dash
    "’": "'",  # right single quote
    "‘": "`",  # left single quote
    "”": "''",  # right double quote
    "“": "``",  # left double quote
}

# Structural characters are percent-encoded; the % of the encoding is itself
# escaped so it survives as a literal inside \href
URL_SPECIAL_CHARS = {
    "%": r"\%",
    "#": r"\#",
    "{": r"\%7B",
    "}": r"\%7D",
    "\\": r"\%5C",
}

_SPECIAL_PATTERN = re.compile("|".join(re.escape(c) for c in LATEX_SPECIAL_CHARS))
_TYPOGRAPHIC_PATTERN = re.compile("|".join(TYPOGRAPHIC_REPLACEMENTS))
_URL_PATTERN = re.compile("|".join(re.escape(c) for c in URL_SPECIAL_CHARS))
_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def escape_latex(text: str) -> str:
    """
    Escape LaTeX reserved characters and normalize typographic punctuation.

    Example:
        >>> escape_latex("R&D ~50% of $budget")
        'R\\\\&D \\\\textasciitilde{}50\\\\% of \\\\$budget'
    """
    escaped = _SPECIAL_PATTERN.sub(lambda m: LATEX_SPECIAL_CHARS[m.group(0)], text)
    return _TYPOGRAPHIC_PATTERN.sub(lambda m: TYPOGRAPHIC_REPLACEMENTS[m.group(0)], escaped)


def escape_url(url: str) -> str:
    """
    Make a URL safe to place inside an \\href target.

    % and # are backslash-escaped. Braces and backslashes would unbalance the
    argument, so they are percent-encoded.

    Example:
        >>> escape_url("github.com/jane/a}b#x")
        'github.com/jane/a\\\\%7Db\\\\#x'
    """
    return _URL_PATTERN.sub(lambda m: URL_SPECIAL_CHARS[m.group(0)], url)


def ensure_scheme(url: str) -> str:
    """Prefix https:// to URLs written without a scheme (e.g. github.com/user)."""
    if _SCHEME_PATTERN.match(url):
        return url
    return f"https://{url}"

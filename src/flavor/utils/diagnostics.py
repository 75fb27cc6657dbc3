"""
Diagnostic rendering for Flavor.

Turns a ``FlavorError`` into a compiler-style report:

    error[TypeChecking]: Undefined variable 'circel'
      --> shapes.flv:5:12
       |
     5 | print circel;
       |       ^^^^^^
       = note: did you mean 'circle'?

Also provides the edit-distance helpers used to build "did you mean"
notes for misspelled names.
"""

import os
from typing import Optional

from flavor.utils.errors import FlavorError, Span


# =============================================================================
# ANSI Colors
# =============================================================================

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[91m"
BLUE = "\033[94m"


def color_enabled(stream=None) -> bool:
    """
    Decide whether colored output should be produced.

    Colors are disabled when the ``NO_COLOR`` environment variable is set
    or when the target stream is not a terminal.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if stream is None:
        return True
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


# =============================================================================
# Rendering
# =============================================================================


def _underline(span: Span, line_text: str) -> tuple[int, int]:
    """Return (padding, width) of the caret underline for ``span``."""
    padding = max(span.start_column - 1, 0)
    if span.is_multiline:
        width = len(line_text) - padding
    else:
        width = span.end_column - span.start_column + 1
    return padding, max(width, 1)


def render_error(
    error: FlavorError,
    source: str,
    filename: Optional[str] = None,
    use_color: bool = True,
) -> str:
    """
    Render an error as a formatted multi-line string.

    Args:
        error: The diagnostic to render
        source: The source text the diagnostic refers to
        filename: Optional filename shown in the locator line
        use_color: Whether to use ANSI color codes

    Returns:
        The rendered report, without a trailing newline
    """
    reset = RESET if use_color else ""
    bold = BOLD if use_color else ""
    red = RED if use_color else ""
    blue = BLUE if use_color else ""

    lines = [f"{red}{bold}error[{error.phase}]{reset}: {bold}{error.message}{reset}"]

    span = error.span
    if span is not None:
        locator = f"{filename}:{span}" if filename else str(span)
        lines.append(f"  {blue}-->{reset} {locator}")

        source_lines = source.splitlines()
        if 1 <= span.start_line <= len(source_lines):
            line_text = source_lines[span.start_line - 1]
            gutter = " " * len(str(span.start_line))
            padding, width = _underline(span, line_text)
            lines.append(f" {gutter} {blue}|{reset}")
            lines.append(f" {blue}{span.start_line} |{reset} {line_text}")
            lines.append(
                f" {gutter} {blue}|{reset} {' ' * padding}{red}{'^' * width}{reset}"
            )

    for note in error.notes:
        lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

    return "\n".join(lines)


# =============================================================================
# String Similarity (Levenshtein Distance)
# =============================================================================


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The minimum number of single-character edits turning s1 into s2
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def suggest_similar(name: str, candidates, max_distance: int = 2) -> Optional[str]:
    """Return the closest candidate within ``max_distance`` edits, if any."""
    best: Optional[str] = None
    best_distance = max_distance + 1
    for candidate in sorted(set(candidates)):
        if candidate == name:
            continue
        distance = levenshtein_distance(name, candidate)
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best

# quotes.py
"""
Remove quoted replies and forwarded messages from a plain-text body.

Mail clients mark the start of quoted content in many ways. Single-line
markers are compiled into one line-anchored alternation; the multi-line
"On ... wrote:" header gets its own scan. The earliest marker wins.
"""
import re
from typing import Optional

_BOUNDARY_VARIANTS = [
    # From: <email>, also >From: <email>
    r">?[ \t]*from:.*[a-z0-9]+@[a-z0-9]+.*",

    # gmail style reply: date <email>
    r"[0-9]{4}/[0-9]{1,2}/[0-9]{1,2} .* <\s*\S+@\S+\s*>",

    # some email clients just say email@domain.com wrote:
    r".*[a-z0-9]@[a-z0-9].*wrote:",

    # forwarded stuff
    r"_{4,}",
    r".*forwarded\s+message:",
    r".*original\s+message:",
    r"-+\s*forwarded\s+message\s*-+",
    r"-+\s*original\s+message\s*-+",
]

QUOTE_BOUNDARY_RE = re.compile(
    r"^(?:" + "|".join(_BOUNDARY_VARIANTS) + r")[ \t]*\r?$",
    re.IGNORECASE | re.MULTILINE,
)

# "On <date>, <someone>\n<email> wrote:" can span lines, so it is found with
# two linear scans instead of a lazy cross-line pattern
_ON_LINE_RE = re.compile(r"^on\s", re.IGNORECASE | re.MULTILINE)
_WROTE_RE = re.compile(r"wrote", re.IGNORECASE)


def _last_wrote(text: str) -> Optional[int]:
    """Offset of "wrote" on the last line ending in "wrote...:", or None."""
    last = None
    start = 0
    for line in text.split("\n"):
        end = len(line) - 1 if line.endswith("\r") else len(line)
        head = line[:end].rstrip(" \t")
        if head.endswith(":"):
            found = None
            for m in _WROTE_RE.finditer(head, 0, len(head) - 1):
                found = m
            if found:
                last = start + found.start()
        start += len(line) + 1
    return last


def find_on_wrote(text: str) -> Optional[int]:
    """Offset of the first line opening an "On ... wrote:" header, or None."""
    wrote = _last_wrote(text)
    if wrote is None:
        return None
    m = _ON_LINE_RE.search(text)
    if m and m.end() <= wrote:
        return m.start()
    return None


def find_quote_boundary(text: str) -> Optional[int]:
    """Offset of the line where quoted content starts, or None."""
    candidates = []
    m = QUOTE_BOUNDARY_RE.search(text)
    if m:
        candidates.append(m.start())
    on_wrote = find_on_wrote(text)
    if on_wrote is not None:
        candidates.append(on_wrote)
    return min(candidates, default=None)


def strip_quoted(text: str) -> str:
    """Cut the text before the first quote boundary and trim it."""
    loc = find_quote_boundary(text)
    if loc is not None:
        text = text[:loc]
    return text.strip()


def is_substantive(line: str, allow_non_letter_lines: bool = False) -> bool:
    if len(line) <= 3:
        return False
    return allow_non_letter_lines or any(c.isalpha() for c in line)


def drop_noise_lines(text: str, allow_non_letter_lines: bool = False) -> str:
    """Trim every line and keep only the ones worth reading."""
    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if is_substantive(line, allow_non_letter_lines):
            lines.append(line)
    return "\n".join(lines)


def strip(text: str, allow_non_letter_lines: bool = False) -> str:
    return drop_noise_lines(strip_quoted(text), allow_non_letter_lines)


def trim_print(s: str) -> str:
    """Drop non-printable characters, then surrounding whitespace."""
    return "".join(c for c in s if c.isprintable()).strip()

# keyload/resolver.py
from __future__ import annotations
from typing import List
import glob, os
from .errors import PatternError


def _check_pattern(pattern: str) -> None:
    if "\0" in pattern:
        raise PatternError("pattern contains a NUL byte")

    # An unterminated "[" is a syntax error here, not a literal
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\" and os.sep != "\\":
            i += 2
            continue
        if ch == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise PatternError(f"syntax error in pattern: unterminated '[' at offset {i}")
            i = j
        i += 1


def resolve(pattern: str) -> List[str]:
    """
    Expand a shell-style pattern into the regular files it matches.

    Matches come back sorted; a pattern without wildcards resolves to itself
    when the file exists. "**" matches across directories.
    """
    _check_pattern(pattern)
    matches = glob.glob(os.path.expanduser(pattern), recursive=True)
    return sorted(m for m in matches if os.path.isfile(m))

"""Segment matching and pattern decomposition.

Everything here is pure and synchronous. The matching rules follow the
classic shell grammar one path segment at a time:

* ``?`` matches exactly one character.
* ``*`` matches any run of characters, including none.
* ``[set]`` matches one character from *set*; ``[^set]`` and ``[!set]``
  negate it.  A set is a sequence of characters and ``lo-hi`` ranges.
* ``\\x`` matches ``x`` literally when the flavour supports escaping.

Names are opaque strings: matching is case-sensitive and leading dots are
not special.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._exceptions import BadPatternError
from ._path import DEFAULT_FLAVOUR, PathFlavour

META_CHARS = "*?["


@dataclass(frozen=True)
class Segment:
    text: str
    is_meta: bool = False


@dataclass(frozen=True)
class ParsedPattern:
    pattern: str
    root: str
    segments: tuple[Segment, ...]
    separator: str
    # Separators the pattern ends with; a match must then be a directory
    # and keeps them.
    trailing: str = ""
    # No metacharacters and nothing escaped: the pattern is its own match.
    literal: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.root and not self.segments


def has_meta(segment: str, escape: bool = True) -> bool:
    """Report whether *segment* contains an unescaped metacharacter."""
    i = 0
    while i < len(segment):
        ch = segment[i]
        if escape and ch == "\\":
            i += 2
            continue
        if ch in META_CHARS:
            return True
        i += 1
    return False


def unescape(segment: str, escape: bool = True) -> str:
    if not escape or "\\" not in segment:
        return segment
    out: list[str] = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == "\\":
            i += 1
            if i >= len(segment):
                raise BadPatternError(segment, "trailing escape character")
            ch = segment[i]
        out.append(ch)
        i += 1
    return "".join(out)


# ---------------------------------------------------------------------------
#  Segment matcher
# ---------------------------------------------------------------------------


def _scan_chunk(pattern: str, escape: bool) -> tuple[bool, str, str]:
    """Split off leading stars and the literal/class chunk that follows."""
    star = False
    while pattern.startswith("*"):
        pattern = pattern[1:]
        star = True
    in_range = False
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and escape:
            # Skip the escaped character; a trailing backslash is left for
            # _match_chunk to reject.
            if i + 1 < len(pattern):
                i += 1
        elif ch == "[":
            in_range = True
        elif ch == "]":
            in_range = False
        elif ch == "*" and not in_range:
            break
        i += 1
    return star, pattern[:i], pattern[i:]


def _get_esc(chunk: str, i: int, escape: bool) -> tuple[str, int]:
    """Read one (possibly escaped) character of a bracket set at *i*."""
    if i >= len(chunk) or chunk[i] in "-]":
        raise BadPatternError(chunk, "malformed character class")
    if chunk[i] == "\\" and escape:
        i += 1
        if i >= len(chunk):
            raise BadPatternError(chunk, "malformed character class")
    ch = chunk[i]
    i += 1
    if i >= len(chunk):
        raise BadPatternError(chunk, "unterminated character class")
    return ch, i


def _match_chunk(chunk: str, s: str, escape: bool) -> tuple[str, bool]:
    """Match *chunk* against a prefix of *s*.

    Returns ``(rest, matched)``. The whole chunk is parsed even after a
    mismatch so that malformed syntax is always reported.
    """
    failed = False
    i = 0
    while i < len(chunk):
        if not failed and not s:
            failed = True
        ch = chunk[i]
        if ch == "[":
            r = ""
            if not failed:
                r, s = s[0], s[1:]
            i += 1
            negated = False
            if i < len(chunk) and chunk[i] in "^!":
                negated = True
                i += 1
            matched = False
            nrange = 0
            while True:
                if i < len(chunk) and chunk[i] == "]" and nrange > 0:
                    i += 1
                    break
                lo, i = _get_esc(chunk, i, escape)
                hi = lo
                if chunk[i] == "-":
                    hi, i = _get_esc(chunk, i + 1, escape)
                if not failed and lo <= r <= hi:
                    matched = True
                nrange += 1
            if matched == negated:
                failed = True
        elif ch == "?":
            if not failed:
                s = s[1:]
            i += 1
        elif ch == "\\" and escape:
            i += 1
            if i >= len(chunk):
                raise BadPatternError(chunk, "trailing escape character")
            if not failed:
                if chunk[i] != s[0]:
                    failed = True
                s = s[1:]
            i += 1
        else:
            if not failed:
                if ch != s[0]:
                    failed = True
                s = s[1:]
            i += 1
    if failed:
        return "", False
    return s, True


def match_segment(pattern: str, name: str, escape: bool = True) -> bool:
    """Report whether *name* matches the single-segment *pattern*.

    Raises :class:`BadPatternError` if *pattern* is malformed, whether or
    not *name* matches.
    """
    try:
        return _match(pattern, name, escape)
    except BadPatternError as exc:
        if exc.pattern == pattern:
            raise
        raise BadPatternError(pattern, exc.reason) from None


def _match(pattern: str, name: str, escape: bool) -> bool:
    while pattern:
        star, chunk, pattern = _scan_chunk(pattern, escape)
        if star and not chunk:
            # Trailing star swallows the rest of the name.
            return True
        t, ok = _match_chunk(chunk, name, escape)
        # With more pattern left, a literal match must be followed by the
        # rest of the pattern; at the end it must consume the whole name.
        if ok and (not t or pattern):
            name = t
            continue
        if star:
            for i in range(len(name)):
                t, ok = _match_chunk(chunk, name[i + 1:], escape)
                if ok:
                    if not pattern and t:
                        continue
                    name = t
                    break
            else:
                ok = False
            if ok:
                continue
        while pattern:
            _, chunk, pattern = _scan_chunk(pattern, escape)
            _match_chunk(chunk, "", escape)
        return False
    return not name


def validate_segment(segment: str, escape: bool = True) -> None:
    """Raise :class:`BadPatternError` if *segment* is malformed."""
    match_segment(segment, "", escape)


# ---------------------------------------------------------------------------
#  Pattern decomposition
# ---------------------------------------------------------------------------


def decompose(pattern: str, flavour: PathFlavour | None = None) -> ParsedPattern:
    """Split *pattern* into its root and classified segments.

    Every meta segment is validated here, so a malformed pattern fails
    before the filesystem is touched.
    """
    flavour = flavour or DEFAULT_FLAVOUR
    root, rest = flavour.split_root(pattern)
    parts = flavour.split(rest)
    trailing = rest[len(rest.rstrip(flavour.separators)):] if parts else ""
    segments: list[Segment] = []
    for part in parts:
        if has_meta(part, flavour.escape):
            try:
                validate_segment(part, flavour.escape)
            except BadPatternError as exc:
                raise BadPatternError(pattern, exc.reason) from None
            segments.append(Segment(part, is_meta=True))
        else:
            try:
                literal = unescape(part, flavour.escape)
            except BadPatternError as exc:
                raise BadPatternError(pattern, exc.reason) from None
            segments.append(Segment(literal))
    return ParsedPattern(
        pattern=pattern,
        root=root,
        segments=tuple(segments),
        separator=flavour.separator_for(pattern),
        trailing=trailing,
        literal=not any(s.is_meta for s in segments)
        and not (flavour.escape and "\\" in pattern),
    )

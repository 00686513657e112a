"""Comment directives that opt declarations out of (or into) generation.

    // @typescript-ignore Foo, Bar
    // @typescript-generate: Baz

The short spellings `@ignore` and `@generate` are accepted as well.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_IGNORE_RE = re.compile(r"@(?:typescript-)?ignore[:]?(?P<names>.*)")
_GENERATE_RE = re.compile(r"@(?:typescript-)?generate[:]?(?P<names>.*)")


@dataclass(frozen=True)
class Directives:
    ignored: frozenset[str]
    allowed: frozenset[str]
    # A generate directive was present, even if every name it lists is ignored.
    restricted: bool = False


def _names(pattern: re.Pattern[str], line: str) -> list[str]:
    m = pattern.search(line)
    if m is None:
        return []
    return [s.strip() for s in m.group("names").split(",") if s.strip()]


def scan_directives(comments: Iterable[str]) -> Directives:
    ignored: set[str] = set()
    allowed: set[str] = set()
    for text in comments:
        for line in text.splitlines():
            ignored.update(_names(_IGNORE_RE, line))
            allowed.update(_names(_GENERATE_RE, line))
    # Ignoring wins over generating.
    return Directives(
        ignored=frozenset(ignored),
        allowed=frozenset(allowed - ignored),
        restricted=bool(allowed),
    )

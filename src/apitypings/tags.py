"""Go struct tag parsing (`json:"name,omitempty" typescript:"string"`)."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TagSyntaxError


@dataclass(frozen=True)
class Tag:
    key: str
    name: str
    options: tuple[str, ...] = ()

    def has_option(self, opt: str) -> bool:
        return opt in self.options


def parse_tags(raw: str) -> dict[str, Tag]:
    """Parse a struct tag into key -> Tag. The first occurrence of a key wins."""
    tags: dict[str, Tag] = {}
    i = 0
    n = len(raw)
    while True:
        while i < n and raw[i] == " ":
            i += 1
        if i >= n:
            return tags

        start = i
        while i < n and raw[i] > " " and raw[i] not in ':"\x7f':
            i += 1
        key = raw[start:i]
        if not key:
            raise TagSyntaxError(f"bad syntax for struct tag key in {raw!r}")
        if i + 1 >= n or raw[i] != ":" or raw[i + 1] != '"':
            raise TagSyntaxError(f"bad syntax for struct tag pair {key!r} in {raw!r}")
        i += 2

        chars: list[str] = []
        while True:
            if i >= n:
                raise TagSyntaxError(f"bad syntax for struct tag value {key!r} in {raw!r}")
            c = raw[i]
            if c == '"':
                i += 1
                break
            if c == "\\":
                if i + 1 >= n:
                    raise TagSyntaxError(f"bad escape in struct tag value {key!r} in {raw!r}")
                chars.append(raw[i + 1])
                i += 2
                continue
            chars.append(c)
            i += 1

        name, *options = "".join(chars).split(",")
        tags.setdefault(key, Tag(key=key, name=name, options=tuple(options)))

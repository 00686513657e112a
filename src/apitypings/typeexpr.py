"""Parse Go type text (as printed by `go/types`) into `gotypes` trees."""

from __future__ import annotations

import re

from . import gotypes
from .errors import TypeExprError

_IDENT_RE = re.compile(r"[\w./\-]+")
_METHOD_RE = re.compile(r"^[A-Za-z_]\w*\s*\(")
_CLOSERS = {"(": ")", "[": "]", "{": "}"}
_STOP_CHARS = ",;])}|"


def parse_type(
    text: str,
    *,
    local_pkg: str = "",
    type_params: dict[str, str] | None = None,
) -> gotypes.Type:
    """Parse one Go type expression.

    Unqualified identifiers that are not basic kinds resolve to a type parameter
    from `type_params` (name -> constraint text) or, failing that, to a named
    type of `local_pkg`.
    """
    p = _Parser(text, local_pkg=local_pkg, type_params=type_params or {})
    t = p.type_()
    p.skip_ws()
    if not p.at_end():
        raise TypeExprError(f"unexpected {text[p.pos:]!r} in type {text!r}")
    return t


def split_top_level(text: str, sep: str) -> list[str]:
    """Split `text` on `sep`, ignoring separators nested in brackets or quotes."""
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        c = text[i]
        if c in "\"`":
            i = _skip_quoted(text, i)
            continue
        if c in "([{":
            depth += 1
        elif c in ")]}":
            depth -= 1
        elif depth == 0 and text.startswith(sep, i):
            parts.append(text[start:i])
            i += len(sep)
            start = i
            continue
        i += 1
    parts.append(text[start:])
    return parts


def _skip_quoted(text: str, i: int) -> int:
    quote = text[i]
    i += 1
    while i < len(text):
        if text[i] == "\\" and quote == '"':
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    raise TypeExprError(f"unterminated string in {text!r}")


class _Parser:
    def __init__(self, text: str, *, local_pkg: str, type_params: dict[str, str]):
        self.text = text
        self.pos = 0
        self.local_pkg = local_pkg
        self.type_params = type_params

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def skip_ws(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def _startswith(self, s: str) -> bool:
        return self.text.startswith(s, self.pos)

    def _expect(self, s: str) -> None:
        self.skip_ws()
        if not self._startswith(s):
            raise TypeExprError(f"expected {s!r} at {self.pos} in type {self.text!r}")
        self.pos += len(s)

    def _balanced(self) -> str:
        """Consume a bracketed group starting at the cursor and return its inner text."""
        opener = self.text[self.pos]
        closer = _CLOSERS[opener]
        depth = 0
        start = self.pos + 1
        i = self.pos
        while i < len(self.text):
            c = self.text[i]
            if c in "\"`":
                i = _skip_quoted(self.text, i)
                continue
            if c == opener:
                depth += 1
            elif c == closer:
                depth -= 1
                if depth == 0:
                    self.pos = i + 1
                    return self.text[start:i]
            i += 1
        raise TypeExprError(f"unbalanced {opener!r} in type {self.text!r}")

    def _sub(self, text: str) -> gotypes.Type:
        return parse_type(text, local_pkg=self.local_pkg, type_params=self.type_params)

    def type_(self) -> gotypes.Type:
        self.skip_ws()
        if self.at_end():
            raise TypeExprError(f"missing type in {self.text!r}")

        if self._startswith("*"):
            self.pos += 1
            return gotypes.Pointer(self.type_())
        if self._startswith("[]"):
            self.pos += 2
            return gotypes.Slice(self.type_())
        if self._startswith("["):
            length = self._balanced().strip()
            if not length.isdigit():
                raise TypeExprError(f"invalid array length {length!r} in type {self.text!r}")
            return gotypes.Array(int(length), self.type_())
        if self._startswith("<-"):
            self.pos += 2
            self._expect("chan")
            return gotypes.Chan("recv", self.type_())
        if self._startswith("("):
            # Parenthesized type, e.g. a function result list.
            return self._sub(self._balanced())

        m = _IDENT_RE.match(self.text, self.pos)
        if m is None:
            raise TypeExprError(f"unexpected {self.text[self.pos:]!r} in type {self.text!r}")
        word = m.group(0)
        self.pos = m.end()

        if word == "map":
            self.skip_ws()
            if not self._startswith("["):
                raise TypeExprError(f"expected map key in type {self.text!r}")
            key = self._sub(self._balanced())
            return gotypes.Map(key, self.type_())
        if word == "chan":
            self.skip_ws()
            if self._startswith("<-"):
                self.pos += 2
                return gotypes.Chan("send", self.type_())
            return gotypes.Chan("both", self.type_())
        if word == "func":
            return self._signature(m.start())
        if word == "struct":
            self.skip_ws()
            if not self._startswith("{"):
                raise TypeExprError(f"expected struct body in type {self.text!r}")
            return gotypes.Struct(self._balanced().strip())
        if word == "interface":
            self.skip_ws()
            if not self._startswith("{"):
                raise TypeExprError(f"expected interface body in type {self.text!r}")
            return self._interface(self._balanced())
        return self._named(word)

    def _signature(self, start: int) -> gotypes.Signature:
        self.skip_ws()
        if not self._startswith("("):
            raise TypeExprError(f"expected parameters in type {self.text!r}")
        self._balanced()
        # Optional result: a parenthesized list or a single type.
        save = self.pos
        self.skip_ws()
        if self._startswith("("):
            self._balanced()
        elif not self.at_end() and self.text[self.pos] not in _STOP_CHARS:
            self.type_()
        else:
            self.pos = save
        return gotypes.Signature(self.text[start : self.pos].strip())

    def _interface(self, body: str) -> gotypes.Interface:
        methods: list[str] = []
        embeddeds: list[gotypes.Type] = []
        for elem in split_top_level(body.replace("\n", ";"), ";"):
            elem = elem.strip()
            if not elem:
                continue
            if _METHOD_RE.match(elem):
                methods.append(elem)
                continue
            terms: list[gotypes.Term] = []
            for raw in split_top_level(elem, "|"):
                raw = raw.strip()
                tilde = raw.startswith("~")
                terms.append(gotypes.Term(tilde, self._sub(raw.lstrip("~"))))
            if len(terms) == 1 and not terms[0].tilde:
                embeddeds.append(terms[0].type)
            else:
                embeddeds.append(gotypes.Union(tuple(terms)))
        return gotypes.Interface(tuple(methods), tuple(embeddeds))

    def _named(self, word: str) -> gotypes.Type:
        args: tuple[gotypes.Type, ...] = ()
        if self._startswith("["):
            args = tuple(self._sub(a) for a in split_top_level(self._balanced(), ","))

        if "." in word and word != "unsafe.Pointer":
            pkg, _, name = word.rpartition(".")
            if not pkg or not name:
                raise TypeExprError(f"invalid qualified name {word!r} in type {self.text!r}")
            return gotypes.Named(pkg, name, args)

        if args:
            return gotypes.Named(self.local_pkg, word, args)
        if word in gotypes.BASIC_KINDS:
            return gotypes.Basic(word)
        if word == "any":
            return gotypes.Interface()
        if word == "error":
            return gotypes.Interface(methods=("Error() string",))
        if word == "comparable":
            return gotypes.Named("", "comparable")
        if word in self.type_params:
            return gotypes.TypeParam(word, self.type_params[word])
        if not self.local_pkg:
            raise TypeExprError(f"unqualified type {word!r} without a package in {self.text!r}")
        return gotypes.Named(self.local_pkg, word)

"""Go type trees as exposed by the type-checking front end.

Every node renders back to Go type text with `str()`, which is what error
messages and provenance comments use.
"""

from __future__ import annotations

from dataclasses import dataclass
import typing

BASIC_KINDS = frozenset(
    {
        "bool",
        "string",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "float32",
        "float64",
        "complex64",
        "complex128",
        "byte",
        "rune",
        "unsafe.Pointer",
    }
)

# `byte` is an alias of `uint8`; the front end prints whichever was declared.
BYTE_KINDS = frozenset({"byte", "uint8"})

NUMERIC_KINDS = BASIC_KINDS - {"bool", "string", "unsafe.Pointer"}


@dataclass(frozen=True)
class Basic:
    name: str

    @property
    def is_byte(self) -> bool:
        return self.name in BYTE_KINDS

    @property
    def is_numeric(self) -> bool:
        return self.name in NUMERIC_KINDS

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Named:
    # Package import path; empty for universe types such as `comparable`.
    pkg: str
    name: str
    args: tuple["Type", ...] = ()

    @property
    def qualified(self) -> str:
        return f"{self.pkg}.{self.name}" if self.pkg else self.name

    def __str__(self) -> str:
        if not self.args:
            return self.qualified
        return f"{self.qualified}[{', '.join(str(a) for a in self.args)}]"


@dataclass(frozen=True)
class Pointer:
    elem: "Type"

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class Slice:
    elem: "Type"

    def __str__(self) -> str:
        return f"[]{self.elem}"


@dataclass(frozen=True)
class Array:
    length: int
    elem: "Type"

    def __str__(self) -> str:
        return f"[{self.length}]{self.elem}"


@dataclass(frozen=True)
class Map:
    key: "Type"
    elem: "Type"

    def __str__(self) -> str:
        return f"map[{self.key}]{self.elem}"


@dataclass(frozen=True)
class Chan:
    # "both", "send" or "recv"
    dir: str
    elem: "Type"

    def __str__(self) -> str:
        if self.dir == "send":
            return f"chan<- {self.elem}"
        if self.dir == "recv":
            return f"<-chan {self.elem}"
        return f"chan {self.elem}"


@dataclass(frozen=True)
class Struct:
    """Anonymous struct. Field contents are kept as text; they are never expanded."""

    body: str = ""

    def __str__(self) -> str:
        return f"struct{{{self.body}}}"


@dataclass(frozen=True)
class Signature:
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Term:
    tilde: bool
    type: "Type"

    def __str__(self) -> str:
        return f"~{self.type}" if self.tilde else str(self.type)


@dataclass(frozen=True)
class Union:
    terms: tuple[Term, ...]

    def __str__(self) -> str:
        return " | ".join(str(t) for t in self.terms)


@dataclass(frozen=True)
class Interface:
    methods: tuple[str, ...] = ()
    embeddeds: tuple["Type", ...] = ()

    @property
    def empty(self) -> bool:
        return not self.methods and not self.embeddeds

    def __str__(self) -> str:
        elems = [*self.methods, *(str(e) for e in self.embeddeds)]
        if not elems:
            return "interface{}"
        return f"interface{{{'; '.join(elems)}}}"


@dataclass(frozen=True)
class TypeParam:
    name: str
    # Constraint as printed by the front end, e.g. "comparable" or "example.com/p.Number".
    constraint: str

    def __str__(self) -> str:
        return self.name


Type = typing.Union[
    Basic,
    Named,
    Pointer,
    Slice,
    Array,
    Map,
    Chan,
    Struct,
    Signature,
    Union,
    Interface,
    TypeParam,
]

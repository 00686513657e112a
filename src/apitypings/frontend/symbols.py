from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .. import gotypes


@dataclass(frozen=True)
class TypeParamDecl:
    name: str
    constraint: str


@dataclass(frozen=True)
class FieldDecl:
    name: str
    type: gotypes.Type
    tag: str = ""
    embedded: bool = False


@dataclass(frozen=True)
class TypeDecl:
    name: str
    file: str = ""
    line: int = 0
    type_params: tuple[TypeParamDecl, ...] = ()
    # Exactly one of `fields` (struct underlying) or `underlying` is set.
    fields: tuple[FieldDecl, ...] | None = None
    underlying: gotypes.Type | None = None

    @property
    def is_struct(self) -> bool:
        return self.fields is not None


@dataclass(frozen=True)
class ConstDecl:
    name: str
    # Declared type; None for untyped constants.
    type: gotypes.Type | None
    value: Any
    file: str = ""
    line: int = 0


@dataclass(frozen=True)
class VarDecl:
    name: str
    file: str = ""
    line: int = 0


@dataclass(frozen=True)
class FuncDecl:
    name: str
    file: str = ""
    line: int = 0


Decl = TypeDecl | ConstDecl | VarDecl | FuncDecl


@dataclass(frozen=True)
class SourceFile:
    name: str
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeclarationScope:
    """All top-level declarations of one Go package."""

    path: str
    name: str
    decls: tuple[Decl, ...] = ()
    files: tuple[SourceFile, ...] = ()
    # qualified Go name -> underlying type, for named types of packages not loaded as scopes
    foreign: dict[str, gotypes.Type] = field(default_factory=dict)

    def lookup(self, name: str) -> TypeDecl | None:
        for d in self.decls:
            if isinstance(d, TypeDecl) and d.name == name:
                return d
        return None

    def sorted_decls(self) -> list[Decl]:
        return sorted(self.decls, key=lambda d: d.name)

    @property
    def comments(self) -> list[str]:
        return [c for f in self.files for c in f.comments]

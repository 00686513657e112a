"""Decide what kind of TypeScript declaration a Go declaration becomes."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from . import gotypes
from .enums import build_union, union_of
from .errors import UnsupportedDeclarationError, UnsupportedTypeError
from .frontend.symbols import ConstDecl, Decl, FuncDecl, TypeDecl, VarDecl
from .records import build_record

if TYPE_CHECKING:
    from .generator import Generator, Maps


class Shape(enum.Enum):
    RECORD = "record"
    SCALAR_ALIAS = "scalar_alias"
    CONTAINER_ALIAS = "container_alias"
    GENERIC_UNION = "generic_union"
    OPAQUE = "opaque"


def classify(decl: TypeDecl) -> Shape:
    if decl.is_struct:
        return Shape.RECORD
    u = decl.underlying
    if isinstance(u, gotypes.Basic):
        return Shape.SCALAR_ALIAS
    if isinstance(u, (gotypes.Map, gotypes.Slice, gotypes.Array)):
        return Shape.CONTAINER_ALIAS
    if isinstance(u, gotypes.Interface):
        # Only single-element constraint interfaces become unions.
        if len(u.embeddeds) == 1:
            return Shape.GENERIC_UNION
        return Shape.OPAQUE
    if isinstance(u, gotypes.Signature):
        return Shape.OPAQUE
    # If you hit this, a new kind of named type was added. Add a Shape for it.
    raise UnsupportedDeclarationError(f"unsupported named type {str(u)!r}")


def _record(gen: "Generator", maps: "Maps", decl: TypeDecl) -> None:
    maps.structs[gen.obj_name(decl.name)] = build_record(gen, decl)


def _scalar_alias(gen: "Generator", maps: "Maps", decl: TypeDecl) -> None:
    # Enums; expanded once all constants are known.
    maps.enums[gen.obj_name(decl.name)] = decl


def _container_alias(gen: "Generator", maps: "Maps", decl: TypeDecl) -> None:
    # Declared maps/slices have no fields, hence no tags. They are never enums.
    assert decl.underlying is not None
    try:
        ts = gen.mapper.typescript_type(decl.underlying)
    except UnsupportedTypeError as e:
        raise UnsupportedTypeError(f"(map) {e}") from None
    name = gen.obj_name(decl.name)
    lines = [gen.pos_line(decl)]
    if ts.above_type_line:
        lines.append(ts.above_type_line)
    lines.append(f"export type {name} = {ts.value_type}")
    maps.structs[name] = "\n".join(lines) + "\n"


def _generic_union(gen: "Generator", maps: "Maps", decl: TypeDecl) -> None:
    assert isinstance(decl.underlying, gotypes.Interface)
    union = union_of(decl.underlying)
    maps.generics[gen.obj_name(decl.name)] = build_union(gen, decl, union)


def _opaque(gen: "Generator", maps: "Maps", decl: TypeDecl) -> None:
    return None


_HANDLERS = {
    Shape.RECORD: _record,
    Shape.SCALAR_ALIAS: _scalar_alias,
    Shape.CONTAINER_ALIAS: _container_alias,
    Shape.GENERIC_UNION: _generic_union,
    Shape.OPAQUE: _opaque,
}


def generate_one(gen: "Generator", maps: "Maps", decl: Decl, allowed: frozenset[str]) -> None:
    if decl.name in gen.state.ignored:
        return

    # In allow-list mode only allowed names are generated. Constants pass
    # through; they only show up if their enum is allowed.
    if gen.state.restricted and decl.name not in allowed:
        if not isinstance(decl, ConstDecl):
            return

    if isinstance(decl, TypeDecl):
        _HANDLERS[classify(decl)](gen, maps, decl)
    elif isinstance(decl, ConstDecl):
        # Only constants of a named type are enum members.
        if isinstance(decl.type, gotypes.Named):
            maps.enum_consts.setdefault(gen.type_obj_name(decl.type), []).append(decl)
    elif isinstance(decl, (VarDecl, FuncDecl)):
        return

"""Literal-union enums from typed constants, and union aliases from constraint interfaces."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from . import gotypes
from .errors import UnsupportedTypeError
from .frontend.symbols import ConstDecl, TypeDecl

if TYPE_CHECKING:
    from .generator import Generator


def plural_name(name: str) -> str:
    if name.endswith("s"):
        return name + "es"
    return name + "s"


def enum_literal(value: Any) -> str:
    """Render a constant value the way Go prints constant literals."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return repr(value)
    raise UnsupportedTypeError(f"unsupported constant value {value!r}")


def render_enum(pos_line: str, name: str, consts: list[ConstDecl]) -> str:
    values = sorted({enum_literal(c.value) for c in consts})
    # It's possible an enum has no values.
    joined = " | ".join(values) or "never"
    return (
        f"{pos_line}\n"
        f"export type {name} = {joined}\n"
        # Array used for enumerating all possible values.
        f"export const {plural_name(name)}: {name}[] = [{', '.join(values)}]\n"
    )


def write_enums(
    gen: "Generator",
    enums: dict[str, TypeDecl],
    enum_consts: dict[str, list[ConstDecl]],
) -> dict[str, str]:
    blocks: dict[str, str] = {}
    for name, decl in enums.items():
        try:
            blocks[name] = render_enum(gen.pos_line(decl), name, enum_consts.get(name, []))
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"enum {name!r}: {e}") from None
    return blocks


def union_of(iface: gotypes.Interface) -> gotypes.Union:
    """The single embedded element of a constraint interface, as a union.

    A bare embedded type becomes a one-term union.
    """
    (embedded,) = iface.embeddeds
    if isinstance(embedded, gotypes.Union):
        return embedded
    return gotypes.Union((gotypes.Term(True, embedded),))


def build_union(gen: "Generator", decl: TypeDecl, union: gotypes.Union) -> str:
    all_types: list[str] = []
    optional = False
    for term in union.terms:
        try:
            ts = gen.mapper.typescript_type(term.type)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(
                f"union {str(union)!r} for {decl.name!r} failed to get type: {e}"
            ) from None
        if ts.value_type not in all_types:
            all_types.append(ts.value_type)
        optional = optional or ts.optional

    if optional:
        all_types.append("null")

    return f"{gen.pos_line(decl)}\nexport type {gen.obj_name(decl.name)} = {' | '.join(all_types)}\n"

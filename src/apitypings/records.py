from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from . import gotypes
from .errors import GenericParamError, UnsupportedTypeError
from .frontend.symbols import FieldDecl, TypeDecl
from .tags import Tag, parse_tags
from .tstype import INDENT, TypescriptType

if TYPE_CHECKING:
    from .generator import Generator


def _is_exported(name: str) -> bool:
    return name[:1].isupper()


def _extends_target(gen: "Generator", f: FieldDecl, tags: dict[str, Tag]) -> gotypes.Named | None:
    """Return the embedded type when the field should become an `extends` clause.

    A json tag makes encoding/json treat the field as a regular named field.
    """
    if not f.embedded or tags.get("json", Tag("json", "")).name:
        return None
    t = f.type.elem if isinstance(f.type, gotypes.Pointer) else f.type
    if not isinstance(t, gotypes.Named) or t.pkg != gen.scope.path:
        return None
    if gen.scope.lookup(t.name) is None:
        return None
    return t


def build_record(gen: "Generator", decl: TypeDecl) -> str:
    """Render a struct declaration as an exported TypeScript interface."""
    extends: list[str] = []
    fields: list[str] = []
    # generic name -> constraint, as discovered while walking the fields
    generics_used: dict[str, str] = {}

    def use_generics(ts: TypescriptType) -> None:
        for name, constraint in ts.generic_types.items():
            # First binding wins; Go forbids one parameter with two constraints.
            generics_used.setdefault(name, constraint)

    for f in decl.fields or ():
        tags = parse_tags(f.tag)

        base = _extends_target(gen, f, tags)
        if base is not None:
            ts = gen.mapper.typescript_type(base)
            extends.append(ts.generic_value or ts.value_type)
            use_generics(ts)
            continue

        if not _is_exported(f.name):
            continue

        json_name = f.name
        json_optional = False
        json_tag = tags.get("json")
        if json_tag is not None:
            if json_tag.name == "-":
                continue
            json_name = json_tag.name or f.name
            json_optional = json_tag.has_option("omitempty")

        ts_tag = tags.get("typescript")
        if ts_tag is not None and ts_tag.name == "-":
            continue

        try:
            ts = gen.mapper.typescript_type(f.type)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"field {f.name}: {e}") from None

        if ts_tag is not None:
            # `typescript:"string"` replaces whatever was inferred.
            if ts_tag.name:
                ts = TypescriptType(value_type=ts_tag.name)
            if ts_tag.has_option("notnull"):
                ts = replace(ts, optional=False)

        optional = "?" if json_optional or ts.optional else ""
        value_type = ts.value_type
        if ts.generic_value:
            value_type = ts.generic_value
            use_generics(ts)

        if ts.above_type_line:
            fields.append(ts.above_type_line)
        fields.append(f"{INDENT}readonly {json_name}{optional}: {value_type}")

    # Emit type parameters in declaration order, not field discovery order.
    generics: list[str] = []
    for param in decl.type_params:
        constraint = generics_used.get(param.name)
        if constraint is None:
            raise GenericParamError(
                f"generic param {param.name!r} missing on {decl.name!r}: "
                "remove the unused parameter or use it in a field"
            )
        generics.append(f"{param.name} extends {constraint}")

    header = f"export interface {gen.obj_name(decl.name)}"
    if generics:
        header += f"<{', '.join(generics)}>"
    if extends:
        header += f" extends {', '.join(extends)}"

    lines = [
        gen.pos_line(decl),
        header + " {",
        "\n".join(fields),
        "}",
    ]
    return "\n".join(lines) + "\n"

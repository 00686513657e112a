"""Map Go types to TypeScript types."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from . import gotypes
from .errors import UnsupportedTypeError
from .resolver import lookup_named_reference, note_reference
from .tstype import TypescriptType, indented_comment, join_above

if TYPE_CHECKING:
    from .generator import Generator

logger = logging.getLogger(__name__)

# External named types we cannot (or should not) introspect. Most of them
# marshal to JSON as a primitive.
WELL_KNOWN_TYPES: dict[str, TypescriptType] = {
    "time.Time": TypescriptType(value_type="string"),
    "time.Duration": TypescriptType(value_type="number"),
    "net/url.URL": TypescriptType(value_type="string"),
    "net/netip.Addr": TypescriptType(value_type="string"),
    "net/netip.Prefix": TypescriptType(value_type="string"),
    "database/sql.NullTime": TypescriptType(value_type="string", optional=True),
    "database/sql.NullString": TypescriptType(value_type="string", optional=True),
    "database/sql.NullInt64": TypescriptType(value_type="number", optional=True),
    "database/sql.NullBool": TypescriptType(value_type="boolean", optional=True),
    "encoding/json.RawMessage": TypescriptType(value_type="Record<string, string>"),
    "github.com/google/uuid.UUID": TypescriptType(value_type="string"),
    "github.com/google/uuid.NullUUID": TypescriptType(value_type="string", optional=True),
    "github.com/coder/serpent.Regexp": TypescriptType(value_type="string"),
    "github.com/coder/serpent.HostPort": TypescriptType(value_type="string"),
    "github.com/coder/serpent.String": TypescriptType(value_type="string"),
    "github.com/coder/serpent.StringArray": TypescriptType(value_type="string[]"),
    "github.com/coder/serpent.Strings": TypescriptType(value_type="string[]"),
    "github.com/coder/serpent.YAMLConfigPath": TypescriptType(value_type="string"),
    "github.com/coder/serpent.Int64": TypescriptType(value_type="number"),
    "github.com/coder/serpent.Bool": TypescriptType(value_type="boolean"),
    "github.com/coder/serpent.Duration": TypescriptType(value_type="number"),
    "github.com/coder/serpent.URL": TypescriptType(value_type="string"),
}

# Generic wrappers that marshal as their single type argument, e.g.
# serpent.Struct[T] marshals its Value field.
UNWRAPPED_GENERICS: frozenset[str] = frozenset({"github.com/coder/serpent.Struct"})

# Generic constraints that are not real Go types. An empty definition means
# TypeScript already knows the name.
BUILTIN_CONSTRAINTS: dict[str, str] = {
    # To be complete, "any" is included.
    "comparable": "export type comparable = boolean | number | string | any",
    "any": "",
}

_ESLINT_ANY = "eslint-disable-next-line @typescript-eslint/no-explicit-any"


class TypeMapper:
    def __init__(self, gen: "Generator"):
        self.gen = gen
        # Named types whose underlying is being mapped; guards recursive definitions.
        self._resolving: set[str] = set()

    def typescript_type(self, ty: gotypes.Type) -> TypescriptType:
        """Return the TypeScript type for a Go type.

        Eg: `[]byte` returns "string".
        """
        if isinstance(ty, gotypes.Basic):
            return self._basic(ty)
        if isinstance(ty, gotypes.Struct):
            # Anonymous structs. Name the struct to get a real type.
            return TypescriptType(
                value_type="any",
                above_type_line=join_above(
                    indented_comment("Embedded anonymous struct, please fix by naming it"),
                    indented_comment(f"{_ESLINT_ANY} -- Anonymously embedded struct"),
                ),
            )
        if isinstance(ty, gotypes.Map):
            return self._map(ty)
        if isinstance(ty, (gotypes.Slice, gotypes.Array)):
            return self._list(ty)
        if isinstance(ty, gotypes.Named):
            return self._named(ty)
        if isinstance(ty, gotypes.Pointer):
            try:
                resp = self.typescript_type(ty.elem)
            except UnsupportedTypeError as e:
                raise UnsupportedTypeError(f"pointer: {e}") from None
            return replace(resp, optional=True)
        if isinstance(ty, gotypes.Interface):
            if ty.empty:
                return TypescriptType(
                    value_type="any",
                    above_type_line=join_above(
                        indented_comment("Empty interface{} type, cannot resolve the type."),
                        indented_comment(f"{_ESLINT_ANY} -- interface{{}}"),
                    ),
                )
            # The JSON shape of an interface value is unknowable statically.
            return TypescriptType(
                value_type="any",
                above_type_line=indented_comment(
                    f"{_ESLINT_ANY} -- Golang interface, unable to resolve type."
                ),
            )
        if isinstance(ty, gotypes.TypeParam):
            return self._type_param(ty)

        # Channels, functions, bare unions. Add a rule above to support them.
        raise UnsupportedTypeError(f"unknown type: {ty}")

    def _basic(self, ty: gotypes.Basic) -> TypescriptType:
        if ty.is_byte:
            return TypescriptType(
                value_type="number",
                above_type_line=indented_comment("This is a byte in golang"),
            )
        if ty.is_numeric:
            return TypescriptType(value_type="number")
        if ty.name == "bool":
            return TypescriptType(value_type="boolean")
        if ty.name == "string":
            return TypescriptType(value_type="string")
        raise UnsupportedTypeError(f"unknown type: {ty}")

    def _map(self, ty: gotypes.Map) -> TypescriptType:
        # map[string]string -> Record<string, string>
        try:
            key = self.typescript_type(ty.key)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"map key: {e}") from None
        try:
            value = self.typescript_type(ty.elem)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"map value: {e}") from None

        generic_value = ""
        if key.generic_value or value.generic_value:
            generic_value = (
                f"Record<{key.generic_value or key.value_type}, "
                f"{value.generic_value or value.value_type}>"
            )
        return TypescriptType(
            value_type=f"Record<{key.value_type}, {value.value_type}>",
            generic_value=generic_value,
            generic_types={**key.generic_types, **value.generic_types},
            above_type_line=join_above(key.above_type_line, value.above_type_line),
        )

    def _list(self, ty: gotypes.Slice | gotypes.Array) -> TypescriptType:
        if isinstance(ty.elem, gotypes.Basic) and ty.elem.is_byte:
            # Byte sequences marshal as base64 text.
            return TypescriptType(value_type="string")
        try:
            underlying = self.typescript_type(ty.elem)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"array: {e}") from None
        generic_value = ""
        if underlying.generic_value:
            generic_value = underlying.generic_value + "[]"
        return TypescriptType(
            value_type=underlying.value_type + "[]",
            generic_value=generic_value,
            generic_types=dict(underlying.generic_types),
            above_type_line=underlying.above_type_line,
        )

    def _named(self, n: gotypes.Named) -> TypescriptType:
        known = self.gen.well_known.get(str(n)) or self.gen.well_known.get(n.qualified)
        if known is not None:
            return known

        if n.args and n.qualified in self.gen.unwrapped:
            try:
                return self.typescript_type(n.args[0])
            except UnsupportedTypeError as e:
                raise UnsupportedTypeError(f"unwrapped {n.qualified}: {e}") from None

        ref = lookup_named_reference(self.gen, n)
        if ref is not None:
            # Already (or about to be) emitted as its own block; just reference it.
            if not ref.local:
                logger.debug("found external type %s in %s", n.name, ref.generator.scope.path)
            note_reference(ref, self.gen)
            name = ref.generator.obj_name(n.name)
            if not n.args:
                return TypescriptType(value_type=name)

            constraints: list[str] = []
            names: list[str] = []
            generic_types: dict[str, str] = {}
            for arg in n.args:
                try:
                    gen_type = self.typescript_type(arg)
                except UnsupportedTypeError as e:
                    raise UnsupportedTypeError(f"generic field {name!r}<{arg}>: {e}") from None
                if isinstance(arg, gotypes.TypeParam):
                    # Using a generic defined by the parent.
                    names.append(arg.name)
                    generic_types[arg.name] = gen_type.value_type
                else:
                    names.append(gen_type.value_type)
                constraints.append(gen_type.value_type)
            return TypescriptType(
                value_type=f"{name}<{', '.join(constraints)}>",
                generic_value=f"{name}<{', '.join(names)}>",
                generic_types=generic_types,
            )

        key = n.qualified
        if key in self._resolving:
            # Refer to the type by name instead of expanding it again.
            return TypescriptType(value_type=self.gen.type_obj_name(n))

        underlying = self.gen.foreign_underlying(n)
        if underlying is None or isinstance(underlying, gotypes.Struct):
            # External structs cannot be introspected. Add the type to
            # WELL_KNOWN_TYPES or load its package as an external scope.
            return TypescriptType(
                value_type="any",
                above_type_line=join_above(
                    indented_comment(f'Named type "{n}" unknown, using "any"'),
                    indented_comment(f"{_ESLINT_ANY} -- External type"),
                ),
            )

        self._resolving.add(key)
        try:
            ts = self.typescript_type(underlying)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"named underlying: {e}") from None
        finally:
            self._resolving.discard(key)
        if not ts.above_type_line:
            ts = replace(
                ts,
                above_type_line=indented_comment(
                    f'This is likely an enum in an external package ("{n}")'
                ),
            )
        return ts

    def _type_param(self, ty: gotypes.TypeParam) -> TypescriptType:
        # Constraints live in the same package as the parameter; drop the path.
        name = ty.constraint.removeprefix(self.gen.scope.path + ".")

        referenced = self.gen.scope.lookup(name)
        if referenced is None:
            if name not in BUILTIN_CONSTRAINTS:
                # Constraint defined somewhere we cannot see; erase to any.
                return TypescriptType(
                    value_type="any",
                    generic_value=ty.name,
                    generic_types={ty.name: "any"},
                    above_type_line=f'// "{name}" is an external type, so we use any',
                )
            self.gen.builtins[name] = BUILTIN_CONSTRAINTS[name]
        else:
            if self.gen.state.restricted:
                self.gen.state.allow(referenced.name)
            name = self.gen.obj_name(referenced.name)

        return TypescriptType(
            value_type=name,
            generic_value=ty.name,
            generic_types={ty.name: name},
        )

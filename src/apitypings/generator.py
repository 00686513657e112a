"""Generate TypeScript declarations for declaration scopes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from . import gotypes
from .classify import generate_one
from .directives import scan_directives
from .enums import write_enums
from .errors import ApiTypingsError
from .frontend.symbols import ConstDecl, DeclarationScope, Decl, TypeDecl
from .mapper import UNWRAPPED_GENERICS, WELL_KNOWN_TYPES, TypeMapper
from .resolver import ScopeState, lookup_named_reference, obj_name, title_package
from .tstype import TypescriptType

logger = logging.getLogger(__name__)

HEADER = "// Code generated by apitypings. DO NOT EDIT.\n\n"


@dataclass(frozen=True)
class TypescriptTypes:
    """All code blocks of one scope, keyed by declaration name."""

    types: dict[str, str] = field(default_factory=dict)
    enums: dict[str, str] = field(default_factory=dict)
    generics: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        out: list[str] = []
        for group in (self.types, self.enums, self.generics):
            for name in sorted(group):
                out.append(group[name])
                out.append("\n")
        return "".join(out).rstrip("\n")


@dataclass
class Maps:
    structs: dict[str, str] = field(default_factory=dict)
    generics: dict[str, str] = field(default_factory=dict)
    enums: dict[str, TypeDecl] = field(default_factory=dict)
    enum_consts: dict[str, list[ConstDecl]] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationPass:
    types: TypescriptTypes
    # True when the scope's allow-list grew during the pass.
    grew: bool


class Generator:
    def __init__(
        self,
        scope: DeclarationScope,
        *,
        externals: Sequence["Generator"] = (),
        only_opt_in: bool = False,
        base_packages: Iterable[str] | None = None,
        well_known: dict[str, TypescriptType] | None = None,
        ignore: Iterable[str] = (),
        generate: Iterable[str] = (),
        unwrap: Iterable[str] = (),
    ):
        self.scope = scope
        self.externals: list[Generator] = list(externals)
        self.base_packages = frozenset(base_packages if base_packages is not None else [scope.name])
        self.well_known = {**WELL_KNOWN_TYPES, **(well_known or {})}
        self.unwrapped = UNWRAPPED_GENERICS | frozenset(unwrap)

        directives = scan_directives(scope.comments)
        ignored = directives.ignored | frozenset(ignore)
        requested = frozenset(generate)
        self.state = ScopeState(
            only_opt_in=only_opt_in,
            ignored=ignored,
            allow_list=sorted((directives.allowed | requested) - ignored),
            requested=directives.restricted or bool(requested),
        )
        # Builtin constraint definitions referenced by type parameters, e.g. comparable.
        self.builtins: dict[str, str] = {}
        self.mapper = TypeMapper(self)

    def __repr__(self) -> str:
        return f"Generator({self.scope.path!r})"

    def obj_name(self, name: str) -> str:
        return obj_name(self.scope.name, name, self.base_packages)

    def type_obj_name(self, named: gotypes.Named) -> str:
        """The emitted name of any named type, wherever it is declared."""
        if named.pkg == self.scope.path:
            return self.obj_name(named.name)
        ref = lookup_named_reference(self, named)
        if ref is not None:
            return ref.generator.obj_name(named.name)
        pkg_name = named.pkg.rstrip("/").rsplit("/", 1)[-1]
        if pkg_name in self.base_packages:
            return named.name
        return title_package(pkg_name) + named.name

    def pos_line(self, decl: Decl) -> str:
        # Not os.path: the output must not depend on the host OS.
        base = decl.file.replace("\\", "/").rsplit("/", 1)[-1]
        if not base:
            return f"// From {self.scope.name}"
        return f"// From {self.scope.name}/{base}"

    def foreign_underlying(self, named: gotypes.Named) -> gotypes.Type | None:
        for gen in (self, *self.externals):
            underlying = gen.scope.foreign.get(named.qualified)
            if underlying is not None:
                return underlying
        return None

    def generate_pass(self) -> GenerationPass:
        """Generate every declaration once."""
        start = len(self.state.allow_list)
        allowed = self.state.snapshot()
        maps = Maps()

        for decl in self.scope.sorted_decls():
            try:
                generate_one(self, maps, decl, allowed)
            except ApiTypingsError as e:
                raise type(e)(f"{decl.name!r}: {e}") from None

        for name, value in self.builtins.items():
            if value:
                maps.generics[name] = value + "\n"

        types = TypescriptTypes(
            types=maps.structs,
            enums=write_enums(self, maps.enums, maps.enum_consts),
            generics=maps.generics,
        )
        return GenerationPass(types=types, grew=len(self.state.allow_list) != start)

    def generate_until_stable(self) -> TypescriptTypes:
        """Regenerate until a pass leaves the allow-list unchanged.

        Each pass may discover references to names that are not yet allowed;
        the allow-list is bounded by the scope's declarations, so this ends.
        """
        passes = 0
        while True:
            passes += 1
            result = self.generate_pass()
            if not result.grew:
                logger.info("generated %s in %d pass(es)", self.scope.path, passes)
                return result.types
            logger.debug(
                "allow-list of %s grew to %d names; regenerating",
                self.scope.path,
                len(self.state.allow_list),
            )

    generate_all = generate_until_stable


@dataclass(frozen=True)
class Section:
    scope: DeclarationScope
    types: TypescriptTypes


def generate_run(primaries: Sequence[Generator], externals: Sequence[Generator] = ()) -> list[Section]:
    """Generate primary scopes, then external scopes until their allow-lists settle.

    Externals may grow each other's allow-lists, so they are regenerated in
    rounds until a whole round adds no names anywhere.
    """
    sections = [Section(g.scope, g.generate_until_stable()) for g in primaries]

    ext_results: dict[int, TypescriptTypes] = {}
    while True:
        before = [len(g.state.allow_list) for g in externals]
        for i, ext in enumerate(externals):
            ext_results[i] = ext.generate_until_stable()
        after = [len(g.state.allow_list) for g in externals]
        if before == after:
            break

    sections.extend(Section(ext.scope, ext_results[i]) for i, ext in enumerate(externals))
    return sections


def render_run(sections: Sequence[Section]) -> str:
    out = [HEADER]
    for s in sections:
        out.append(f"// The code below is generated from {s.scope.path}.\n\n")
        out.append(f"{s.types}\n\n")
    return "".join(out)

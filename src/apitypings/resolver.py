"""Named-type lookup across scopes and the per-scope allow-list state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from . import gotypes
from .frontend.symbols import TypeDecl

if TYPE_CHECKING:
    from .generator import Generator

logger = logging.getLogger(__name__)


@dataclass
class ScopeState:
    """Mutable generation state owned by one scope's generator.

    `ignored` is fixed once directives are scanned. `allow_list` only ever grows.
    """

    only_opt_in: bool = False
    ignored: frozenset[str] = frozenset()
    allow_list: list[str] = field(default_factory=list)
    # Set when generate names were requested, whether or not any survived `ignored`.
    requested: bool = False

    @property
    def restricted(self) -> bool:
        return self.only_opt_in or self.requested or bool(self.allow_list)

    def allow(self, name: str) -> bool:
        """Add `name` to the allow-list; return True when the list grew."""
        if name in self.allow_list:
            return False
        self.allow_list.append(name)
        return True

    def snapshot(self) -> frozenset[str]:
        return frozenset(self.allow_list)


@dataclass(frozen=True)
class Lookup:
    decl: TypeDecl
    generator: "Generator"
    local: bool


def lookup_named_reference(gen: "Generator", named: gotypes.Named) -> Lookup | None:
    """Find the declaration of `named` in the primary scope, then in each external scope."""
    decl = gen.scope.lookup(named.name)
    if decl is not None and gen.scope.path == named.pkg:
        return Lookup(decl=decl, generator=gen, local=True)

    for ext in gen.externals:
        decl = ext.scope.lookup(named.name)
        if decl is not None and ext.scope.path == named.pkg:
            return Lookup(decl=decl, generator=ext, local=False)
    return None


def note_reference(ref: Lookup, from_gen: "Generator") -> bool:
    """Record that `ref` is needed; restricted owners grow their allow-list."""
    owner = ref.generator
    if not owner.state.restricted:
        return False
    grew = owner.state.allow(ref.decl.name)
    if grew:
        logger.debug(
            "allow-list of %s grew: %s (referenced from %s)",
            owner.scope.path,
            ref.decl.name,
            from_gen.scope.path,
        )
    return grew


def title_package(pkg_name: str) -> str:
    return pkg_name[:1].upper() + pkg_name[1:].lower()


def obj_name(pkg_name: str, name: str, base_packages: frozenset[str]) -> str:
    """Prepend the title-cased package name for declarations outside the base packages."""
    if pkg_name in base_packages:
        return name
    return title_package(pkg_name) + name

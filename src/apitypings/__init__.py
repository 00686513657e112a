"""apitypings: generate TypeScript declarations from Go type graphs."""

from __future__ import annotations

from . import errors
from .frontend.load import load_scope, scope_from_dump
from .generator import Generator, TypescriptTypes, generate_run, render_run

__all__ = [
    "errors",
    "Generator",
    "TypescriptTypes",
    "generate_run",
    "load_scope",
    "render_run",
    "scope_from_dump",
]

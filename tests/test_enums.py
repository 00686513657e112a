from __future__ import annotations

import pytest

from apitypings.enums import enum_literal, plural_name
from apitypings.generator import Generator


def _const(name, value, type_="Status"):
    return {"kind": "const", "name": name, "type": type_, "value": value}


def test_plural_name():
    assert plural_name("Status") == "Statuses"
    assert plural_name("Bus") == "Buses"
    assert plural_name("Role") == "Roles"


@pytest.mark.parametrize(
    "value,want",
    [("a", '"a"'), ('say "hi"', '"say \\"hi\\""'), (3, "3"), (1.5, "1.5"), (True, "true")],
)
def test_enum_literal(value, want):
    assert enum_literal(value) == want


def test_string_enum_is_sorted_and_deduplicated(make_scope):
    scope = make_scope(
        [
            {"kind": "type", "name": "Status", "underlying": "string"},
            _const("StatusB", "b"),
            _const("StatusA", "a"),
            _const("StatusAlias", "a"),
        ]
    )
    assert str(Generator(scope).generate_all()) == (
        "// From sdk/types.go\n"
        'export type Status = "a" | "b"\n'
        'export const Statuses: Status[] = ["a", "b"]'
    )


def test_numeric_enum_sorts_lexicographically(make_scope):
    scope = make_scope(
        [
            {"kind": "type", "name": "Level", "underlying": "int"},
            _const("LevelB", 2, "Level"),
            _const("LevelJ", 10, "Level"),
            _const("LevelA", 1, "Level"),
        ]
    )
    out = Generator(scope).generate_all()
    assert out.enums["Level"] == (
        "// From sdk/types.go\n"
        "export type Level = 1 | 10 | 2\n"
        "export const Levels: Level[] = [1, 10, 2]\n"
    )


def test_enum_without_values_is_never(make_scope):
    scope = make_scope([{"kind": "type", "name": "Kind", "underlying": "string"}])
    out = Generator(scope).generate_all()
    assert out.enums["Kind"] == (
        "// From sdk/types.go\n"
        "export type Kind = never\n"
        "export const Kinds: Kind[] = []\n"
    )


def test_untyped_and_foreign_constants_are_not_members(make_scope):
    scope = make_scope(
        [
            {"kind": "type", "name": "Status", "underlying": "string"},
            _const("StatusOK", "ok"),
            {"kind": "const", "name": "MaxSize", "type": "untyped int", "value": 10},
            {"kind": "const", "name": "Limit", "type": "int", "value": 5},
            _const("Timeout", 1, "time.Duration"),
        ]
    )
    out = Generator(scope).generate_all()
    assert list(out.enums) == ["Status"]
    assert 'export type Status = "ok"\n' in out.enums["Status"]


def test_constraint_union_dedupes_and_appends_null(make_scope):
    scope = make_scope(
        [{"kind": "type", "name": "Scalar", "underlying": "interface{~int | ~float64 | *string}"}]
    )
    out = Generator(scope).generate_all()
    assert out.generics["Scalar"] == (
        "// From sdk/types.go\n"
        "export type Scalar = number | string | null\n"
    )


def test_single_term_constraint_is_an_alias(make_scope):
    scope = make_scope(
        [
            {"kind": "type", "name": "Status", "underlying": "string"},
            {"kind": "type", "name": "Stringish", "underlying": "interface{~string}"},
            {"kind": "type", "name": "AnyStatus", "underlying": "interface{example.com/sdk.Status}"},
        ]
    )
    out = Generator(scope).generate_all()
    assert out.generics["Stringish"].endswith("export type Stringish = string\n")
    assert out.generics["AnyStatus"].endswith("export type AnyStatus = Status\n")

from __future__ import annotations

import random

import pytest

from apitypings.generator import HEADER, Generator, generate_run, render_run

SDK_DECLS = [
    {"kind": "type", "name": "User", "fields": [{"name": "Health", "type": "example.com/health.Report", "tag": 'json:"health"'}]},
    {"kind": "type", "name": "Role", "underlying": "string"},
    {"kind": "const", "name": "RoleMember", "type": "Role", "value": "member"},
    {"kind": "const", "name": "RoleAdmin", "type": "Role", "value": "admin"},
]

HEALTH_DECLS = [
    {
        "kind": "type",
        "name": "Report",
        "fields": [
            {"name": "Severity", "type": "Severity", "tag": 'json:"severity"'},
            {"name": "Messages", "type": "[]Message", "tag": 'json:"messages"'},
        ],
    },
    {"kind": "type", "name": "Message", "fields": [{"name": "Text", "type": "string", "tag": 'json:"text"'}]},
    {"kind": "type", "name": "Severity", "underlying": "string"},
    {"kind": "const", "name": "SeverityOK", "type": "Severity", "value": "ok"},
    {"kind": "const", "name": "SeverityError", "type": "Severity", "value": "error"},
    {"kind": "type", "name": "Unused", "fields": []},
]


@pytest.fixture
def run(make_scope):
    def _run(sdk_decls=SDK_DECLS, health_decls=HEALTH_DECLS):
        health = Generator(
            make_scope(health_decls, path="example.com/health", file="health.go"),
            only_opt_in=True,
            base_packages=["sdk"],
        )
        sdk = Generator(make_scope(sdk_decls), externals=[health])
        return sdk, health, generate_run([sdk], [health])

    return _run


def test_external_scope_only_emits_referenced_types(run):
    sdk, health, sections = run()
    primary, external = (s.types for s in sections)

    assert primary.types["User"] == (
        "// From sdk/types.go\n"
        "export interface User {\n"
        "  readonly health: HealthReport\n"
        "}\n"
    )
    assert sorted(external.types) == ["HealthMessage", "HealthReport"]
    assert list(external.enums) == ["HealthSeverity"]
    assert external.types["HealthReport"] == (
        "// From health/health.go\n"
        "export interface HealthReport {\n"
        "  readonly severity: HealthSeverity\n"
        "  readonly messages: HealthMessage[]\n"
        "}\n"
    )
    assert external.enums["HealthSeverity"] == (
        "// From health/health.go\n"
        'export type HealthSeverity = "error" | "ok"\n'
        'export const HealthSeveritys: HealthSeverity[] = ["error", "ok"]\n'
    )
    assert "Unused" not in health.state.allow_list
    assert sdk.state.allow_list == []


def test_allow_list_grows_until_stable(make_scope):
    health = Generator(
        make_scope(HEALTH_DECLS, path="example.com/health", file="health.go"),
        only_opt_in=True,
        base_packages=["sdk"],
    )
    health.state.allow("Report")

    first = health.generate_pass()
    assert first.grew
    assert list(first.types.types) == ["HealthReport"]

    second = health.generate_pass()
    assert not second.grew
    assert sorted(second.types.types) == ["HealthMessage", "HealthReport"]
    assert health.state.allow_list == ["Report", "Severity", "Message"]


def test_unreferenced_external_emits_nothing(make_scope):
    health = Generator(make_scope(HEALTH_DECLS, path="example.com/health"), only_opt_in=True)
    assert str(health.generate_all()) == ""


def test_externals_grow_each_other(make_scope):
    a = Generator(
        make_scope(
            [{"kind": "type", "name": "Wrapper", "fields": [{"name": "Inner", "type": "example.com/b.Inner"}]}],
            path="example.com/a",
        ),
        only_opt_in=True,
        base_packages=["sdk"],
    )
    b = Generator(
        make_scope(
            [
                {"kind": "type", "name": "Inner", "fields": [{"name": "Name", "type": "string"}]},
                {"kind": "type", "name": "Starter", "fields": [{"name": "W", "type": "example.com/a.Wrapper"}]},
            ],
            path="example.com/b",
        ),
        only_opt_in=True,
        base_packages=["sdk"],
        generate=["Starter"],
    )
    a.externals = [b]
    b.externals = [a]

    # a runs before b, so Inner is only reached in a later round.
    sections = generate_run([], [a, b])
    assert sorted(sections[0].types.types) == ["AWrapper"]
    assert sorted(sections[1].types.types) == ["BInner", "BStarter"]


def test_output_is_deterministic(run, make_scope):
    _, _, sections = run()
    first = render_run(sections)

    shuffled_sdk = list(SDK_DECLS)
    shuffled_health = list(HEALTH_DECLS)
    random.Random(7).shuffle(shuffled_sdk)
    random.Random(7).shuffle(shuffled_health)
    _, _, sections = run(shuffled_sdk, shuffled_health)

    assert render_run(sections) == first


def test_render_run_layout(run):
    _, _, sections = run()
    out = render_run(sections)
    assert out.startswith(HEADER + "// The code below is generated from example.com/sdk.\n\n// From sdk/types.go\n")
    assert "\n\n// The code below is generated from example.com/health.\n\n" in out
    assert out.endswith('export const HealthSeveritys: HealthSeverity[] = ["error", "ok"]\n\n')
    # Records come before enums within a section.
    sdk_part = out.split("example.com/health.")[0]
    assert sdk_part.index("export interface User") < sdk_part.index("export type Role")


def test_base_packages_drop_the_prefix(make_scope):
    health = Generator(
        make_scope(HEALTH_DECLS, path="example.com/health"),
        only_opt_in=True,
        base_packages=["sdk", "health"],
        generate=["Message"],
    )
    assert list(health.generate_all().types) == ["Message"]


def test_pos_line_without_file(make_scope):
    scope = make_scope([{"kind": "type", "name": "Role", "underlying": "string"}], file="")
    gen = Generator(scope)
    assert gen.pos_line(scope.lookup("Role")) == "// From sdk"

from __future__ import annotations

import json
from pathlib import Path

import msgpack
import pytest

from apitypings import gotypes
from apitypings.errors import ScopeLoadError
from apitypings.frontend.load import load_scope, scope_from_dump
from apitypings.frontend.symbols import ConstDecl, FieldDecl, FuncDecl, TypeDecl

DUMP = {
    "path": "example.com/sdk",
    "files": [{"name": "sdk/users.go", "comments": ["// @typescript-ignore Internal"]}],
    "decls": [
        {
            "kind": "type",
            "name": "User",
            "file": "sdk/users.go",
            "line": 12,
            "fields": [
                {"name": "ID", "type": "github.com/google/uuid.UUID", "tag": 'json:"id"'},
                {"name": "Base", "type": "*Base", "embedded": True},
            ],
        },
        {"kind": "type", "name": "Base", "file": "sdk/users.go", "fields": []},
        {"kind": "type", "name": "Role", "file": "sdk/users.go", "underlying": "string"},
        {"kind": "const", "name": "RoleAdmin", "type": "Role", "value": "admin"},
        {"kind": "const", "name": "Max", "type": "untyped int", "value": 3},
        {"kind": "func", "name": "NewUser"},
    ],
    "foreign": {"log/slog.Level": "int"},
}


def test_load_json_dump(tmp_path: Path):
    p = tmp_path / "sdk.json"
    p.write_text(json.dumps({"packages": [DUMP]}), encoding="utf-8")
    scope = load_scope(p)

    assert scope.path == "example.com/sdk"
    assert scope.name == "sdk"
    assert sorted(d.name for d in scope.decls) == ["Base", "Max", "NewUser", "Role", "RoleAdmin", "User"]
    assert scope.comments == ["// @typescript-ignore Internal"]

    user = scope.lookup("User")
    assert isinstance(user, TypeDecl) and user.is_struct
    assert user.line == 12
    assert user.fields[1].embedded
    assert user.fields[1].type == gotypes.Pointer(gotypes.Named("example.com/sdk", "Base"))

    role = scope.lookup("Role")
    assert role.underlying == gotypes.Basic("string")
    assert scope.lookup("RoleAdmin") is None

    consts = {d.name: d for d in scope.decls if isinstance(d, ConstDecl)}
    assert consts["RoleAdmin"].type == gotypes.Named("example.com/sdk", "Role")
    assert consts["Max"].type is None
    assert any(isinstance(d, FuncDecl) for d in scope.decls)
    assert scope.foreign["log/slog.Level"] == gotypes.Basic("int")


def test_load_msgpack_dump(tmp_path: Path):
    p = tmp_path / "sdk.msgpack"
    p.write_bytes(msgpack.packb(DUMP, use_bin_type=True))
    scope = load_scope(p)
    assert scope.lookup("User") is not None
    assert scope.foreign["log/slog.Level"] == gotypes.Basic("int")


def test_missing_and_malformed_dumps(tmp_path: Path):
    with pytest.raises(ScopeLoadError, match=r"dump not found"):
        load_scope(tmp_path / "nope.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ScopeLoadError, match=r"failed to parse dump"):
        load_scope(bad)

    arr = tmp_path / "arr.json"
    arr.write_text("[]", encoding="utf-8")
    with pytest.raises(ScopeLoadError, match=r"must be an object"):
        load_scope(arr)


def test_exactly_one_package_per_scope():
    with pytest.raises(ScopeLoadError, match=r"expected 1 package, found 2"):
        scope_from_dump({"packages": [DUMP, DUMP]})
    with pytest.raises(ScopeLoadError, match=r"expected 1 package, found 0"):
        scope_from_dump({"packages": []})


@pytest.mark.parametrize(
    "obj,match",
    [
        ({"name": "x"}, r"'path' must be a non-empty string"),
        ({"path": "p", "decls": [{"kind": "type", "name": "T"}]}, r"'fields' or an 'underlying'"),
        ({"path": "p", "decls": [{"kind": "alias", "name": "T"}]}, r"unknown declaration kind"),
        ({"path": "p", "decls": [{"kind": "type", "name": "T", "underlying": "map[string"}]}, r"p: 'T': "),
        ({"path": "p", "decls": [{"kind": "type", "name": "T", "fields": [{"name": "A"}]}]}, r"fields need"),
        ({"path": "p", "foreign": {"x.Y": "struct{"}}, r"foreign 'x.Y'"),
        ({"path": "p", "decls": [{"kind": "type", "name": "T", "underlying": "struct{A string \"\\x41\"}"}]}, r"bad struct tag literal"),
    ],
)
def test_invalid_dumps(obj, match):
    with pytest.raises(ScopeLoadError, match=match):
        scope_from_dump(obj)


def test_struct_underlying_is_expanded_into_fields():
    scope = scope_from_dump(
        {
            "path": "example.com/sdk",
            "decls": [
                {
                    "kind": "type",
                    "name": "Page",
                    "type_params": [{"name": "T", "constraint": "any"}],
                    "underlying": 'struct{Items []T "json:\\"items\\""; example.com/sdk.Meta; Raw string `json:"raw"`}',
                }
            ],
        }
    )
    page = scope.lookup("Page")
    assert page.is_struct
    assert page.underlying is None
    assert page.fields == (
        FieldDecl(name="Items", type=gotypes.Slice(gotypes.TypeParam("T", "any")), tag='json:"items"'),
        FieldDecl(name="Meta", type=gotypes.Named("example.com/sdk", "Meta"), embedded=True),
        FieldDecl(name="Raw", type=gotypes.Basic("string"), tag='json:"raw"'),
    )

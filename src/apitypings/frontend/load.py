"""Load declaration scopes from the type-checking front end's dump files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import msgpack

from .. import gotypes
from ..errors import ScopeLoadError, TypeExprError
from ..typeexpr import parse_type, split_top_level
from .symbols import (
    ConstDecl,
    DeclarationScope,
    Decl,
    FieldDecl,
    FuncDecl,
    SourceFile,
    TypeDecl,
    TypeParamDecl,
    VarDecl,
)

logger = logging.getLogger(__name__)

_MSGPACK_SUFFIXES = {".msgpack", ".mp"}


def read_dump(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ScopeLoadError(f"dump not found: {path}")
    try:
        if path.suffix in _MSGPACK_SUFFIXES:
            obj = msgpack.unpackb(path.read_bytes(), raw=False)
        else:
            obj = json.loads(path.read_text(encoding="utf-8"))
    except Exception as e:  # noqa: BLE001 - boundary parse
        raise ScopeLoadError(f"failed to parse dump {path}: {e}") from e
    if not isinstance(obj, dict):
        raise ScopeLoadError(f"dump {path} must be an object")
    return obj


def load_scope(path: Path) -> DeclarationScope:
    """Load the single package described by a dump file."""
    scope = scope_from_dump(read_dump(path))
    logger.debug("loaded %s from %s (%d decls)", scope.path, path, len(scope.decls))
    return scope


def scope_from_dump(obj: dict[str, Any]) -> DeclarationScope:
    pkgs = obj.get("packages")
    if pkgs is not None:
        # Only one package per scope; multi-package loads need one scope each.
        if not isinstance(pkgs, list) or len(pkgs) != 1:
            n = len(pkgs) if isinstance(pkgs, list) else 0
            raise ScopeLoadError(f"expected 1 package, found {n}")
        obj = pkgs[0]
        if not isinstance(obj, dict):
            raise ScopeLoadError("package entry must be an object")

    path = obj.get("path")
    name = obj.get("name")
    if not isinstance(path, str) or not path:
        raise ScopeLoadError("package 'path' must be a non-empty string")
    if not isinstance(name, str) or not name:
        name = path.rstrip("/").rsplit("/", 1)[-1]

    files: list[SourceFile] = []
    for f in obj.get("files") or []:
        if not isinstance(f, dict) or not isinstance(f.get("name"), str):
            raise ScopeLoadError(f"{path}: file entries must include a 'name' string")
        comments = f.get("comments") or []
        if not isinstance(comments, list) or not all(isinstance(c, str) for c in comments):
            raise ScopeLoadError(f"{path}: file {f['name']!r} 'comments' must be list[str]")
        files.append(SourceFile(name=f["name"], comments=tuple(comments)))

    decls: list[Decl] = []
    for item in obj.get("decls") or []:
        if not isinstance(item, dict):
            raise ScopeLoadError(f"{path}: declaration entries must be objects")
        try:
            decls.append(_decl(path, item))
        except TypeExprError as e:
            raise ScopeLoadError(f"{path}: {item.get('name')!r}: {e}") from None

    foreign: dict[str, gotypes.Type] = {}
    raw_foreign = obj.get("foreign") or {}
    if not isinstance(raw_foreign, dict):
        raise ScopeLoadError(f"{path}: 'foreign' must be an object")
    for qualified, text in raw_foreign.items():
        if not isinstance(qualified, str) or not isinstance(text, str):
            raise ScopeLoadError(f"{path}: 'foreign' entries must map names to type strings")
        owner = qualified.rpartition(".")[0]
        try:
            foreign[qualified] = parse_type(text, local_pkg=owner)
        except TypeExprError as e:
            raise ScopeLoadError(f"{path}: foreign {qualified!r}: {e}") from None

    return DeclarationScope(
        path=path,
        name=name,
        decls=tuple(decls),
        files=tuple(files),
        foreign=foreign,
    )


def _decl(pkg: str, item: dict[str, Any]) -> Decl:
    kind = item.get("kind")
    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise ScopeLoadError(f"{pkg}: declaration without a name")
    file = item.get("file") if isinstance(item.get("file"), str) else ""
    line = item.get("line") if isinstance(item.get("line"), int) else 0

    if kind == "var":
        return VarDecl(name=name, file=file, line=line)
    if kind == "func":
        return FuncDecl(name=name, file=file, line=line)
    if kind == "const":
        t = item.get("type")
        ctype = None
        if isinstance(t, str) and t and not t.startswith("untyped "):
            ctype = parse_type(t, local_pkg=pkg)
        return ConstDecl(name=name, type=ctype, value=item.get("value"), file=file, line=line)
    if kind != "type":
        raise ScopeLoadError(f"{pkg}: {name!r}: unknown declaration kind {kind!r}")

    type_params: list[TypeParamDecl] = []
    for tp in item.get("type_params") or []:
        if not isinstance(tp, dict):
            raise ScopeLoadError(f"{pkg}: {name!r}: type_params entries must be objects")
        tp_name = tp.get("name")
        constraint = tp.get("constraint", "any")
        if not isinstance(tp_name, str) or not isinstance(constraint, str):
            raise ScopeLoadError(f"{pkg}: {name!r}: type param needs 'name' and 'constraint' strings")
        type_params.append(TypeParamDecl(name=tp_name, constraint=constraint))
    params = {tp.name: tp.constraint for tp in type_params}

    raw_fields = item.get("fields")
    if raw_fields is not None:
        if not isinstance(raw_fields, list):
            raise ScopeLoadError(f"{pkg}: {name!r}: 'fields' must be a list")
        fields: list[FieldDecl] = []
        for f in raw_fields:
            fn = f.get("name") if isinstance(f, dict) else None
            ft = f.get("type") if isinstance(f, dict) else None
            if not (isinstance(fn, str) and isinstance(ft, str) and fn and ft):
                raise ScopeLoadError(f"{pkg}: {name!r}: fields need 'name' and 'type' strings")
            tag = f.get("tag") if isinstance(f.get("tag"), str) else ""
            fields.append(
                FieldDecl(
                    name=fn,
                    type=parse_type(ft, local_pkg=pkg, type_params=params),
                    tag=tag,
                    embedded=bool(f.get("embedded", False)),
                )
            )
        return TypeDecl(
            name=name,
            file=file,
            line=line,
            type_params=tuple(type_params),
            fields=tuple(fields),
        )

    underlying = item.get("underlying")
    if not isinstance(underlying, str) or not underlying:
        raise ScopeLoadError(f"{pkg}: {name!r}: type needs 'fields' or an 'underlying' string")
    u = parse_type(underlying, local_pkg=pkg, type_params=params)
    if isinstance(u, gotypes.Struct):
        # Struct written as type text: expand it so no field is lost.
        return TypeDecl(
            name=name,
            file=file,
            line=line,
            type_params=tuple(type_params),
            fields=tuple(_struct_fields(u.body, pkg, params)),
        )
    return TypeDecl(
        name=name,
        file=file,
        line=line,
        type_params=tuple(type_params),
        underlying=u,
    )


def _struct_fields(body: str, pkg: str, params: dict[str, str]) -> list[FieldDecl]:
    """Fields of a `go/types` struct string, e.g. `A string "json:\\"a\\""; Base`."""
    fields: list[FieldDecl] = []
    for elem in split_top_level(body, ";"):
        parts = [p for p in split_top_level(elem.strip(), " ") if p]
        if not parts:
            continue
        tag = ""
        if parts[-1][:1] in ('"', "`"):
            tag = _tag_literal(parts.pop())
        if not parts:
            raise TypeExprError(f"struct field without a type in {body!r}")

        if len(parts) == 1:
            # Embedded field: named after its type, without pointer or type args.
            type_text = parts[0]
            fname = type_text.lstrip("*").split("[", 1)[0].rpartition(".")[2]
            embedded = True
        else:
            fname, type_text = parts[0], " ".join(parts[1:])
            embedded = False
        fields.append(
            FieldDecl(
                name=fname,
                type=parse_type(type_text, local_pkg=pkg, type_params=params),
                tag=tag,
                embedded=embedded,
            )
        )
    return fields


def _tag_literal(raw: str) -> str:
    if raw.startswith("`"):
        return raw[1:-1]
    try:
        tag = json.loads(raw)
    except ValueError:
        raise TypeExprError(f"bad struct tag literal {raw!r}") from None
    if not isinstance(tag, str):
        raise TypeExprError(f"bad struct tag literal {raw!r}")
    return tag

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import RunConfig, default_log_level, load_config
from .errors import ApiTypingsError
from .frontend.load import load_scope
from .generator import Generator, generate_run, render_run


def _build_generators(cfg: RunConfig) -> tuple[list[Generator], list[Generator]]:
    primary_scopes = [load_scope(p) for p in cfg.scopes]
    external_scopes = [load_scope(p) for p in cfg.externals]
    base = cfg.base_packages or [s.name for s in primary_scopes]

    externals: list[Generator] = []
    for scope in external_scopes:
        externals.append(
            Generator(
                scope,
                only_opt_in=True,
                base_packages=base,
                well_known=cfg.well_known,
                ignore=cfg.ignore.get(scope.path, []),
                generate=cfg.generate.get(scope.path, []),
                unwrap=cfg.unwrap,
            )
        )
    # Externals can reference each other.
    for ext in externals:
        ext.externals = [o for o in externals if o is not ext]

    primaries = [
        Generator(
            scope,
            externals=externals,
            base_packages=base,
            well_known=cfg.well_known,
            ignore=cfg.ignore.get(scope.path, []),
            generate=cfg.generate.get(scope.path, []),
            unwrap=cfg.unwrap,
        )
        for scope in primary_scopes
    ]
    return primaries, externals


def main() -> None:
    parser = argparse.ArgumentParser(prog="apitypings")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print apitypings version.")

    p_gen = sub.add_parser("gen", help="Generate TypeScript declarations from front-end dumps.")
    p_gen.add_argument(
        "--scope",
        action="append",
        default=[],
        help="Dump of a package to generate in full (repeatable).",
    )
    p_gen.add_argument(
        "--external",
        action="append",
        default=[],
        help="Dump of a package to generate only referenced types from (repeatable).",
    )
    p_gen.add_argument("--config", default=None, help="Run configuration JSON (optional).")
    p_gen.add_argument("--out", default=None, help="Output .ts file path (default: stdout).")
    p_gen.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")

    args = parser.parse_args()
    if args.cmd == "version":
        try:
            print(importlib.metadata.version("apitypings"))
        except Exception:
            # Best-effort fallback for editable/local-only contexts.
            print("0.0.0")
        return

    if args.cmd == "gen":
        try:
            level = logging.DEBUG if args.verbose else default_log_level()
            logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

            cfg = load_config(Path(args.config)) if args.config else RunConfig()
            cfg = replace(
                cfg,
                scopes=[*cfg.scopes, *(Path(p) for p in args.scope)],
                externals=[*cfg.externals, *(Path(p) for p in args.external)],
            )
            if not cfg.scopes:
                raise SystemExit("gen requires at least one --scope (or 'scopes' in --config)")

            primaries, externals = _build_generators(cfg)
            output = render_run(generate_run(primaries, externals))
        except ApiTypingsError as e:
            raise SystemExit(f"apitypings: {e}") from None

        if args.out is None:
            sys.stdout.write(output)
            return
        out_file = Path(args.out)
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(output, encoding="utf-8")
        return

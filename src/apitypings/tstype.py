from __future__ import annotations

from dataclasses import dataclass, field

INDENT = "  "


@dataclass(frozen=True)
class TypescriptType:
    """The TypeScript rendering of one Go type.

    Given

        type Foo[C comparable] struct {
            Bar C
        }

    the field `Bar` maps to value_type="comparable", generic_value="C" and
    generic_types={"C": "comparable"}. Bindings bubble up through containers so
    the enclosing declaration can list its type parameters.
    """

    # The actual type or generic constraint. Always usable as-is.
    value_type: str = ""
    # The value written with generic parameter names instead of constraints.
    generic_value: str = ""
    # generic name -> constraint
    generic_types: dict[str, str] = field(default_factory=dict)
    # Comment line(s) placed above the type line.
    above_type_line: str = ""
    optional: bool = False


def indented_comment(comment: str) -> str:
    return f"{INDENT}// {comment}"


def join_above(*lines: str) -> str:
    return "\n".join(ln for ln in lines if ln)

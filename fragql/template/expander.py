"""Fragment tree → flat query text plus a deduplicated parameter list.

``TemplateExpander`` walks a fragment depth-first, left to right.  Nested
fragments and join lists are inlined in place; every primitive leaf is
registered in one :class:`ExpansionContext` shared by the whole walk, so a
value that occurs several times (at any depth, directly, inside a nested
fragment or inside a join list) is bound once and referenced by the same
placeholder each time.

Example::

    inner = sql("code = {}", 1)
    outer = sql("id IN ({}) AND name = {} AND {}", sql.join([1, 2]), "Alice", inner)
    TemplateExpander().expand(outer)
    # ExpandedTemplate(query='id IN (?1, ?2) AND name = ?3 AND code = ?1',
    #                  values=[1, 2, 'Alice'])
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from fragql.errors import UnsupportedValueError
from fragql.template.fragment import PRIMITIVE_TYPES, Fragment, JoinList, Primitive, Value
from fragql.template.placeholders import NumberedStyle, PlaceholderStyle

#: Literal emitted for an empty join list so that ``IN (...)`` stays valid.
EMPTY_JOIN_SQL = "NULL"


class ExpandedTemplate(NamedTuple):
    """Result of expanding one top-level fragment."""

    query: str
    values: list[Primitive]


def _value_kind(value: Primitive) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "str"
    return "bytes"


def same_value(left: Primitive, right: Primitive) -> bool:
    """Return whether two primitives may share one placeholder.

    Values of different kinds never match (``True`` is not ``1``); ints and
    floats are one kind.  NaN never matches anything, itself included.
    """
    kind = _value_kind(left)
    if kind != _value_kind(right):
        return False
    return kind == "null" or left == right


# ---------------------------------------------------------------------------
# Per-expansion parameter accumulator
# ---------------------------------------------------------------------------


@dataclass
class ExpansionContext:
    """Accumulates query text and parameters during one top-level expansion.

    A fresh instance is created per :meth:`TemplateExpander.expand` call, so
    numbering always starts at 1 even when the same fragment object is
    expanded again or inside another parent.
    """

    parts: list[str] = field(default_factory=list)
    values: list[Primitive] = field(default_factory=list)

    def add_value(self, value: Primitive) -> int:
        """Register ``value`` and return its 1-based parameter index."""
        for position, existing in enumerate(self.values):
            if same_value(existing, value):
                return position + 1
        self.values.append(value)
        return len(self.values)


# ---------------------------------------------------------------------------
# Expander
# ---------------------------------------------------------------------------


class TemplateExpander:
    """Flattens fragment trees into ``(query, values)``.

    Args:
        style: Placeholder spelling; defaults to ``?N``.
    """

    def __init__(self, style: PlaceholderStyle | None = None) -> None:
        self._style = style or NumberedStyle()

    @property
    def style(self) -> PlaceholderStyle:
        return self._style

    def expand(self, fragment: Fragment) -> ExpandedTemplate:
        """Expand ``fragment`` and everything nested in it.

        Returns:
            :class:`ExpandedTemplate` with the flat query string and the
            parameter list ordered by first occurrence.

        Raises:
            UnsupportedValueError: If a leaf is not a supported primitive.
        """
        ctx = ExpansionContext()
        self._expand_fragment(fragment, ctx)
        return ExpandedTemplate("".join(ctx.parts), ctx.values)

    def _expand_fragment(self, fragment: Fragment, ctx: ExpansionContext) -> None:
        segments = fragment.segments
        for i, segment in enumerate(segments):
            if i > 0:
                self._expand_value(fragment.values[i - 1], ctx)
            ctx.parts.append(self._style.escape_literal(segment))

    def _expand_value(self, value: Value, ctx: ExpansionContext) -> None:
        if isinstance(value, Fragment):
            self._expand_fragment(value, ctx)
        elif isinstance(value, JoinList):
            if value.values:
                self._expand_fragment(value.as_fragment(), ctx)
            else:
                ctx.parts.append(EMPTY_JOIN_SQL)
        elif isinstance(value, PRIMITIVE_TYPES):
            ctx.parts.append(self._style.placeholder(ctx.add_value(value)))
        else:
            raise UnsupportedValueError(value)

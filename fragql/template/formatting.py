"""Turn ``str.format``-style templates into fragment parts.

Replacement fields become interleaved values instead of being rendered into
the text::

    split_format_template("SELECT * FROM users WHERE id = {} AND name = {name}",
                          (1,), {"name": "Alice"})
    # (['SELECT * FROM users WHERE id = ', ' AND name = ', ''], [1, 'Alice'])

``{{`` and ``}}`` stay literal braces, and attribute / index lookups such as
``{user.id}`` or ``{0[1]}`` are resolved exactly as ``str.format`` would.
Format specs and conversions have no meaning for bound parameters and are
rejected.
"""
from __future__ import annotations

import string
from collections.abc import Mapping, Sequence
from typing import Any

from fragql.errors import TemplateFormatError

_FORMATTER = string.Formatter()


def split_format_template(
    template: str,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
) -> tuple[list[str], list[Any]]:
    """Split ``template`` into literal segments and looked-up values.

    Returns:
        ``(segments, values)`` with ``len(segments) == len(values) + 1``.

    Raises:
        TemplateFormatError: On malformed braces, a format spec or
            conversion, mixed automatic/manual numbering, or a missing
            argument.
    """
    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError as exc:
        raise TemplateFormatError(f"Invalid template: {exc}", template) from exc

    segments: list[str] = []
    values: list[Any] = []
    pending: list[str] = []
    auto_index = 0
    numbering: str | None = None

    for literal, field_name, format_spec, conversion in parsed:
        pending.append(literal)
        if field_name is None:
            continue
        if format_spec or conversion:
            raise TemplateFormatError(
                f"Replacement field {{{field_name}}} may not use a format spec or conversion.",
                template,
            )

        if field_name == "" or field_name[0] in ".[":
            if numbering == "manual":
                raise TemplateFormatError(
                    "Cannot switch from manual field numbering to automatic numbering.",
                    template,
                )
            numbering = "auto"
            field_name = f"{auto_index}{field_name}"
            auto_index += 1
        elif field_name[0].isdigit():
            if numbering == "auto":
                raise TemplateFormatError(
                    "Cannot switch from automatic field numbering to manual numbering.",
                    template,
                )
            numbering = "manual"

        try:
            value, _ = _FORMATTER.get_field(field_name, args, kwargs)
        except (IndexError, KeyError, AttributeError, TypeError) as exc:
            raise TemplateFormatError(
                f"No argument for replacement field {{{field_name}}}.", template
            ) from exc

        segments.append("".join(pending))
        values.append(value)
        pending = []

    segments.append("".join(pending))
    return segments, values

"""Placeholder styles and their registry.

A ``PlaceholderStyle`` decides how the N-th parameter of an expansion is
spelled in the query text and how the parameter list is handed to a driver.
The default ``numbered`` style emits ``?1``, ``?2``, ... which SQLite (and
D1) understand natively; a repeated value reuses its number, so the
parameter list never contains duplicates.

``PlaceholderStyles``
    Central registry mapping style names to :class:`PlaceholderStyle`
    classes.  Backends declare the name they need in their
    ``placeholder_style`` attribute; the tag looks it up here.

Usage::

    from fragql.template.placeholders import PlaceholderStyle, PlaceholderStyles

    @PlaceholderStyles.register("dollar")
    class DollarStyle(PlaceholderStyle):
        name = "dollar"

        def placeholder(self, index: int) -> str:
            return f"${index}"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import ClassVar

from fragql.errors import PlaceholderStyleError
from fragql.template.fragment import Primitive


class PlaceholderStyle(ABC):
    """Abstract base for placeholder spellings.

    Subclasses implement :meth:`placeholder`; literal escaping and parameter
    shaping default to the identity / a plain list.
    """

    #: Registry name of the style.
    name: ClassVar[str]

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Return the placeholder token for the 1-based parameter ``index``."""

    def escape_literal(self, text: str) -> str:
        """Return literal template text made safe for the driver's parser."""
        return text

    def bind(self, values: Sequence[Primitive]) -> Sequence[Primitive] | dict[str, Primitive]:
        """Shape the ordered parameter list the way the driver expects it."""
        return list(values)


class NumberedStyle(PlaceholderStyle):
    """``?N`` placeholders bound from a positional sequence."""

    name = "numbered"

    def placeholder(self, index: int) -> str:
        return f"?{index}"


class NamedStyle(PlaceholderStyle):
    """``:pN`` placeholders bound from a mapping (SQLAlchemy ``text()``).

    ``text()`` treats every ``:word`` as a bind parameter, so colons in
    literal text are backslash-escaped; SQLAlchemy strips the backslash
    when it compiles the statement.
    """

    name = "named"

    def placeholder(self, index: int) -> str:
        return f":p{index}"

    def escape_literal(self, text: str) -> str:
        return text.replace(":", "\\:")

    def bind(self, values: Sequence[Primitive]) -> dict[str, Primitive]:
        return {f"p{index}": value for index, value in enumerate(values, start=1)}


class PlaceholderStyles:
    """Registry mapping style names to :class:`PlaceholderStyle` classes.

    Example::

        PlaceholderStyles.register_class("numbered", NumberedStyle)
        style = PlaceholderStyles.create("numbered")
    """

    _styles: ClassVar[dict[str, type[PlaceholderStyle]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[PlaceholderStyle]], type[PlaceholderStyle]]:
        """Decorator that registers a style class under ``name``."""

        def decorator(style_cls: type[PlaceholderStyle]) -> type[PlaceholderStyle]:
            cls._styles[name] = style_cls
            return style_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, style_cls: type[PlaceholderStyle]) -> None:
        """Register a style class without using the decorator form."""
        cls._styles[name] = style_cls

    @classmethod
    def create(cls, name: str) -> PlaceholderStyle:
        """Instantiate the style registered for ``name``.

        Raises:
            PlaceholderStyleError: If no style is registered for ``name``.
        """
        style_cls = cls._styles.get(name)
        if style_cls is None:
            raise PlaceholderStyleError(
                f"Unknown placeholder style: '{name}'. Registered styles: {cls.registered_styles()}."
            )
        return style_cls()

    @classmethod
    def resolve(
        cls,
        style: PlaceholderStyle | str | None,
        default: PlaceholderStyle | str | None = None,
    ) -> PlaceholderStyle:
        """Return ``style`` as an instance, falling back to ``default`` then ``numbered``."""
        chosen = style if style is not None else default
        if chosen is None:
            chosen = NumberedStyle.name
        if isinstance(chosen, PlaceholderStyle):
            return chosen
        return cls.create(chosen)

    @classmethod
    def registered_styles(cls) -> list[str]:
        """Return the sorted list of registered style names."""
        return sorted(cls._styles)

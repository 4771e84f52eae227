"""Unit tests for placeholder styles and the PlaceholderStyles registry."""

from __future__ import annotations

import pytest

from fragql import create_mock_sql_tag
from fragql.errors import PlaceholderStyleError
from fragql.template.expander import TemplateExpander
from fragql.template.placeholders import (
    NamedStyle,
    NumberedStyle,
    PlaceholderStyle,
    PlaceholderStyles,
)


@pytest.fixture
def dollar_style():
    @PlaceholderStyles.register("dollar")
    class DollarStyle(PlaceholderStyle):
        name = "dollar"

        def placeholder(self, index: int) -> str:
            return f"${index}"

    yield DollarStyle
    PlaceholderStyles._styles.pop("dollar", None)


def test_builtin_styles_are_registered():
    assert {"named", "numbered"} <= set(PlaceholderStyles.registered_styles())
    assert isinstance(PlaceholderStyles.create("numbered"), NumberedStyle)
    assert isinstance(PlaceholderStyles.create("named"), NamedStyle)


def test_unknown_style():
    with pytest.raises(PlaceholderStyleError, match="Unknown placeholder style: 'qmark'"):
        PlaceholderStyles.create("qmark")


def test_resolve_fallbacks():
    named = NamedStyle()
    assert PlaceholderStyles.resolve(named) is named
    assert isinstance(PlaceholderStyles.resolve(None, "named"), NamedStyle)
    assert isinstance(PlaceholderStyles.resolve("numbered", "named"), NumberedStyle)
    assert isinstance(PlaceholderStyles.resolve(None), NumberedStyle)


def test_registered_style_drives_expansion(dollar_style):
    sql = create_mock_sql_tag()
    expander = TemplateExpander(PlaceholderStyles.create("dollar"))
    query, values = expander.expand(sql("a = {} OR b = {} OR c = {}", 1, 2, 1))
    assert query == "a = $1 OR b = $2 OR c = $1"
    assert values == [1, 2]
    assert "dollar" in PlaceholderStyles.registered_styles()


def test_numbered_style_leaves_literals_alone():
    style = NumberedStyle()
    assert style.escape_literal("'10:30'") == "'10:30'"
    assert style.bind(("a", None)) == ["a", None]

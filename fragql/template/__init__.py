"""fragql template layer: fragments, join lists and their expansion."""
from fragql.template.expander import ExpandedTemplate, TemplateExpander
from fragql.template.fragment import Fragment, JoinList, Primitive, fragment, join
from fragql.template.placeholders import (
    NamedStyle,
    NumberedStyle,
    PlaceholderStyle,
    PlaceholderStyles,
)

__all__ = [
    "ExpandedTemplate",
    "Fragment",
    "JoinList",
    "NamedStyle",
    "NumberedStyle",
    "PlaceholderStyle",
    "PlaceholderStyles",
    "Primitive",
    "TemplateExpander",
    "fragment",
    "join",
]

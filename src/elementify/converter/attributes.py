"""Translate raw HTML attributes into element props.

HTML spells a few attributes differently from the prop names that element
renderers expect (``class`` vs ``className``).  The table below maps prop
names to attribute names; :data:`ATTRIBUTE_TO_PROP` is its inverse so both
directions are O(1) lookups.

The ``style`` attribute is parsed into a mapping of camel-cased CSS
properties::

    >>> parse_style("text-align: right; font-size: 12px")
    {'textAlign': 'right', 'fontSize': '12px'}
"""

from __future__ import annotations

import re
from typing import Any

# ---------------------------------------------------------------------------
# Name tables
# ---------------------------------------------------------------------------

DOM_ATTRIBUTE_NAMES: dict[str, str] = {
    "acceptCharset": "accept-charset",
    "accessKey": "accesskey",
    "allowFullScreen": "allowfullscreen",
    "autoComplete": "autocomplete",
    "autoFocus": "autofocus",
    "autoPlay": "autoplay",
    "cellPadding": "cellpadding",
    "cellSpacing": "cellspacing",
    "charSet": "charset",
    "className": "class",
    "colSpan": "colspan",
    "contentEditable": "contenteditable",
    "crossOrigin": "crossorigin",
    "dateTime": "datetime",
    "encType": "enctype",
    "formAction": "formaction",
    "frameBorder": "frameborder",
    "hrefLang": "hreflang",
    "htmlFor": "for",
    "httpEquiv": "http-equiv",
    "inputMode": "inputmode",
    "marginHeight": "marginheight",
    "marginWidth": "marginwidth",
    "maxLength": "maxlength",
    "minLength": "minlength",
    "noValidate": "novalidate",
    "readOnly": "readonly",
    "rowSpan": "rowspan",
    "spellCheck": "spellcheck",
    "srcDoc": "srcdoc",
    "srcLang": "srclang",
    "srcSet": "srcset",
    "tabIndex": "tabindex",
    "useMap": "usemap",
}
"""Prop name -> HTML attribute name, for every prop spelled differently."""

ATTRIBUTE_TO_PROP: dict[str, str] = {
    attr: prop for prop, attr in DOM_ATTRIBUTE_NAMES.items()
}
"""HTML attribute name -> prop name."""

_WORD_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_STYLE_DECL_RE = re.compile(r";\s*")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def attribute_to_prop(name: str) -> str:
    """Return the prop name for HTML attribute *name* (unknown names pass)."""
    return ATTRIBUTE_TO_PROP.get(name, name)


def prop_to_attribute(name: str) -> str:
    """Return the HTML attribute name for prop *name* (unknown names pass)."""
    return DOM_ATTRIBUTE_NAMES.get(name, name)


def camel_case(name: str) -> str:
    """Camel-case a hyphenated or underscored CSS property name.

    ``"text-align"`` -> ``"textAlign"``, ``"-webkit-transition"`` ->
    ``"webkitTransition"``.
    """
    words = [w for w in _WORD_SPLIT_RE.split(name) if w]
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


def parse_style(style: str) -> dict[str, str]:
    """Parse an inline ``style`` attribute into a camel-cased mapping.

    Declarations are split on ``;`` and each one on its *first* ``:`` so
    values such as ``url(http://...)`` survive.  Empty declarations and
    declarations without a colon are dropped.
    """
    result: dict[str, str] = {}
    for declaration in _STYLE_DECL_RE.split(style):
        prop, sep, value = declaration.partition(":")
        if not sep:
            continue
        key = camel_case(prop.strip())
        if key:
            result[key] = value.strip()
    return result


def attributes_to_props(attributes: dict[str, Any]) -> dict[str, Any]:
    """Translate a raw attribute mapping into element props.

    Names go through :func:`attribute_to_prop`; a string ``style`` value is
    parsed with :func:`parse_style`.  Boolean attributes keep ``True``.
    """
    props: dict[str, Any] = {}
    for name, value in attributes.items():
        if name == "style" and isinstance(value, str):
            props["style"] = parse_style(value)
        else:
            props[attribute_to_prop(name)] = value
    return props

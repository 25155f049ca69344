"""elementify: Markdown to generic element trees.

Public re-exports
-----------------

* **Entry points:** :func:`transform`, :class:`MarkdownToElementsConverter`
* **Configuration:** :class:`ElementifyConfig`
* **Errors:** Every :class:`ElementifyError` subclass and :class:`ErrorCode`
* **Models:** :class:`Element`, :class:`OverrideEntry`, :func:`create_element`

Usage::

    from elementify import transform

    tree = transform("Hello *world*")
    tree.children[0].type        # 'p'

A parser failure comes back as an :class:`ElementifyParseError` *value*::

    result = transform(text)
    if isinstance(result, ElementifyParseError):
        ...
"""

from __future__ import annotations

from typing import Any

# ── Configuration ───────────────────────────────────────────────────────
from elementify.config import ElementifyConfig

# ── Converter ───────────────────────────────────────────────────────────
from elementify.converter.md_to_elements import MarkdownToElementsConverter

# ── Errors ──────────────────────────────────────────────────────────────
from elementify.errors import (
    ElementifyConversionError,
    ElementifyError,
    ElementifyParseError,
    ElementifyReferenceError,
    ElementifyUsageError,
    ErrorCode,
)

# ── Models ──────────────────────────────────────────────────────────────
from elementify.models import Element, OverrideEntry, create_element


def transform(
    markdown: str,
    parser_options: dict[str, Any] | None = None,
    overrides: dict[str, Any] | None = None,
    *,
    config: ElementifyConfig | None = None,
) -> Any:
    """Convert *markdown* to an element tree.

    Shorthand for ``MarkdownToElementsConverter(config).convert(...)``.
    Returns the root element, or an :class:`ElementifyParseError` when the
    parser fails.
    """
    return MarkdownToElementsConverter(config).convert(
        markdown, parser_options=parser_options, overrides=overrides
    )


# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Entry points
    "transform",
    "MarkdownToElementsConverter",
    # Configuration
    "ElementifyConfig",
    # Error base + code enum
    "ElementifyError",
    "ErrorCode",
    # Call-boundary errors
    "ElementifyUsageError",
    "ElementifyParseError",
    # Conversion errors
    "ElementifyConversionError",
    "ElementifyReferenceError",
    # Models
    "Element",
    "OverrideEntry",
    "create_element",
]

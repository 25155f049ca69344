"""Markdown → element tree conversion pipeline.

Public API:

- :class:`MarkdownToElementsConverter`: Markdown (or a parsed tree) → elements.
- :class:`ASTNormalizer`: parse Markdown to an mdast-shaped tree.
- :class:`ElementBuilder`: convert an mdast-shaped tree to elements.
- :func:`restructure_table`: regroup flat table rows into header/body.
- :func:`parse_tag` / :func:`extract_attributes`: read raw embedded markup.
- :func:`attributes_to_props`: translate HTML attributes to prop names.
"""

from elementify.converter.ast_normalizer import ASTNormalizer
from elementify.converter.attributes import attributes_to_props
from elementify.converter.element_builder import ElementBuilder
from elementify.converter.html import extract_attributes, parse_tag
from elementify.converter.md_to_elements import MarkdownToElementsConverter
from elementify.converter.tables import restructure_table

__all__ = [
    "ASTNormalizer",
    "ElementBuilder",
    "MarkdownToElementsConverter",
    "attributes_to_props",
    "extract_attributes",
    "parse_tag",
    "restructure_table",
]

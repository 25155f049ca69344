"""Public data models for elementify.

This module contains the output element type, the override entry type, and
the default element factory.  All types are plain dataclasses with no
behaviour beyond structural equality and a few read-only tree helpers.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Callable, Union

Children = Union[str, list[Any], None]
"""Element children: a scalar text, an ordered list of elements/strings, or
nothing."""

ElementFactory = Callable[[Any, dict[str, Any], Children], Any]
"""Signature of an element factory: ``factory(type, props, children)``."""


# ---------------------------------------------------------------------------
# Output element
# ---------------------------------------------------------------------------

@dataclass
class Element:
    """A renderable element node.

    Attributes
    ----------
    type:
        A built-in tag name (``str``) or a caller-supplied component.  The
        component is opaque to elementify and is never inspected.
    props:
        Element properties.  Always contains ``"key"``, a string that is
        stable for the element's position among its siblings.
    children:
        ``None``, a single text value, or an ordered list of child
        elements and text values.
    """

    type: Any
    props: dict[str, Any] = field(default_factory=dict)
    children: Children = None

    @property
    def key(self) -> str | None:
        return self.props.get("key")

    @property
    def is_component(self) -> bool:
        """True when :attr:`type` is a caller-supplied component."""
        return not isinstance(self.type, str)

    def child_list(self) -> list[Any]:
        """Return children as a list regardless of how they are stored."""
        if self.children is None:
            return []
        if isinstance(self.children, str):
            return [self.children]
        return list(self.children)

    def iter(self) -> Iterator[Element]:
        """Yield this element and every descendant element, depth-first."""
        yield self
        for child in self.child_list():
            if isinstance(child, Element):
                yield from child.iter()

    def find_all(self, type_: Any) -> list[Element]:
        """Return every element (self included) whose type equals *type_*."""
        return [el for el in self.iter() if el.type == type_]

    def find(self, type_: Any) -> Element | None:
        """Return the first element whose type equals *type_*, or ``None``."""
        for el in self.iter():
            if el.type == type_:
                return el
        return None

    def text_content(self) -> str:
        """Concatenate all text below this element, like DOM ``textContent``."""
        parts: list[str] = []
        for child in self.child_list():
            if isinstance(child, Element):
                parts.append(child.text_content())
            elif isinstance(child, str):
                parts.append(child)
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain nested dicts (components are kept as-is)."""
        children: Any
        if isinstance(self.children, list):
            children = [
                c.to_dict() if isinstance(c, Element) else c
                for c in self.children
            ]
        else:
            children = self.children
        return {"type": self.type, "props": dict(self.props), "children": children}


def create_element(type_: Any, props: dict[str, Any], children: Children) -> Element:
    """Default element factory."""
    return Element(type=type_, props=props, children=children)


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

@dataclass
class OverrideEntry:
    """Caller-supplied customization for one built-in tag.

    Attributes
    ----------
    component:
        Replacement for the built-in tag name.  Always wins.
    props:
        Extra props merged *beneath* the props computed by the transform;
        on a key collision the computed value is kept.
    """

    component: Any = None
    props: dict[str, Any] | None = None

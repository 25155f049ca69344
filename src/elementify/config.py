"""Configuration for elementify.

:class:`ElementifyConfig` is a plain dataclass that captures every tuneable
knob of the transform.  Instances are passed to
:class:`~elementify.converter.md_to_elements.MarkdownToElementsConverter`
and to :func:`elementify.transform`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

HTML_PAIRING_MODES: tuple[str, ...] = ("balanced", "last_sibling")
"""Accepted values for :attr:`ElementifyConfig.html_pairing`."""


@dataclass
class ElementifyConfig:
    """Complete configuration for a transform.

    Every parameter has a default, so ``ElementifyConfig()`` is a valid
    configuration.

    Parameters
    ----------
    root_tag:
        Tag of the container element wrapping the whole document.
    footnotes_tag:
        Tag of the trailing container that collects footnote definitions.
    code_class_prefix:
        Prefix prepended to a fenced code block's language to form the
        ``className`` of the inner ``code`` element (``"lang-"`` gives
        ``lang-python``).
    html_pairing:
        How an opening raw-markup node finds its closing boundary among its
        siblings.

        * ``"balanced"``: the next closing tag with the same name, counting
          nested openings of that name.
        * ``"last_sibling"``: the last raw-markup sibling in the list.
          Compatible with older renderers but wrong for several independent
          markup runs at one level.
    task_list_checkboxes:
        Prepend a disabled checkbox ``input`` to GFM task-list items.
    element_factory:
        Callable ``factory(type, props, children)`` building each output
        node.  Defaults to :func:`elementify.models.create_element`.
    metrics:
        Optional :class:`~elementify.observability.MetricsHook`.
    debug_dump_ast:
        Write the normalised AST to *stderr* on each conversion.
    """

    # ── Output tags ────────────────────────────────────────────────────
    root_tag: str = "div"

    footnotes_tag: str = "footer"

    code_class_prefix: str = "lang-"

    # ── Embedded markup ────────────────────────────────────────────────
    html_pairing: Literal["balanced", "last_sibling"] = "balanced"

    # ── Lists ──────────────────────────────────────────────────────────
    task_list_checkboxes: bool = True

    # ── Rendering layer ────────────────────────────────────────────────
    element_factory: Any | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ──────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.html_pairing not in HTML_PAIRING_MODES:
            raise ValueError(
                f"html_pairing must be one of {HTML_PAIRING_MODES}, got {self.html_pairing!r}"
            )
        if not self.root_tag:
            raise ValueError("root_tag must be a non-empty tag name")
        if not self.footnotes_tag:
            raise ValueError("footnotes_tag must be a non-empty tag name")
        if self.element_factory is not None and not callable(self.element_factory):
            raise ValueError(
                f"element_factory must be callable, got {type(self.element_factory).__name__}"
            )

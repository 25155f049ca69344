"""Full Markdown-to-element-tree pipeline.

:class:`MarkdownToElementsConverter` orchestrates the three-stage pipeline:

1. **Parse**: Mistune parses raw Markdown into an AST.
2. **Normalize**: :class:`ASTNormalizer` rewrites the tokens as mdast-shaped
   node dicts.
3. **Build**: :class:`ElementBuilder` walks the tree and calls the element
   factory for every node.

A parser failure is reported by *returning* an
:class:`~elementify.errors.ElementifyParseError` in place of the tree.
Malformed arguments raise :class:`~elementify.errors.ElementifyUsageError`.
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any

from elementify.config import ElementifyConfig
from elementify.converter.ast_normalizer import DEFAULT_PARSER_OPTIONS, ASTNormalizer
from elementify.converter.element_builder import ElementBuilder
from elementify.converter.overrides import normalize_overrides
from elementify.errors import ElementifyParseError, ElementifyUsageError
from elementify.models import OverrideEntry
from elementify.observability import NoopMetricsHook, get_logger
from elementify.observability.metrics import (
    METRIC_DURATION,
    METRIC_ELEMENTS,
    METRIC_FOOTNOTES,
    METRIC_PARSE_ERRORS,
    METRIC_TRANSFORMS,
)

log = get_logger("elementify.converter")

# Exceptions the parser may raise on input it cannot handle.
_PARSER_FAILURES: tuple[type[BaseException], ...] = (
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    RecursionError,
)


class MarkdownToElementsConverter:
    """Convert Markdown text to an element tree.

    Parameters
    ----------
    config:
        Output tags, raw markup pairing, element factory and metrics hook.
        Defaults to ``ElementifyConfig()``.

    Examples
    --------
    >>> converter = MarkdownToElementsConverter()
    >>> tree = converter.convert("# Hello\\n\\nWorld")
    >>> [child.type for child in tree.children]
    ['h1', 'p']
    >>> tree.children[1].children
    'World'
    """

    def __init__(self, config: ElementifyConfig | None = None) -> None:
        self._config = config if config is not None else ElementifyConfig()
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )

    @property
    def config(self) -> ElementifyConfig:
        return self._config

    def convert(
        self,
        markdown: str,
        parser_options: dict[str, Any] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> Any:
        """Full pipeline: parse -> normalize -> build elements.

        Parameters
        ----------
        markdown:
            Raw Markdown text to convert.
        parser_options:
            Options for the parser.  ``position=False`` and
            ``footnotes=True`` are filled in when absent; the caller's dict
            is not modified.
        overrides:
            ``{tag: {"component": ..., "props": {...}}}`` substitutions.

        Returns
        -------
        Any
            The root element, or an :class:`ElementifyParseError` if the
            parser failed.

        Raises
        ------
        ElementifyUsageError
            If an argument has the wrong shape.
        ElementifyReferenceError
            If a reference names an identifier with no definition.
        """
        if not isinstance(markdown, str):
            raise ElementifyUsageError(
                message="markdown must be a str.",
                context={"argument": "markdown", "received_type": type(markdown).__name__},
            )
        if parser_options is not None and not isinstance(parser_options, dict):
            raise ElementifyUsageError(
                message="parser_options must be None or a dict.",
                context={
                    "argument": "parser_options",
                    "received_type": type(parser_options).__name__,
                },
            )
        entries = normalize_overrides(overrides)

        options = dict(parser_options or {})
        for key, value in DEFAULT_PARSER_OPTIONS.items():
            options.setdefault(key, value)

        try:
            normalizer = ASTNormalizer(options)
        except (ImportError, AttributeError, ValueError) as exc:
            raise ElementifyUsageError(
                message=f"parser_options names a plugin that cannot be loaded: {exc}",
                context={"argument": "parser_options", "received_type": "dict"},
                cause=exc,
            ) from exc

        t0 = time.monotonic()

        # Stage 1 & 2: Parse and normalize
        try:
            root = normalizer.parse(markdown)
        except _PARSER_FAILURES as exc:
            log.warning(
                "markdown parse failed",
                exc_info=exc,
                extra={"extra_fields": {"op": "convert", "input_length": len(markdown)}},
            )
            self._metrics.increment(METRIC_PARSE_ERRORS)
            return ElementifyParseError(
                message=f"Failed to parse markdown: {exc}",
                context={"input_length": len(markdown)},
                cause=exc,
            )

        # Debug: dump normalized AST
        if self._config.debug_dump_ast:
            print(
                "[elementify] Normalized AST:",
                json.dumps(root, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        # Stage 3: Build elements
        return self._build(root, entries, t0, source="markdown")

    def convert_tree(
        self,
        root: dict[str, Any],
        overrides: dict[str, Any] | None = None,
    ) -> Any:
        """Build the element tree for an already-parsed mdast-shaped tree.

        *root* is not modified, so one parsed tree can be converted any
        number of times.
        """
        if not isinstance(root, dict) or "type" not in root:
            raise ElementifyUsageError(
                message="root must be an AST node dict with a 'type' key.",
                context={"argument": "root", "received_type": type(root).__name__},
            )
        entries = normalize_overrides(overrides)
        return self._build(root, entries, time.monotonic(), source="tree")

    def _build(
        self,
        root: dict[str, Any],
        overrides: dict[str, OverrideEntry],
        t0: float,
        source: str,
    ) -> Any:
        builder = ElementBuilder(self._config, overrides)
        tree = builder.build_tree(root)
        elapsed_ms = (time.monotonic() - t0) * 1000

        self._metrics.increment(METRIC_TRANSFORMS, tags={"source": source})
        self._metrics.timing(METRIC_DURATION, elapsed_ms, tags={"source": source})
        if builder.footnotes:
            self._metrics.increment(METRIC_FOOTNOTES, len(builder.footnotes))
        self._metrics.increment(METRIC_ELEMENTS, builder.element_count)
        return tree

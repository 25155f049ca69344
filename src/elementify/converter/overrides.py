"""Caller-supplied tag overrides.

Overrides are keyed by built-in tag name::

    {
        "p": {"component": MyParagraph},
        "a": {"props": {"target": "_blank"}},
    }

A ``component`` replaces the tag outright.  Extra ``props`` sit *beneath*
the props computed by the transform, so an override can never break the
structure the transform relies on (``href``, ``src``, ``key`` ...).
"""

from __future__ import annotations

from typing import Any

from elementify.errors import ElementifyUsageError
from elementify.models import OverrideEntry

_ENTRY_KEYS: frozenset[str] = frozenset({"component", "props"})


def normalize_overrides(raw: Any) -> dict[str, OverrideEntry]:
    """Validate an overrides mapping and convert it to :class:`OverrideEntry`.

    Raises
    ------
    ElementifyUsageError
        If *raw* is not ``None`` or a ``dict`` of tag name to
        ``{component?, props?}`` (or :class:`OverrideEntry`).
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ElementifyUsageError(
            message=(
                "overrides must be None or a dict of the shape "
                "{tag_name: {'component': ..., 'props': {...}}}."
            ),
            context={"argument": "overrides", "received_type": type(raw).__name__},
        )

    result: dict[str, OverrideEntry] = {}
    for tag, entry in raw.items():
        if not isinstance(tag, str):
            raise ElementifyUsageError(
                message=f"override keys must be tag names, got {tag!r}.",
                context={"argument": "overrides", "received_type": type(tag).__name__},
            )
        if isinstance(entry, OverrideEntry):
            normalized = entry
        elif isinstance(entry, dict):
            unknown = set(entry) - _ENTRY_KEYS
            if unknown:
                raise ElementifyUsageError(
                    message=(
                        f"override for '{tag}' has unknown keys {sorted(unknown)}; "
                        "only 'component' and 'props' are allowed."
                    ),
                    context={"argument": "overrides", "tag": tag},
                )
            normalized = OverrideEntry(
                component=entry.get("component"),
                props=entry.get("props"),
            )
        else:
            raise ElementifyUsageError(
                message=f"override for '{tag}' must be a dict or OverrideEntry.",
                context={"argument": "overrides", "received_type": type(entry).__name__},
            )

        if normalized.props is not None and not isinstance(normalized.props, dict):
            raise ElementifyUsageError(
                message=f"override props for '{tag}' must be a dict.",
                context={"argument": "overrides", "received_type": type(normalized.props).__name__},
            )
        result[tag] = normalized
    return result


def apply_override(
    tag: str,
    props: dict[str, Any],
    overrides: dict[str, OverrideEntry],
) -> tuple[Any, dict[str, Any]]:
    """Resolve the element type and merge override props for *tag*.

    Returns
    -------
    tuple[Any, dict]
        The element type (the override component, or *tag*) and the merged
        props.  *props* itself is not modified.
    """
    entry = overrides.get(tag)
    if entry is None:
        return tag, props

    element_type: Any = entry.component if entry.component is not None else tag
    if entry.props:
        props = {**entry.props, **props}
    return element_type, props

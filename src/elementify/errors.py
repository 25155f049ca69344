"""Error hierarchy for elementify.

Every public error class inherits from ElementifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Two error families behave differently at the call boundary:

* :class:`ElementifyUsageError` and :class:`ElementifyReferenceError` are
  raised.
* :class:`ElementifyParseError` is *returned* by :func:`elementify.transform`
  in place of the element tree.  Callers must check the result type.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error elementify can produce."""

    USAGE_ERROR = "USAGE_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ElementifyError(Exception):
    """Base exception for all elementify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Call-boundary errors
# ---------------------------------------------------------------------------

class ElementifyUsageError(ElementifyError):
    """An argument passed to the entry point has the wrong shape.

    Raised before any parsing happens.

    Context keys: ``argument``, ``received_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.USAGE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ElementifyParseError(ElementifyError):
    """The markdown parser failed on the given input.

    Instances are returned from :func:`elementify.transform` rather than
    raised.

    Context keys: ``input_length``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------

class ElementifyConversionError(ElementifyError):
    """Base class for errors raised while assembling the element tree.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.CONVERSION_ERROR,
        message: str = "Conversion error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class ElementifyReferenceError(ElementifyConversionError):
    """A link, image or footnote reference names an identifier that has no
    matching definition in the document.

    Context keys: ``identifier``, ``kind``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNRESOLVED_REFERENCE,
            message=message,
            context=context,
            cause=cause,
        )

from __future__ import annotations


class MissingInputError(LookupError):
    """No parseable record set was found in the provider data."""


class MalformedFieldError(ValueError):
    """A numeric or clock-time field could not be parsed.

    Only raised by the strict helpers; the lenient parsers absorb it and
    fall back to 0 so irregular provider data still produces output.
    """


class UpstreamUnavailable(RuntimeError):
    """The provider page could not be fetched."""


class UnexpectedTransformError(RuntimeError):
    """Any other failure while deriving the timing or results views."""

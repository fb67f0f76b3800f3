"""Exception hierarchy shared by the conversion pipeline."""

from __future__ import annotations


class JsonXmlError(Exception):
    """Base class for every error raised by jsonxml."""


class ConversionError(JsonXmlError):
    """The fetched payload could not be turned into XML."""


class MalformedInputError(ConversionError):
    """Input bytes are not valid JSON for the record shape."""


class UnrecognizedSchemaError(ConversionError):
    """Input is valid JSON but every record field is zero valued."""

    def __init__(self, message: str = "JSON is valid but it is not a record") -> None:
        super().__init__(message)


class FetchError(JsonXmlError):
    """Retrieving a URL failed."""


class TransportError(FetchError):
    """The request could not be completed (DNS, connection, timeout)."""


class ResponseReadError(TransportError):
    """The response arrived but its body could not be read in full."""


class UnexpectedContentTypeError(FetchError):
    """The response declared something other than ``application/json``."""

    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(
            f"Invalid Content-Type header. Expected application/json, received {content_type!r}"
        )


class FatalSetupError(JsonXmlError):
    """A run cannot start at all (bad inputs, output directory unusable)."""


class DispatchError(JsonXmlError):
    """A worker task failed outside of the per-URL error handling."""


__all__ = [
    "ConversionError",
    "DispatchError",
    "FatalSetupError",
    "FetchError",
    "JsonXmlError",
    "MalformedInputError",
    "ResponseReadError",
    "TransportError",
    "UnexpectedContentTypeError",
    "UnrecognizedSchemaError",
]

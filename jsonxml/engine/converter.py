"""JSON to XML conversion for the record shape."""

from __future__ import annotations

import json

from pydantic import ValidationError

from .errors import MalformedInputError, UnrecognizedSchemaError
from .record import Record


def _reject_constant(name: str) -> float:
    raise ValueError(f"invalid JSON constant {name}")


def parse_record(data: bytes) -> Record:
    """Decode ``data`` into a :class:`Record`.

    Raises :class:`MalformedInputError` when the bytes are not JSON or do not
    fit the record field types, and :class:`UnrecognizedSchemaError` when the
    JSON is valid but no record field is set.
    """

    try:
        # Invalid UTF-8 becomes U+FFFD rather than failing the whole document.
        text = data.decode("utf-8", errors="replace")
        payload = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedInputError(f"parse failed: {exc}") from exc
    try:
        record = Record.model_validate(payload)
    except ValidationError as exc:
        raise MalformedInputError(f"parse failed: {exc}") from exc
    if record.is_empty():
        raise UnrecognizedSchemaError()
    return record


def convert(data: bytes) -> bytes:
    """Convert a JSON record payload into its XML document."""

    return parse_record(data).to_xml()


__all__ = ["convert", "parse_record"]

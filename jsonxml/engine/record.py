"""The single record shape understood by jsonxml and its XML mapping."""

from __future__ import annotations

import re
from typing import Any

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, model_validator

RECORD_TAG = "record"
XML_PREFIX = " "
XML_INDENT = " "

# JSON key of every field, in declaration order.
JSON_KEYS = ("Id", "first_name", "last_name", "City", "State")
_FOLDED_KEYS = {key.casefold(): key for key in JSON_KEYS}

_INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)

# Characters written as numeric references so they survive a parse unchanged.
_CHAR_REFS = {"\t": "#x9", "\n": "#xA", "\r": "#xD", '"': "#34", "'": "#39"}
_CHAR_REF_SPLIT = re.compile("([\t\n\r\"'])")


def _xml_safe(value: str) -> str:
    return _INVALID_XML_CHARS.sub("\ufffd", value)


def _add_text(parent: etree._Element, tag: str, text: str) -> None:
    child = etree.SubElement(parent, tag)
    parts = _CHAR_REF_SPLIT.split(_xml_safe(text))
    # An empty string (not None) keeps lxml from emitting a self-closing tag.
    child.text = parts[0]
    for char, segment in zip(parts[1::2], parts[2::2]):
        ref = etree.Entity(_CHAR_REFS[char])
        child.append(ref)
        ref.tail = segment or None


def _indent(element: etree._Element, level: int = 1) -> None:
    """Put every nested element on its own line: prefix plus one indent per level."""

    children = [child for child in element if isinstance(child.tag, str)]
    if not children:
        return
    inner = "\n" + XML_PREFIX + XML_INDENT * level
    element.text = inner
    for child in children:
        _indent(child, level + 1)
        child.tail = inner
    children[-1].tail = "\n" + XML_PREFIX + XML_INDENT * (level - 1)


class Record(BaseModel):
    """Person record fetched as JSON and written out as XML."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(default=0, alias="Id", strict=True)
    first_name: str = Field(default="", alias="first_name", strict=True)
    last_name: str = Field(default="", alias="last_name", strict=True)
    city: str = Field(default="", alias="City", strict=True)
    state: str = Field(default="", alias="State", strict=True)

    @model_validator(mode="before")
    @classmethod
    def _match_json_keys(cls, data: Any) -> Any:
        """Resolve keys exactly or case-insensitively; ``null`` keeps the zero value."""

        if data is None:
            return {}
        if not isinstance(data, dict):
            return data
        resolved: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            target = key if key in JSON_KEYS else _FOLDED_KEYS.get(key.casefold())
            if target is None or value is None:
                continue
            resolved[target] = value
        return resolved

    def is_empty(self) -> bool:
        return (
            self.id == 0
            and len(self.first_name) == 0
            and len(self.last_name) == 0
            and len(self.city) == 0
            and len(self.state) == 0
        )

    def to_element(self) -> etree._Element:
        root = etree.Element(RECORD_TAG)
        _add_text(root, "Id", str(self.id))
        name = etree.SubElement(root, "name")
        _add_text(name, "first", self.first_name)
        _add_text(name, "last", self.last_name)
        _add_text(root, "City", self.city)
        _add_text(root, "State", self.state)
        return root

    def to_xml(self) -> bytes:
        """Render the record as indented XML without declaration or trailing newline.

        Every line gets a one-space prefix and one extra space per nesting
        level, e.g. ``" <record>"``, ``"  <Id>1</Id>"``, ``"   <first>a</first>"``.
        """

        root = self.to_element()
        _indent(root)
        return (XML_PREFIX + etree.tostring(root, encoding="unicode")).encode("utf-8")

    @classmethod
    def from_xml(cls, data: bytes) -> "Record":
        """Decode XML produced by :meth:`to_xml` back into a record."""

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        root = etree.fromstring(data.strip(), parser=parser)
        if root.tag != RECORD_TAG:
            raise ValueError(f"Unexpected root element {root.tag!r}, expected {RECORD_TAG!r}")
        raw_id = (root.findtext("Id") or "").strip()
        return cls(
            id=int(raw_id) if raw_id else 0,
            first_name=root.findtext("name/first") or "",
            last_name=root.findtext("name/last") or "",
            city=root.findtext("City") or "",
            state=root.findtext("State") or "",
        )


__all__ = ["JSON_KEYS", "RECORD_TAG", "Record"]

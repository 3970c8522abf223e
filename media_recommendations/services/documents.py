"""
Field extraction for Discovery Engine documents.

A document carries its payload in one of two encodings: `json_data`, a JSON
string, or `struct_data`, an already structured mapping. The encodings are
resolved in a fixed order: a non-empty `json_data` always wins, `struct_data`
is only consulted when there is no text, and a document with neither yields
no fields. The two forms are never merged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional

from google.protobuf import json_format, struct_pb2

from media_recommendations.errors import ExtractionError
from media_recommendations.utils.params import loads_strict

PayloadKind = Literal["text", "struct", "absent"]


@dataclass(frozen=True)
class DocumentPayload:
    kind: PayloadKind
    text: str = ""
    struct: Optional[Mapping[str, Any]] = field(default=None)


ABSENT = DocumentPayload(kind="absent")


def resolve_payload(document: Any) -> DocumentPayload:
    """Pick the payload encoding of `document` (text first, then struct)."""
    if document is None:
        return ABSENT
    text = getattr(document, "json_data", None) or ""
    if text:
        return DocumentPayload(kind="text", text=text)
    struct = getattr(document, "struct_data", None)
    if struct is not None:
        return DocumentPayload(kind="struct", struct=struct)
    return ABSENT


def _decode_text(text: str) -> Dict[str, Any]:
    try:
        fields = loads_strict(text)
    except (ValueError, RecursionError) as exc:
        raise ExtractionError("Failed to decode the document JSON data") from exc
    if not isinstance(fields, dict):
        raise ExtractionError(
            f"Document JSON data must be an object, got {type(fields).__name__}"
        )
    return fields


def extract_fields(document: Any) -> Dict[str, Any]:
    """Return the field mapping held by `document`, or {} when it has none."""
    payload = resolve_payload(document)
    if payload.kind == "text":
        return _decode_text(payload.text)
    if payload.kind == "struct":
        if isinstance(payload.struct, struct_pb2.Struct):
            return json_format.MessageToDict(payload.struct)
        return dict(payload.struct)
    return {}


def field_as_str(fields: Mapping[str, Any], name: str) -> str:
    """String value of `fields[name]`; "" when missing or not a string."""
    value = fields.get(name)
    return value if isinstance(value, str) else ""

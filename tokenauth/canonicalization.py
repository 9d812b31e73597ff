"""
Canonical JSON Encoding

Signature payloads are serialized with canonical JSON so that semantically
identical messages produce identical bytes:
- Object keys sorted lexicographically (Unicode code point order)
- No whitespace between tokens (compact form)
- UTF-8 encoding, no BOM
- Integers carried as decimal strings (no precision loss)
- Arrays preserve order

Operation parameters are first converted into a typed value tree, where every
value is a [tag, payload] pair. Two different parameter lists therefore never
encode to the same bytes, even when their plain JSON forms would collide
(e.g. the integer 1 and the string "1").
"""

import json
from typing import Any, Dict, List, Union

from .errors import EncodingError
from .identity import Identifier, IdentifierKind

TAG_INT = "int"
TAG_BOOL = "bool"
TAG_BYTES = "bytes"
TAG_STR = "str"
TAG_ID = "id"
TAG_VEC = "vec"


def canonicalize(obj: Any) -> bytes:
    """
    Convert a JSON-compatible object to canonical JSON bytes.

    Floats are rejected: they have no canonical textual form.
    """
    canonical = _canonicalize_value(obj)
    return json.dumps(canonical, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonicalize_str(obj: Any) -> str:
    """Return canonical JSON as string."""
    return canonicalize(obj).decode('utf-8')


def _canonicalize_value(value: Any) -> Any:
    if value is None:
        return None
    elif isinstance(value, bool):
        return value
    elif isinstance(value, int):
        return value
    elif isinstance(value, str):
        return value
    elif isinstance(value, dict):
        return _canonicalize_object(value)
    elif isinstance(value, (list, tuple)):
        return [_canonicalize_value(item) for item in value]
    else:
        raise EncodingError(f"Cannot canonicalize type: {type(value).__name__}")


def _canonicalize_object(obj: Dict[str, Any]) -> Dict[str, Any]:
    for key in obj:
        if not isinstance(key, str):
            raise EncodingError("Object keys must be strings")
    return {k: _canonicalize_value(obj[k]) for k in sorted(obj.keys())}


# ============================================================
# Typed value tree
# ============================================================

def canonical_value(value: Any) -> List[Any]:
    """
    Convert an operation parameter into its typed [tag, payload] form.

    Supported: int (arbitrary precision), bool, bytes, str, Identifier and
    list/tuple of those.
    """
    if isinstance(value, bool):
        return [TAG_BOOL, value]
    if isinstance(value, int):
        return [TAG_INT, str(value)]
    if isinstance(value, (bytes, bytearray)):
        return [TAG_BYTES, bytes(value).hex()]
    if isinstance(value, str):
        return [TAG_STR, value]
    if isinstance(value, Identifier):
        return [TAG_ID, [value.kind.value, value.value.hex()]]
    if isinstance(value, (list, tuple)):
        return [TAG_VEC, [canonical_value(item) for item in value]]
    raise EncodingError(f"Cannot encode parameter of type {type(value).__name__}")


def from_canonical_value(node: Any) -> Union[int, bool, bytes, str, Identifier, tuple]:
    """Inverse of canonical_value. Lists decode to tuples."""
    if not isinstance(node, list) or len(node) != 2 or not isinstance(node[0], str):
        raise EncodingError("Malformed value node")
    tag, payload = node
    try:
        if tag == TAG_BOOL and isinstance(payload, bool):
            return payload
        if tag == TAG_INT and isinstance(payload, str):
            return _parse_int(payload)
        if tag == TAG_BYTES and isinstance(payload, str):
            return bytes.fromhex(payload)
        if tag == TAG_STR and isinstance(payload, str):
            return payload
        if tag == TAG_ID and isinstance(payload, list) and len(payload) == 2:
            return Identifier(IdentifierKind(payload[0]), bytes.fromhex(payload[1]))
        if tag == TAG_VEC and isinstance(payload, list):
            return tuple(from_canonical_value(item) for item in payload)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Invalid {tag} payload: {e}")
    raise EncodingError(f"Unknown value tag: {tag!r}")


def _parse_int(text: str) -> int:
    # Reject forms int() would accept but canonical_value never produces
    body = text[1:] if text.startswith("-") else text
    if not body.isdigit() or not body.isascii() or (len(body) > 1 and body[0] == "0"):
        raise ValueError(f"non-canonical integer {text!r}")
    if text == "-0":
        raise ValueError("non-canonical integer '-0'")
    return int(text)

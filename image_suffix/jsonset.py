"""
Write a value at a dotted path inside a raw JSON document.

The document is spliced rather than re-serialized, so everything outside the
written member keeps its original bytes (whitespace, key order, number
formatting). Paths are plain object keys joined with "."; there is no escaping
and no array addressing.
"""

from __future__ import annotations

import json
from typing import Any, List

_WHITESPACE = " \t\r\n"
_VALUE_TERMINATORS = ",}]" + _WHITESPACE


class JSONPathError(ValueError):
    """Raised when a value cannot be written at the requested path."""


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _build(segments: List[str], value: Any) -> str:
    text = _encode(value)
    for segment in reversed(segments):
        text = "{" + _encode(segment) + ":" + text + "}"
    return text


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _scan_string(text: str, pos: int) -> int:
    i = pos + 1
    while True:
        c = text[i]
        if c == "\\":
            i += 2
        elif c == '"':
            return i + 1
        else:
            i += 1


def _scan_value(text: str, pos: int) -> int:
    c = text[pos]
    if c == '"':
        return _scan_string(text, pos)
    if c in "{[":
        depth = 0
        i = pos
        while True:
            c = text[i]
            if c == '"':
                i = _scan_string(text, i)
                continue
            if c in "{[":
                depth += 1
            elif c in "}]":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
    i = pos
    while i < len(text) and text[i] not in _VALUE_TERMINATORS:
        i += 1
    return i


def _set_in_object(text: str, start: int, segments: List[str], value: Any) -> str:
    key, rest = segments[0], segments[1:]
    pos = _skip_ws(text, start + 1)
    last_end = None

    while text[pos] != "}":
        key_end = _scan_string(text, pos)
        name = json.loads(text[pos:key_end])
        value_start = _skip_ws(text, _skip_ws(text, key_end) + 1)
        value_end = _scan_value(text, value_start)

        if name == key:
            if rest and text[value_start] == "{":
                return _set_in_object(text, value_start, rest, value)
            return text[:value_start] + _build(rest, value) + text[value_end:]

        last_end = value_end
        pos = _skip_ws(text, value_end)
        if text[pos] == ",":
            pos = _skip_ws(text, pos + 1)

    member = _encode(key) + ":" + _build(rest, value)
    if last_end is None:
        return text[:pos] + member + text[pos:]
    return text[:last_end] + "," + member + text[last_end:]


def set_bytes(raw: bytes, path: str, value: Any) -> bytes:
    """
    Return a copy of raw with value written at path.

    Missing objects along the path are created; an existing non-object on the
    path is replaced. Empty input is treated as an empty document.
    """
    segments = path.split(".") if path else []
    if not segments or any(not segment for segment in segments):
        raise JSONPathError(f"invalid path: {path!r}")

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise JSONPathError(f"document is not valid UTF-8: {exc}") from exc

    if not text.strip():
        return _build(segments, value).encode("utf-8")

    # Numbers stay text so oversized integers are not materialized.
    try:
        json.loads(text, parse_int=str, parse_float=str)
    except (ValueError, RecursionError) as exc:
        raise JSONPathError(f"malformed document: {exc}") from exc

    start = _skip_ws(text, 0)
    if text[start] != "{":
        raise JSONPathError("document root is not an object")

    return _set_in_object(text, start, segments, value).encode("utf-8")


__all__ = ["JSONPathError", "set_bytes"]

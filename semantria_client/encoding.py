"""
Percent-encoding helpers matching the escape tables the Semantria API expects.

Two tables are in play:

* encode_uri_component() follows ECMAScript encodeURIComponent: everything
  except ``A-Z a-z 0-9 - _ . ! ~ * ' ( )`` is escaped per UTF-8 byte.
* escape_utf8() escapes everything outside ``* + - . / 0-9 A-Z _ a-z``.

Request bodies go through encode_utf8(), which escapes and then unescapes
every 1-3 byte UTF-8 sequence. Characters outside the Basic Multilingual
Plane therefore stay percent-escaped in the body.
"""

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote, unquote

_URI_COMPONENT_SAFE = "!*'()"

_ESCAPE_UTF8_PATTERN = re.compile(r"[^*+\-./0-9A-Z_a-z]")

_UNESCAPE_UTF8_PATTERN = re.compile(
    r"%(E(0%[AB]|[1-9A-CEF]%[89AB]|D%[89])[0-9A-F]|C[2-9A-F]|D[0-9A-F])%[89AB][0-9A-F]"
    r"|%[0-7][0-9A-F]",
    re.IGNORECASE,
)


def encode_uri_component(text: str) -> str:
    """Escape text the way encodeURIComponent does (uppercase hex)."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def _escape_char(match) -> str:
    return "".join(f"%{byte:02X}" for byte in match.group(0).encode('utf-8'))


def escape_utf8(text: str) -> str:
    """Escape every character outside ``* + - . / 0-9 A-Z _ a-z``."""
    return _ESCAPE_UTF8_PATTERN.sub(_escape_char, text)


def _unescape_sequence(match) -> str:
    return bytes.fromhex(match.group(0).replace('%', '')).decode('utf-8')


def unescape_utf8(text: str) -> str:
    """Turn each escaped 1-3 byte UTF-8 sequence back into its character."""
    return _UNESCAPE_UTF8_PATTERN.sub(_unescape_sequence, text)


def encode_utf8(text: str) -> str:
    """Encode a request body into byte-safe text."""
    return unescape_utf8(encode_uri_component(text))


def decode_utf8(text: str) -> str:
    """Decode a response body produced by the API."""
    return unquote(escape_utf8(text))


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def create_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Build ``?k1=v1&k2=v2`` from params in insertion order.

    None values are dropped and values are not escaped. Returns an empty
    string when nothing is left.
    """
    if not params:
        return ""

    pairs = [
        f"{key}={_format_value(value)}"
        for key, value in params.items()
        if value is not None
    ]

    if pairs:
        return "?" + "&".join(pairs)

    return ""

"""
OAuth-style request signing for the Semantria API.

The server recomputes the signature over the full signed URL, so every step
below must be reproduced exactly:

    key       = hex(MD5(consumer_secret))
    message   = encodeURIComponent(signed_url)
    signature = encodeURIComponent(base64(HMAC-SHA1(key, message)))
"""

import base64
import hashlib
import hmac
import random
import time
from typing import Any, Dict, Mapping, Optional

from .constants import (
    MAX_NONCE,
    OAUTH_CONSUMER_KEY_KEY,
    OAUTH_NONCE_KEY,
    OAUTH_SIGNATURE_KEY,
    OAUTH_SIGNATURE_METHOD,
    OAUTH_SIGNATURE_METHOD_KEY,
    OAUTH_TIMESTAMP_KEY,
    OAUTH_VERSION,
    OAUTH_VERSION_KEY,
)
from .encoding import create_query_string, encode_uri_component


def generate_nonce() -> int:
    """Random integer nonce in [0, MAX_NONCE)."""
    return random.randrange(MAX_NONCE)


def generate_timestamp() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def build_url(
    api_host: str,
    path: str,
    format: str,
    params: Optional[Mapping[str, Any]] = None,
    is_binary: bool = False,
) -> str:
    """
    Build ``<host>/<path>[.<format>][?query]``.

    Binary requests carry no format suffix.
    """
    url = f"{api_host}/{path}"
    if not is_binary:
        url += f".{format}"
    return url + create_query_string(params)


def add_oauth_params(
    params: Mapping[str, Any],
    consumer_key: str,
    nonce: int,
    timestamp: int,
) -> Dict[str, Any]:
    """Return a copy of params with the five OAuth parameters appended."""
    signed = dict(params)
    signed[OAUTH_CONSUMER_KEY_KEY] = consumer_key
    signed[OAUTH_NONCE_KEY] = nonce
    signed[OAUTH_SIGNATURE_METHOD_KEY] = OAUTH_SIGNATURE_METHOD
    signed[OAUTH_TIMESTAMP_KEY] = timestamp
    signed[OAUTH_VERSION_KEY] = OAUTH_VERSION
    return signed


def compute_signature(consumer_secret: str, query_url: str) -> str:
    """
    Sign a fully query-augmented URL.

    Args:
        consumer_secret: OAuth consumer secret
        query_url: URL including the OAuth query parameters

    Returns:
        URI-escaped base64 HMAC-SHA1 signature
    """
    md5_secret = hashlib.md5(consumer_secret.encode('utf-8')).hexdigest()
    escaped_query = encode_uri_component(query_url)

    mac = hmac.new(
        md5_secret.encode('utf-8'),
        escaped_query.encode('utf-8'),
        hashlib.sha1
    )
    digest = base64.b64encode(mac.digest()).decode('ascii')
    return encode_uri_component(digest)


def build_authorization_header(
    consumer_key: str,
    nonce: int,
    timestamp: int,
    signature: str,
) -> str:
    """
    Build the Authorization header value.

    Version and signature method are unquoted; the remaining items are
    double-quoted. Items are joined by commas with no spaces.
    """
    items = [
        "OAuth",
        f"{OAUTH_VERSION_KEY}={OAUTH_VERSION}",
        f"{OAUTH_SIGNATURE_METHOD_KEY}={OAUTH_SIGNATURE_METHOD}",
        f'{OAUTH_NONCE_KEY}="{nonce}"',
        f'{OAUTH_CONSUMER_KEY_KEY}="{consumer_key}"',
        f'{OAUTH_TIMESTAMP_KEY}="{timestamp}"',
        f'{OAUTH_SIGNATURE_KEY}="{signature}"',
    ]
    return ",".join(items)

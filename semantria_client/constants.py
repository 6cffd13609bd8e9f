"""
Constants for the Semantria client library.
Endpoint, OAuth parameter and header names shared with the Semantria API.
"""

import os
import tempfile

# Credential service (login and session refresh)
SESSION_KEY_URL = "https://semantria.com/auth/session"

# Session-id cache file
DEFAULT_SESSION_FILE = os.path.join(tempfile.gettempdir(), "semantria-session.dat")

# OAuth query parameters and header items
OAUTH_VERSION = "1.0"
OAUTH_SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_CONSUMER_KEY_KEY = "oauth_consumer_key"
OAUTH_VERSION_KEY = "oauth_version"
OAUTH_SIGNATURE_METHOD_KEY = "oauth_signature_method"
OAUTH_SIGNATURE_KEY = "oauth_signature"
OAUTH_TIMESTAMP_KEY = "oauth_timestamp"
OAUTH_NONCE_KEY = "oauth_nonce"

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_APP_NAME = "x-app-name"
HEADER_API_VERSION = "x-api-version"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Username/password sent when none are configured (guest login)
UNSPECIFIED_LOGIN = "unspecified"

# Upper bound (exclusive) for request nonces
MAX_NONCE = 9999999

# Result returned for accepted-but-pending requests
STATUS_ACCEPTED = 202
STATUS_OK = 200

SDK_VERSION = "1.0.0"

# Default configuration values
DEFAULT_CONFIG = {
    'consumer_key': None,
    'consumer_secret': None,
    'api_host': "https://api.semantria.com",
    'api_version': "4.2",
    'sdk_version': SDK_VERSION,
    'application_name': None,
    'format': "json",
    'app_key': None,
    'username': None,
    'password': None,
    'session_file': DEFAULT_SESSION_FILE,
    'timeout': 30,              # HTTP timeout in seconds
}

"""
Semantria Client Library

A Python client library that signs requests for the Semantria API and
obtains consumer credentials through the Semantria credential service,
caching the session id between runs.

Example usage:
    from semantria_client import SemantriaClient

    client = SemantriaClient(app_key="your-app-key", username="me", password="secret")
    status = client.get("status")
"""

from .client import SemantriaClient
from .config import load_config, session_from_config
from .credentials import CredentialResolver, SessionCache
from .exceptions import (
    SemantriaClientError,
    ConfigurationError,
    CredentialExchangeError,
    TransportError,
    ApiError
)
from .observer import RequestObserver, CallbackObserver, LoggingObserver
from .pipeline import RequestPipeline, ResponseNormalizer, RequestContext
from .session import Session, RequestDescriptor
from .constants import (
    DEFAULT_CONFIG,
    DEFAULT_SESSION_FILE,
    SESSION_KEY_URL,
    SDK_VERSION
)

__version__ = SDK_VERSION
__all__ = [
    "SemantriaClient",
    "load_config",
    "session_from_config",
    "CredentialResolver",
    "SessionCache",
    "SemantriaClientError",
    "ConfigurationError",
    "CredentialExchangeError",
    "TransportError",
    "ApiError",
    "RequestObserver",
    "CallbackObserver",
    "LoggingObserver",
    "RequestPipeline",
    "ResponseNormalizer",
    "RequestContext",
    "Session",
    "RequestDescriptor",
    "DEFAULT_CONFIG",
    "DEFAULT_SESSION_FILE",
    "SESSION_KEY_URL",
    "SDK_VERSION"
]

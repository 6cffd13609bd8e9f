"""
Session configuration and per-call request descriptors.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .constants import DEFAULT_CONFIG, DEFAULT_SESSION_FILE
from .observer import RequestObserver


@dataclass(frozen=True)
class Session:
    """
    Long-lived client configuration.

    A Session is never mutated. Credential resolution returns a new Session
    carrying the consumer key and secret, so one value can be shared between
    calls without races on the credential fields.

    Attributes:
        consumer_key: OAuth consumer key, None until resolved
        consumer_secret: OAuth consumer secret, None until resolved
        api_host: Base URL of the API, without trailing slash
        api_version: Value of the x-api-version header
        sdk_version: Client SDK version string
        application_name: Value of the x-app-name header
        format: Response format suffix appended to non-binary paths
        observer: Lifecycle hooks invoked by the request pipeline
        app_key: Application key used for login and session refresh
        username: Login username ("unspecified" when absent)
        password: Login password ("unspecified" when absent)
        session_file: Path of the cached session-id file
        timeout: HTTP timeout in seconds
    """
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None
    api_host: str = DEFAULT_CONFIG['api_host']
    api_version: str = DEFAULT_CONFIG['api_version']
    sdk_version: str = DEFAULT_CONFIG['sdk_version']
    application_name: Optional[str] = None
    format: str = DEFAULT_CONFIG['format']
    observer: RequestObserver = field(default_factory=RequestObserver, compare=False)
    app_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    session_file: str = DEFAULT_SESSION_FILE
    timeout: float = DEFAULT_CONFIG['timeout']

    def __repr__(self):
        # Keep secrets out of logs and tracebacks
        return (
            f"Session(api_host={self.api_host!r}, app_key={self.app_key!r}, "
            f"consumer_key={self.consumer_key!r}, resolved={self.has_credentials})"
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.consumer_key) and bool(self.consumer_secret)

    def with_credentials(self, consumer_key: str, consumer_secret: str) -> "Session":
        """Return a copy of this session carrying the given key pair."""
        return replace(self, consumer_key=consumer_key, consumer_secret=consumer_secret)


@dataclass(frozen=True)
class RequestDescriptor:
    """
    One logical API call.

    Attributes:
        method: HTTP method (GET, POST, PUT or DELETE)
        path: API path relative to the host, without format suffix
        get_params: Query parameters; None values are dropped
        post_params: JSON-serializable request body
        is_binary: Skip the format suffix and return the raw response body
        call_after_response_hook: Invoke on_after_response with the result
    """
    method: str = "GET"
    path: str = ""
    get_params: Mapping[str, Any] = field(default_factory=dict)
    post_params: Any = None
    is_binary: bool = False
    call_after_response_hook: bool = False

    def __post_init__(self):
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'method', (self.method or "GET").upper())
        object.__setattr__(self, 'path', self.path or "")
        object.__setattr__(self, 'get_params', dict(self.get_params or {}))

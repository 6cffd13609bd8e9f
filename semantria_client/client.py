"""
Semantria API client.

Wraps the request pipeline in a requests-based client object that holds the
session configuration and reuses resolved credentials between calls.
"""

import logging
from typing import Any, Mapping, Optional

import requests

from .config import session_from_config
from .credentials import CredentialResolver
from .observer import RequestObserver
from .pipeline import RequestPipeline
from .session import RequestDescriptor, Session

logger = logging.getLogger(__name__)


class SemantriaClient:
    """
    Client for making signed requests to the Semantria API.

    Credentials are taken from the configuration when both consumer key and
    secret are given. Otherwise they are obtained once per client through
    the credential service, using the cached session id when possible.
    """

    def __init__(
        self,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        observer: Optional[RequestObserver] = None,
        **config
    ):
        """
        Initialize client.

        Args:
            consumer_key: OAuth consumer key
            consumer_secret: OAuth consumer secret
            observer: Lifecycle hooks for every request
            **config: Configuration options (app_key, username, password,
                api_host, api_version, application_name, format,
                session_file, timeout)
        """
        if consumer_key is not None:
            config['consumer_key'] = consumer_key
        if consumer_secret is not None:
            config['consumer_secret'] = consumer_secret
        self.session = session_from_config(config, observer=observer)

        # Create HTTP session
        self.http = requests.Session()
        self.http.headers['User-Agent'] = f"semantria-python/{self.session.sdk_version}"

        self.resolver = CredentialResolver(self.http)
        self.pipeline = RequestPipeline(self.http, resolver=self.resolver)

    def resolve(self) -> Session:
        """Resolve credentials once and keep the resolved session."""
        if not self.session.has_credentials:
            self.session = self.resolver.resolve(self.session)
            logger.debug("Client credentials resolved")
        return self.session

    def request(
        self,
        method: str,
        path: str,
        get_params: Optional[Mapping[str, Any]] = None,
        post_params: Any = None,
        is_binary: bool = False,
        call_after_response_hook: bool = False,
    ) -> Any:
        """
        Make a signed request.

        Args:
            method: HTTP method
            path: API path without format suffix
            get_params: Query parameters
            post_params: JSON-serializable body
            is_binary: Return the raw body and skip the format suffix
            call_after_response_hook: Invoke the observer's on_after_response

        Returns:
            Decoded JSON value, raw bytes, or 202 for accepted requests
        """
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            get_params=get_params or {},
            post_params=post_params,
            is_binary=is_binary,
            call_after_response_hook=call_after_response_hook,
        )
        return self.pipeline.run(self.resolve(), descriptor)

    def get(self, path: str, **kwargs) -> Any:
        """Make signed GET request."""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, post_params: Any = None, **kwargs) -> Any:
        """Make signed POST request."""
        return self.request('POST', path, post_params=post_params, **kwargs)

    def put(self, path: str, post_params: Any = None, **kwargs) -> Any:
        """Make signed PUT request."""
        return self.request('PUT', path, post_params=post_params, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """Make signed DELETE request."""
        return self.request('DELETE', path, **kwargs)

    def close(self):
        """Close HTTP session."""
        if self.http:
            self.http.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

"""
Request lifecycle observers.

The request pipeline reports four events to a RequestObserver: the outgoing
request, the raw response, an error response, and (on opt-in) the decoded
result. Observers are side-effect only; return values are ignored.
"""

import logging
from typing import Any, Callable, Dict, Optional

Event = Dict[str, Any]


class RequestObserver:
    """Observer with no-op hooks. Subclass and override what you need."""

    def on_request(self, event: Event) -> None:
        """Called with {method, url, message} before the request is sent."""

    def on_response(self, event: Event) -> None:
        """Called with {status, message} for every response."""

    def on_error(self, event: Event) -> None:
        """Called with {status, message} for responses treated as failures."""

    def on_after_response(self, result: Any) -> None:
        """Called with the decoded result when the caller opted in."""


class CallbackObserver(RequestObserver):
    """Adapts plain callables to the RequestObserver interface."""

    def __init__(
        self,
        on_request: Optional[Callable[[Event], Any]] = None,
        on_response: Optional[Callable[[Event], Any]] = None,
        on_error: Optional[Callable[[Event], Any]] = None,
        on_after_response: Optional[Callable[[Any], Any]] = None,
    ):
        self._on_request = on_request
        self._on_response = on_response
        self._on_error = on_error
        self._on_after_response = on_after_response

    def on_request(self, event: Event) -> None:
        if self._on_request:
            self._on_request(event)

    def on_response(self, event: Event) -> None:
        if self._on_response:
            self._on_response(event)

    def on_error(self, event: Event) -> None:
        if self._on_error:
            self._on_error(event)

    def on_after_response(self, result: Any) -> None:
        if self._on_after_response:
            self._on_after_response(result)


class LoggingObserver(RequestObserver):
    """Writes lifecycle events to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def on_request(self, event: Event) -> None:
        self.logger.debug("Request %s %s", event.get('method'), event.get('url'))

    def on_response(self, event: Event) -> None:
        self.logger.debug("Response status %s", event.get('status'))

    def on_error(self, event: Event) -> None:
        self.logger.warning(
            "Request failed with status %s: %s", event.get('status'), event.get('message')
        )

    def on_after_response(self, result: Any) -> None:
        self.logger.debug("Decoded result of type %s", type(result).__name__)

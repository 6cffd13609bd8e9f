"""
Signed request pipeline: resolve credentials, sign, send, normalize.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from .constants import (
    FORM_CONTENT_TYPE,
    HEADER_API_VERSION,
    HEADER_APP_NAME,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    STATUS_ACCEPTED,
    STATUS_OK,
)
from .credentials import CredentialResolver
from .encoding import decode_utf8, encode_utf8
from .exceptions import ApiError, ConfigurationError, TransportError
from .session import RequestDescriptor, Session
from .signing import (
    add_oauth_params,
    build_authorization_header,
    build_url,
    compute_signature,
    generate_nonce,
    generate_timestamp,
)

logger = logging.getLogger(__name__)

Body = Union[str, bytes]


@dataclass(frozen=True)
class RequestContext:
    """Everything derived for one call. Built once, never modified."""
    session: Session
    method: str
    path: str
    get_params: Dict[str, Any]
    post_params: Optional[str]
    is_binary: bool
    call_after_response_hook: bool
    nonce: int
    timestamp: int
    url: str
    query_url: str
    headers: Dict[str, str]

    @classmethod
    def build(
        cls,
        session: Session,
        descriptor: RequestDescriptor,
        nonce: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> "RequestContext":
        """
        Derive URLs, signature and headers for a call.

        Args:
            session: Resolved session carrying key and secret
            descriptor: The logical call
            nonce: Fixed nonce (generated when None)
            timestamp: Fixed millisecond timestamp (generated when None)
        """
        nonce = generate_nonce() if nonce is None else nonce
        timestamp = generate_timestamp() if timestamp is None else timestamp
        get_params = dict(descriptor.get_params)

        url = build_url(
            session.api_host, descriptor.path, session.format,
            get_params, descriptor.is_binary
        )
        signed_params = add_oauth_params(get_params, session.consumer_key, nonce, timestamp)
        query_url = build_url(
            session.api_host, descriptor.path, session.format,
            signed_params, descriptor.is_binary
        )

        signature = compute_signature(session.consumer_secret, query_url)
        headers = {
            HEADER_AUTHORIZATION: build_authorization_header(
                session.consumer_key, nonce, timestamp, signature
            ),
        }
        if descriptor.method == "POST":
            headers[HEADER_CONTENT_TYPE] = FORM_CONTENT_TYPE
        headers[HEADER_APP_NAME] = session.application_name
        headers[HEADER_API_VERSION] = session.api_version

        post_params = None
        if descriptor.post_params is not None:
            post_params = encode_utf8(
                json.dumps(descriptor.post_params, separators=(',', ':'), ensure_ascii=False)
            )

        return cls(
            session=session,
            method=descriptor.method,
            path=descriptor.path,
            get_params=signed_params,
            post_params=post_params,
            is_binary=descriptor.is_binary,
            call_after_response_hook=descriptor.call_after_response_hook,
            nonce=nonce,
            timestamp=timestamp,
            url=url,
            query_url=query_url,
            headers=headers,
        )


class ResponseNormalizer:
    """Maps a raw status and body onto the caller-facing result."""

    def normalize(self, context: RequestContext, status: int, body: Body) -> Any:
        """
        Normalize a response.

        Args:
            context: The request the response belongs to
            status: HTTP status code
            body: Raw response body

        Returns:
            Decoded JSON value, raw bytes for binary requests, or 202

        Raises:
            ApiError: If the status is not a success for this method
        """
        observer = context.session.observer
        message = body
        if not context.is_binary and isinstance(body, bytes):
            message = body.decode('utf-8', errors='replace')

        observer.on_response({'status': status, 'message': message})

        if context.method == "DELETE":
            if status == STATUS_ACCEPTED:
                return status
            self._fail(context, status, message)

        if status == STATUS_OK:
            result = message if context.is_binary else self._decode(status, message)
            if context.call_after_response_hook:
                observer.on_after_response(result)
            return result

        if status == STATUS_ACCEPTED:
            return status

        self._fail(context, status, message)

    @staticmethod
    def _decode(status: int, message: str) -> Any:
        try:
            return json.loads(decode_utf8(message))
        except ValueError as e:
            raise ApiError(f"Response is not valid JSON: {e}", status) from e

    @staticmethod
    def _fail(context: RequestContext, status: int, message: Body):
        context.session.observer.on_error({'status': status, 'message': message})
        logger.warning("%s %s failed with status %s", context.method, context.url, status)
        raise ApiError(_error_description(message), status)


def _error_description(message: Body) -> str:
    if isinstance(message, bytes):
        message = message.decode('utf-8', errors='replace')
    if not message:
        return "unknown error"

    try:
        body = json.loads(message)
    except ValueError:
        return message

    if isinstance(body, dict):
        for key in ('error_message', 'message'):
            if body.get(key):
                return str(body[key])
    return message


class RequestPipeline:
    """
    Runs logical API calls against the Semantria API.

    The pipeline resolves credentials, signs the request, sends it through
    the given HTTP session and normalizes the response.
    """

    def __init__(
        self,
        http: requests.Session,
        resolver: Optional[CredentialResolver] = None,
        normalizer: Optional[ResponseNormalizer] = None,
    ):
        self.http = http
        self.resolver = resolver or CredentialResolver(http)
        self.normalizer = normalizer or ResponseNormalizer()

    def run(self, session: Session, descriptor: RequestDescriptor) -> Any:
        """
        Execute one call.

        Args:
            session: Session, resolved or not; never modified
            descriptor: The logical call

        Returns:
            Decoded JSON value, raw bytes for binary requests, or 202

        Raises:
            ConfigurationError: If application_name is unset or no key/secret
                is available after resolution
            CredentialExchangeError: If credential resolution fails
            TransportError: If the request cannot be sent
            ApiError: If the API answers with a failure status
        """
        if not session.application_name:
            raise ConfigurationError("application_name must be specified to use the SDK")

        session = self.resolver.resolve(session)
        if not session.has_credentials:
            raise ConfigurationError(
                "consumer_key and consumer_secret must be specified to use the SDK"
            )

        context = RequestContext.build(session, descriptor)

        session.observer.on_request({
            'method': context.method,
            'url': context.url,
            'message': context.post_params,
        })

        response = self._send(context)
        return self.normalizer.normalize(context, response.status_code, response.content)

    def _send(self, context: RequestContext) -> requests.Response:
        kwargs = {
            'headers': context.headers,
            'timeout': context.session.timeout,
        }
        if context.post_params is not None:
            kwargs['data'] = context.post_params.encode('utf-8')

        logger.debug("%s %s", context.method, context.url)
        try:
            return self.http.request(context.method, context.query_url, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

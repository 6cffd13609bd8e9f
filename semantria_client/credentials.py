"""
Consumer key/secret resolution.

Credentials come from, in order: the session itself, a refresh of the
session id cached on disk, or a fresh login. A successful login caches the
new session id so later runs can skip the username/password exchange.
"""

import enum
import json
import logging
from typing import Any, Dict, Optional

import requests

from .constants import SESSION_KEY_URL, STATUS_OK, UNSPECIFIED_LOGIN
from .exceptions import ConfigurationError, CredentialExchangeError, TransportError
from .session import Session

logger = logging.getLogger(__name__)


class SessionCache:
    """
    Best-effort store for the last session id.

    The file holds a single JSON object ``{"id": "<session id>"}``. Read and
    write failures are logged and reported as "nothing cached" or False;
    they never raise.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        """Return the cached session id, or None if there is no usable one."""
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                contents = fh.read()
        except FileNotFoundError:
            logger.debug("No session cache at %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read session cache %s: %s", self.path, e)
            return None

        try:
            info = json.loads(contents)
        except ValueError:
            logger.warning("Ignoring malformed session cache %s", self.path)
            return None

        session_id = info.get('id') if isinstance(info, dict) else None
        if not session_id or not isinstance(session_id, str):
            logger.warning("Session cache %s carries no session id", self.path)
            return None

        return session_id

    def save(self, session_id: str) -> bool:
        """Overwrite the cache with session_id. Returns False on failure."""
        try:
            with open(self.path, 'w', encoding='utf-8') as fh:
                fh.write(json.dumps({'id': session_id}))
        except OSError as e:
            logger.warning("Could not write session cache %s: %s", self.path, e)
            return False

        logger.debug("Cached session id in %s", self.path)
        return True


class ResolverState(enum.Enum):
    UNRESOLVED = "unresolved"
    REFRESHING = "refreshing"
    LOGGING_IN = "logging_in"
    RESOLVED = "resolved"


class CredentialResolver:
    """
    Resolves a Session into one carrying a consumer key and secret.

    The resolver moves through UNRESOLVED -> REFRESHING -> RESOLVED, taking
    the REFRESHING -> LOGGING_IN edge when no session id is cached or the
    cached one is stale.
    """

    def __init__(self, http: requests.Session, session_key_url: str = SESSION_KEY_URL):
        """
        Initialize resolver.

        Args:
            http: HTTP session used for the credential exchange
            session_key_url: Base URL of the credential service
        """
        self.http = http
        self.session_key_url = session_key_url.rstrip('/')

    def resolve(self, session: Session) -> Session:
        """
        Return a session guaranteed to carry a consumer key and secret.

        Args:
            session: Session to resolve; never modified

        Returns:
            The same session if already resolved, else a resolved copy

        Raises:
            ConfigurationError: If login is needed but no app_key is set
            CredentialExchangeError: If login fails or a body is malformed
            TransportError: If the credential service cannot be reached
        """
        state = ResolverState.UNRESOLVED
        resolved = None

        while state is not ResolverState.RESOLVED:
            logger.debug("Credential resolver state: %s", state.value)

            if state is ResolverState.UNRESOLVED:
                if session.has_credentials:
                    resolved = session
                    state = ResolverState.RESOLVED
                elif not session.app_key:
                    raise ConfigurationError(
                        "app_key is required to obtain consumer key and secret"
                    )
                else:
                    state = ResolverState.REFRESHING

            elif state is ResolverState.REFRESHING:
                resolved = self._refresh(session)
                state = ResolverState.RESOLVED if resolved else ResolverState.LOGGING_IN

            elif state is ResolverState.LOGGING_IN:
                resolved = self._login(session)
                state = ResolverState.RESOLVED

        return resolved

    def _refresh(self, session: Session) -> Optional[Session]:
        """Try the cached session id. Returns None when a login is needed."""
        session_id = SessionCache(session.session_file).load()
        if not session_id:
            return None

        url = f"{self.session_key_url}/{session_id}.json?appkey={session.app_key}"
        response = self._send('GET', url, timeout=session.timeout)

        if response.status_code != STATUS_OK:
            logger.warning(
                "Cached session is stale (status %s), logging in again",
                response.status_code
            )
            return None

        logger.debug("Refreshed credentials from cached session id")
        return self._apply_keys(session, self._parse_body(response))

    def _login(self, session: Session) -> Session:
        url = f"{self.session_key_url}.json?appkey={session.app_key}"
        data = {
            'username': session.username or UNSPECIFIED_LOGIN,
            'password': session.password or UNSPECIFIED_LOGIN,
        }

        response = self._send('POST', url, data=json.dumps(data), timeout=session.timeout)

        if response.status_code != STATUS_OK:
            raise CredentialExchangeError(
                self._error_message(response), status=response.status_code
            )

        body = self._parse_body(response)
        session_id = body.get('id')
        if session_id:
            SessionCache(session.session_file).save(str(session_id))
        else:
            logger.warning("Login response carried no session id, nothing cached")

        logger.debug("Obtained credentials through login")
        return self._apply_keys(session, body)

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.http.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Credential request failed: {e}") from e

    @staticmethod
    def _parse_body(response: requests.Response) -> Dict[str, Any]:
        try:
            body = json.loads(response.text)
        except ValueError as e:
            raise CredentialExchangeError(
                "Malformed credential service response", status=response.status_code
            ) from e

        if not isinstance(body, dict):
            raise CredentialExchangeError(
                "Malformed credential service response", status=response.status_code
            )
        return body

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = json.loads(response.text)
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get('error_message'):
            return str(body['error_message'])
        return response.text or "unknown error"

    @staticmethod
    def _apply_keys(session: Session, body: Dict[str, Any]) -> Session:
        params = body.get('custom_params')
        if not isinstance(params, dict) or not params.get('key') or not params.get('secret'):
            raise CredentialExchangeError(
                "Credential service response carries no custom_params key/secret"
            )
        return session.with_credentials(params['key'], params['secret'])

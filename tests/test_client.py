"""
Unit tests for the Semantria client.
"""

import json
from unittest.mock import Mock, patch

import pytest

from semantria_client import (
    ApiError,
    CallbackObserver,
    ConfigurationError,
    SemantriaClient,
)
from semantria_client.constants import SESSION_KEY_URL


def make_response(status, body=b""):
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    return Mock(status_code=status, content=body, text=body.decode('utf-8'))


class TestSemantriaClient:
    """Test client functionality."""

    @pytest.fixture
    def client(self):
        """Create test client with preset credentials."""
        return SemantriaClient("K", "S", api_host="https://api.example.com",
                               application_name="tests")

    def test_init_default_config(self):
        """Test client initialization with default config."""
        client = SemantriaClient("K", "S")

        assert client.session.consumer_key == "K"
        assert client.session.consumer_secret == "S"
        assert client.session.api_host == "https://api.semantria.com"
        assert client.session.format == "json"
        assert client.session.timeout == 30
        assert client.http.headers['User-Agent'].startswith("semantria-python/")

    def test_init_custom_config(self):
        """Test client initialization with custom config."""
        client = SemantriaClient(
            app_key="app",
            api_host="http://localhost:8080/",
            format="xml",
            timeout=60
        )

        assert client.session.api_host == "http://localhost:8080"
        assert client.session.format == "xml"
        assert client.session.timeout == 60
        assert client.session.has_credentials is False

    def test_init_invalid_config(self):
        """Test client initialization with invalid config."""
        with pytest.raises(ConfigurationError):
            SemantriaClient("K", "S", api_host="ftp://example.com")

        with pytest.raises(ConfigurationError):
            SemantriaClient("K", "S", timeout=0)

        with pytest.raises(ConfigurationError):
            SemantriaClient("K", "S", key_interval=300)

    @patch('semantria_client.client.requests.Session.request')
    def test_get_task_end_to_end(self, mock_request, client):
        """Test a signed GET returning a decoded JSON body."""
        mock_request.return_value = make_response(200, b'{"status":"COMPLETED"}')

        result = client.get("task")

        assert result == {"status": "COMPLETED"}
        mock_request.assert_called_once()
        args, kwargs = mock_request.call_args
        assert args[0] == 'GET'
        assert args[1].startswith("https://api.example.com/task.json?oauth_consumer_key=K&")
        assert kwargs['headers']['Authorization'].startswith(
            'OAuth,oauth_version=1.0,oauth_signature_method=HMAC-SHA1,oauth_nonce="'
        )
        assert kwargs['headers']['x-app-name'] == "tests"

    @patch('semantria_client.client.requests.Session.request')
    def test_http_methods(self, mock_request, client):
        """Test all HTTP method shortcuts."""
        mock_request.side_effect = [
            make_response(200, b'{}'),
            make_response(202),
            make_response(202),
            make_response(202),
        ]

        assert client.get('document/1') == {}
        assert client.post('document', post_params=[{"id": "1", "text": "hi"}]) == 202
        assert client.put('document', post_params={"id": "1"}) == 202
        assert client.delete('document/1') == 202

        calls = mock_request.call_args_list
        assert [call[0][0] for call in calls] == ['GET', 'POST', 'PUT', 'DELETE']
        assert calls[1][1]['data'] == b'[{"id":"1","text":"hi"}]'

    @patch('semantria_client.client.requests.Session.request')
    def test_binary_request(self, mock_request, client):
        """Test binary requests skip the format suffix and decoding."""
        mock_request.return_value = make_response(200, b"\x00\x01raw")

        result = client.get("export", is_binary=True)

        assert result == b"\x00\x01raw"
        assert mock_request.call_args[0][1].startswith("https://api.example.com/export?")

    @patch('semantria_client.client.requests.Session.request')
    def test_hooks(self, mock_request):
        """Test observer hooks across a failing request."""
        events = []
        observer = CallbackObserver(
            on_request=lambda e: events.append(('request', e['method'])),
            on_response=lambda e: events.append(('response', e['status'])),
            on_error=lambda e: events.append(('error', e['status'])),
        )
        client = SemantriaClient("K", "S", observer=observer, application_name="tests")
        mock_request.return_value = make_response(404, {"message": "No such document"})

        with pytest.raises(ApiError) as exc_info:
            client.get("document/missing")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "No such document"
        assert events == [('request', 'GET'), ('response', 404), ('error', 404)]

    @patch('semantria_client.client.requests.Session.request')
    def test_resolves_credentials_once(self, mock_request, tmp_path):
        """Test login happens once and the session id is cached."""
        cache = tmp_path / "session.dat"
        client = SemantriaClient(app_key="app", username="u", password="p",
                                 application_name="tests", session_file=str(cache))
        mock_request.side_effect = [
            make_response(200, {"id": "sid", "custom_params": {"key": "LK", "secret": "LS"}}),
            make_response(200, b'{"a":1}'),
            make_response(200, b'{"b":2}'),
        ]

        assert client.get("status") == {"a": 1}
        assert client.get("status") == {"b": 2}

        calls = mock_request.call_args_list
        assert calls[0][0] == ('POST', f"{SESSION_KEY_URL}.json?appkey=app")
        assert "oauth_consumer_key=LK" in calls[1][0][1]
        assert "oauth_consumer_key=LK" in calls[2][0][1]
        assert client.session.consumer_secret == "LS"
        assert json.loads(cache.read_text()) == {"id": "sid"}

    @patch('semantria_client.client.requests.Session.request')
    def test_resolve_without_app_key(self, mock_request):
        """Test that unresolvable credentials are a configuration error."""
        client = SemantriaClient()

        with pytest.raises(ConfigurationError):
            client.get("status")
        mock_request.assert_not_called()

    def test_context_manager(self):
        """Test client as context manager."""
        with patch('semantria_client.client.requests.Session.close') as mock_close:
            with SemantriaClient("K", "S") as client:
                assert client.http is not None

        mock_close.assert_called_once()

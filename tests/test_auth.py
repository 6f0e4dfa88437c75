"""
Tests for fbupload.auth.login module.

Tests the login exchange including:
- Request shape (method, URL, headers, JSON body)
- JSON, raw, and auto token formats
- Status code and decoder failures
- Secrets never appearing in error messages
"""

from __future__ import annotations

import json

import pytest

from fbupload.auth.credentials import Credential
from fbupload.auth.login import authenticate
from fbupload.exceptions import (
    AuthenticationError,
    ConfigError,
    TransportError,
)
from fbupload.results import ErrorKind


class TestLoginRequest:
    """Tests for what the login call sends."""

    def test_posts_json_credentials(self, base_url, credential, fake_transport):
        """Test that login POSTs the username and password as JSON."""
        transport = fake_transport(['{"token":"abc"}200'])

        authenticate(base_url, credential, transport=transport)

        (call,) = transport.calls
        assert call.method == "POST"
        assert call.url == "https://fb.example.com/api/login"
        assert call.headers == {"Content-Type": "application/json"}
        assert json.loads(call.body) == {
            "username": "deploy",
            "password": "s3cret-Pa55",
        }

    def test_special_characters_are_escaped(self, base_url, fake_transport):
        """Test that quotes and backslashes in the password stay valid JSON."""
        transport = fake_transport(["tok200"])
        tricky = Credential(username='o"neil', password='p"a\\ss')

        authenticate(base_url, tricky, transport=transport)

        assert json.loads(transport.calls[0].body)["password"] == 'p"a\\ss'

    def test_trailing_slash_in_base_url(self, credential, fake_transport):
        """Test that a trailing slash does not double the separator."""
        transport = fake_transport(["tok200"])

        authenticate("https://fb.example.com/", credential, transport=transport)

        assert transport.calls[0].url == "https://fb.example.com/api/login"


class TestTokenFormats:
    """Tests for extracting the token from a 200 response."""

    def test_json_envelope(self, base_url, credential, fake_transport):
        """Test that the token field of a JSON body is returned."""
        transport = fake_transport(['{"token":"abc"}200'])

        token = authenticate(base_url, credential, transport=transport, token_format="json")

        assert token == "abc"

    def test_raw_token(self, base_url, credential, fake_transport):
        """Test that a raw token body is returned trimmed."""
        transport = fake_transport(["  abc\n200"])

        token = authenticate(base_url, credential, transport=transport, token_format="raw")

        assert token == "abc"

    @pytest.mark.parametrize("raw", ['{"token":"abc"}200', "abc200"])
    def test_auto_accepts_both(self, base_url, credential, fake_transport, raw):
        """Test that auto mode handles the JSON envelope and the raw token."""
        transport = fake_transport([raw])

        assert authenticate(base_url, credential, transport=transport) == "abc"

    def test_marker_convention(self, base_url, credential, fake_transport):
        """Test that the transport's convention is used to decode the reply."""
        raw = "abc\n=== CURL STATS ===\nHTTP_CODE:200\nTOTAL_TIME:0.1\n"
        transport = fake_transport([raw], convention="marker")

        assert authenticate(base_url, credential, transport=transport) == "abc"

    def test_json_mode_without_token_field(self, base_url, credential, fake_transport):
        """Test that a JSON body without a token is a login failure."""
        transport = fake_transport(['{"user":"deploy"}200'])

        with pytest.raises(AuthenticationError, match="no 'token' field"):
            authenticate(base_url, credential, transport=transport, token_format="json")

    @pytest.mark.parametrize(
        "raw", ['{"error":"bad"}200', '{"token":null}200', '{"token":42}200']
    )
    def test_auto_rejects_object_without_token(
        self, base_url, credential, fake_transport, raw
    ):
        """Test that auto mode never uses a JSON object body as the token."""
        transport = fake_transport([raw])

        with pytest.raises(AuthenticationError, match="no 'token' field") as exc_info:
            authenticate(base_url, credential, transport=transport)

        assert exc_info.value.status_code == "200"

    def test_verbose_transport_trace_stripped(self, base_url, credential, fake_transport):
        """Test that curl trace lines are dropped when the transport is verbose."""
        raw = "* Connected to fb.example.com\n< HTTP/1.1 200 OK\nabc200"
        transport = fake_transport([raw], verbose=True)

        assert authenticate(base_url, credential, transport=transport) == "abc"

    @pytest.mark.parametrize("raw", ["200", "null200", '{"token":""}200'])
    def test_empty_token_rejected(self, base_url, credential, fake_transport, raw):
        """Test that an empty or null token is a login failure."""
        transport = fake_transport([raw])

        with pytest.raises(AuthenticationError, match="no token"):
            authenticate(base_url, credential, transport=transport)

    def test_unknown_token_format(self, base_url, credential, fake_transport):
        """Test that an unknown token format is rejected before any request."""
        transport = fake_transport([])

        with pytest.raises(ConfigError, match="Unknown token format"):
            authenticate(base_url, credential, transport=transport, token_format="xml")

        assert transport.calls == []


class TestLoginFailures:
    """Tests for failed logins."""

    def test_401_carries_status_code(self, base_url, credential, fake_transport):
        """Test that a rejected login reports the observed status code."""
        transport = fake_transport(['{"error":"bad credentials"}401'])

        with pytest.raises(AuthenticationError) as exc_info:
            authenticate(base_url, credential, transport=transport)

        err = exc_info.value
        assert err.kind is ErrorKind.AUTHENTICATION_FAILED
        assert err.status_code == "401"
        assert "deploy" in str(err)
        assert "s3cret-Pa55" not in str(err)

    def test_malformed_response(self, base_url, credential, fake_transport):
        """Test that an undecodable response is a login failure."""
        transport = fake_transport(["garbage"])

        with pytest.raises(AuthenticationError, match="unreadable login response") as exc_info:
            authenticate(base_url, credential, transport=transport)

        assert exc_info.value.status_code is None

    def test_transport_failure(self, base_url, credential, fake_transport):
        """Test that a transport error becomes a login failure."""
        transport = fake_transport([TransportError("connection refused")])

        with pytest.raises(AuthenticationError, match="connection refused"):
            authenticate(base_url, credential, transport=transport)

# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""FileBrowser login.

Exchanges a username/password for the bearer token that later requests
present in the X-Auth header.

Token formats observed across server versions:

- json: body is `{"token": "..."}`
- raw: body is the token itself (surrounding whitespace trimmed)
- auto: json when the body is a JSON object (which must then carry a
  token field), else raw

The token is never validated client-side; the server alone decides whether
it is still good.
"""

from __future__ import annotations

import json
from typing import Literal

from fbupload.auth.credentials import Credential
from fbupload.exceptions import (
    AuthenticationError,
    ConfigError,
    MalformedResponseError,
    TransportError,
)
from fbupload.io.response import decode_response
from fbupload.io.transport import Transport

__all__ = ["AUTH_HEADER", "TOKEN_FORMATS", "authenticate", "login_url"]

TokenFormat = Literal["auto", "json", "raw"]
TOKEN_FORMATS: tuple[str, ...] = ("auto", "json", "raw")

# Header every authenticated request carries the token in.
AUTH_HEADER = "X-Auth"


def login_url(server_base_url: str) -> str:
    return f"{server_base_url.rstrip('/')}/api/login"


def _json_object(body: str) -> dict | None:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _token_field(data: dict | None) -> str:
    token = data.get("token") if data is not None else None
    if not isinstance(token, str):
        raise AuthenticationError(
            "login response has no 'token' field", status_code="200"
        )
    return token


def _extract_token(body: str, token_format: str) -> str:
    if token_format == "json":
        token = _token_field(_json_object(body))
    elif token_format == "raw":
        token = body.strip()
    else:
        # A JSON object is an envelope even when it carries no token.
        data = _json_object(body)
        token = body.strip() if data is None else _token_field(data)

    token = token.strip()
    if not token or token == "null":
        raise AuthenticationError("login response contained no token", status_code="200")
    return token


def authenticate(
    server_base_url: str,
    credential: Credential,
    *,
    transport: Transport,
    token_format: TokenFormat = "auto",
) -> str:
    """Log in and return the bearer token.

    Args:
        server_base_url: Server root (e.g., "https://files.example.com").
        credential: Username and password.
        transport: Transport used for the login call. Its response
            convention is used to decode the reply.
        token_format: How the token is carried in the body
            ("auto", "json", or "raw").

    Returns:
        The token string.

    Raises:
        AuthenticationError: On any non-200 status, an undecodable response,
            a transport failure, or an empty token. status_code is set when
            one was observed.
        ConfigError: If token_format is unknown.

    Example:
        ```python
        token = authenticate(
            "https://files.example.com",
            Credential("deploy", "s3cret"),
            transport=RequestsTransport(),
        )
        ```
    """
    if token_format not in TOKEN_FORMATS:
        raise ConfigError(
            f"Unknown token format: {token_format!r}. "
            f"Available: {', '.join(TOKEN_FORMATS)}"
        )

    payload = json.dumps(
        {"username": credential.username, "password": credential.password}
    ).encode("utf-8")

    try:
        raw = transport.execute(
            "POST",
            login_url(server_base_url),
            {"Content-Type": "application/json"},
            payload,
        )
        response = decode_response(
            raw, transport.convention, verbose=transport.verbose
        )
    except TransportError as err:
        raise AuthenticationError(f"login request failed: {err}") from err
    except MalformedResponseError as err:
        raise AuthenticationError(f"unreadable login response: {err}") from err

    if response.status_code != "200":
        raise AuthenticationError(
            f"login rejected for user {credential.username!r}",
            status_code=response.status_code,
        )

    return _extract_token(response.body, token_format)

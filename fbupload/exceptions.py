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

"""Exception hierarchy for fbupload.

Library functions raise these exceptions; the upload orchestrator converts
them into an UploadFailure at its boundary so callers of run() and
upload_file() only ever see a tagged result.

- ConfigError: Invalid server profile or unknown transfer strategy
- CredentialNotFoundError: Credential identifier unknown to the store
- NetworkError: Base class for problems talking to the server
    - TransportError: The transport could not complete the request
    - MalformedResponseError: Raw transport output had no usable status code
    - AuthenticationError: Login did not yield a token

Every exception carries an ErrorKind and, where one was observed, the HTTP
status code. Messages never contain passwords or tokens.

Example:
    Catching all fbupload errors:
        ```python
        from fbupload.exceptions import FBUploadError

        try:
            token = authenticate(url, credential, transport=transport)
        except FBUploadError as e:
            print(f"{e.kind.value}: {e}")
        ```
"""

from __future__ import annotations

from fbupload.results import ErrorKind

__all__ = [
    "FBUploadError",
    "ConfigError",
    "CredentialNotFoundError",
    "NetworkError",
    "TransportError",
    "MalformedResponseError",
    "AuthenticationError",
]


class FBUploadError(Exception):
    """Base exception for all fbupload errors.

    Attributes:
        kind: Error classification reported to the caller.
        status_code: Observed 3-digit HTTP status code, if any.
    """

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, status_code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(FBUploadError):
    """Raised for invalid profiles, options, or strategy names."""

    kind = ErrorKind.INVALID_ARGUMENT


class CredentialNotFoundError(FBUploadError):
    """Raised when a credential identifier cannot be resolved."""

    kind = ErrorKind.CREDENTIAL_NOT_FOUND


class NetworkError(FBUploadError):
    """Base class for errors raised while talking to the server."""

    kind = ErrorKind.UPLOAD_FAILED


class TransportError(NetworkError):
    """Raised when the transport cannot complete a request.

    Covers connection refusals, timeouts, TLS failures, and a missing or
    failing curl binary. No status code is available in these cases.
    """


class MalformedResponseError(NetworkError):
    """Raised when raw transport output carries no valid status code."""

    kind = ErrorKind.MALFORMED_RESPONSE


class AuthenticationError(NetworkError):
    """Raised when login fails or returns no usable token."""

    kind = ErrorKind.AUTHENTICATION_FAILED

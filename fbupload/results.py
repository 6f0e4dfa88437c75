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

"""Public API return types for fbupload.

An upload ends in exactly one UploadOutcome: either UploadSuccess carrying
the human-facing access URL, or UploadFailure carrying an ErrorKind, a
detail message, and the HTTP status code when one was observed.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Branching on an outcome:
        ```python
        from fbupload.core import upload_file
        from fbupload.results import UploadSuccess

        outcome = upload_file("https://files.example.com", "app.zip", "deploy")
        if isinstance(outcome, UploadSuccess):
            print(outcome.access_url)
        else:
            print(outcome.message)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ErrorKind(Enum):
    """Classification of terminal upload failures."""

    INVALID_ARGUMENT = "InvalidArgument"
    LOCAL_FILE_NOT_FOUND = "LocalFileNotFound"
    CREDENTIAL_NOT_FOUND = "CredentialNotFound"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    MALFORMED_RESPONSE = "MalformedResponse"
    CREATE_FAILED = "CreateFailed"
    CONTENT_UPLOAD_FAILED = "ContentUploadFailed"
    UPLOAD_FAILED = "UploadFailed"


# Stage names used in user-visible failure messages.
_STAGES = {
    ErrorKind.INVALID_ARGUMENT: "Validation",
    ErrorKind.LOCAL_FILE_NOT_FOUND: "Local file check",
    ErrorKind.CREDENTIAL_NOT_FOUND: "Credential lookup",
    ErrorKind.AUTHENTICATION_FAILED: "Login",
    ErrorKind.MALFORMED_RESPONSE: "Response decoding",
    ErrorKind.CREATE_FAILED: "Resumable create",
    ErrorKind.CONTENT_UPLOAD_FAILED: "Resumable content upload",
    ErrorKind.UPLOAD_FAILED: "Upload",
}


@dataclass(frozen=True)
class UploadSuccess:
    """Successful upload.

    Attributes:
        access_url: Browser URL of the uploaded file
            (base + "/files" + dir + "/" + name).
    """

    access_url: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class UploadFailure:
    """Terminal upload failure.

    Attributes:
        kind: What went wrong.
        detail: Human-readable description. Never contains secrets.
        status_code: Observed HTTP status code, or None when the failure
            happened before or outside an HTTP exchange.
    """

    kind: ErrorKind
    detail: str
    status_code: str | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        """Single-line message naming the stage and the status code."""
        stage = _STAGES[self.kind]
        if self.status_code:
            return f"{stage} failed (HTTP {self.status_code}): {self.detail}"
        return f"{stage} failed: {self.detail}"


UploadOutcome = Union[UploadSuccess, UploadFailure]


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a server profile.

    Attributes:
        status: "valid" or "invalid".
        errors: Error messages (empty if valid).
        warnings: Warning messages.
        profile_path: String path to the validated profile.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    profile_path: str

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

"""Upload orchestration for fbupload.

run() drives one upload through a fixed state machine:

    Init -> Validated -> Authenticated -> Uploaded -> Done

Any step can move directly to Failed(kind). Nothing is retried and nothing
is rolled back: a resumable create followed by a failed patch leaves a
partial file on the server.

Design Principles:

- Every step is a fail-fast exit returning an UploadFailure
- Arguments are validated before the file system is touched, and the local
  file is checked before the network is touched
- Library exceptions are converted to UploadFailure here, so callers only
  branch on the returned UploadOutcome
- The logger observes completed steps; it never drives a decision
- Passwords and tokens are never logged

Known Hazards:
    Uploads always overwrite. Concurrent uploads to the same remote path are
    last-writer-wins; no coordination is attempted.

Example:
    Programmatic usage:
        ```python
        from fbupload.core import upload_file

        outcome = upload_file(
            "https://files.example.com",
            "dist/app-1.2.3.zip",
            "deploy-bot",
            remote_dir="/releases",
        )
        if outcome.ok:
            print(outcome.access_url)
        else:
            print(outcome.message)
        ```

"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any
from urllib.parse import quote

from fbupload.auth.credentials import Credential, CredentialStore
from fbupload.auth.login import AUTH_HEADER, authenticate
from fbupload.config.loader import load_profile
from fbupload.exceptions import FBUploadError, MalformedResponseError, TransportError
from fbupload.io.files import format_size, normalize_remote_dir
from fbupload.io.transport import Transport, make_transport
from fbupload.logging import Logger, get_global_logger, mask_secret
from fbupload.results import ErrorKind, UploadFailure, UploadOutcome
from fbupload.transfer import get_strategy
from fbupload.transfer.base import exchange
from fbupload.validation import validate_profile, validate_request

TOTAL_STEPS = 3

DIRECTORY_READY_CODES = ("200", "201", "409")


@dataclass(frozen=True)
class UploadRequest:
    """One upload, immutable for the duration of run().

    Attributes:
        server_base_url: Server root, http:// or https://.
        local_file_path: File to upload.
        credential: Login credential.
        remote_dir: Target directory on the server. Defaults to "/".
    """

    server_base_url: str
    local_file_path: str | Path
    credential: Credential | None
    remote_dir: str = "/"


def _failure(logger: Logger, failure: UploadFailure) -> UploadFailure:
    logger.verbose("ERROR", failure.message)
    return failure


def ensure_remote_directory(
    server_base_url: str,
    token: str,
    remote_dir: str,
    transport: Transport,
) -> str | None:
    """Ask the server to create remote_dir, best effort.

    FileBrowser answers 200/201 for a new directory and 409 for an existing
    one. Any other answer, or no answer at all, is reported back but never
    fails the upload.

    Args:
        server_base_url: Server root without trailing slash.
        token: Bearer token.
        remote_dir: Normalized remote directory ("" for root, which is
            skipped).
        transport: Transport to use.

    Returns:
        The observed status code, or None if the directory is the root or
        the request could not be completed.
    """
    if not remote_dir:
        return None
    url = f"{server_base_url}/api/resources{quote(remote_dir, safe='/')}/"
    headers = {AUTH_HEADER: token, "Content-Type": "application/json"}
    try:
        response = exchange(transport, "POST", url, headers, json.dumps({}).encode())
    except (TransportError, MalformedResponseError):
        return None
    return response.status_code


def run(
    request: UploadRequest,
    *,
    profile: dict[str, Any] | None = None,
    logger: Logger | None = None,
    transport: Transport | None = None,
) -> UploadOutcome:
    """Upload one file and return the outcome.

    Steps, each a fail-fast exit:

    1. Validate arguments and profile (ErrorKind.INVALID_ARGUMENT)
    2. Check the local file exists (ErrorKind.LOCAL_FILE_NOT_FOUND)
    3. Log in (ErrorKind.AUTHENTICATION_FAILED)
    4. Optionally create the remote directory (never fails)
    5. Transfer with the configured strategy (its own failure kinds)
    6. Compose base + "/files" + dir + "/" + name

    Args:
        request: What to upload, where, and as whom.
        profile: Merged server profile. Defaults to load_profile().
        logger: Step observer. Defaults to the global logger.
        transport: Transport override. Defaults to one built from
            profile["transport"].

    Returns:
        UploadSuccess or UploadFailure. This function does not raise for
        any upload problem.
    """
    logger = logger or get_global_logger()
    errors = validate_request(
        request.server_base_url, request.local_file_path, request.credential
    )
    if errors:
        return _failure(
            logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, "; ".join(errors))
        )

    try:
        profile = profile if profile is not None else load_profile()
    except FBUploadError as err:
        return _failure(logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, str(err)))
    errors = validate_profile(profile)
    if errors:
        return _failure(
            logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, "; ".join(errors))
        )

    server = profile["server"]
    base_url = request.server_base_url.rstrip("/")
    remote_dir = normalize_remote_dir(request.remote_dir)
    strategy = get_strategy(server["transfer"])

    local_path = Path(request.local_file_path)
    if not local_path.is_file():
        return _failure(
            logger,
            UploadFailure(
                ErrorKind.LOCAL_FILE_NOT_FOUND, f"local file does not exist: {local_path}"
            ),
        )
    logger.step(
        1,
        TOTAL_STEPS,
        f"Validated {local_path.name} ({format_size(local_path.stat().st_size)}) "
        f"-> {base_url} {remote_dir or '/'}",
    )

    owns_transport = transport is None
    if transport is None:
        try:
            transport = make_transport(profile["transport"])
        except FBUploadError as err:
            return _failure(logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, str(err)))

    try:
        try:
            token = authenticate(
                base_url,
                request.credential,
                transport=transport,
                token_format=server["token_format"],
            )
        except FBUploadError as err:
            return _failure(
                logger, UploadFailure(err.kind, str(err), status_code=err.status_code)
            )
        logger.step(2, TOTAL_STEPS, f"Authenticated as {request.credential.username}")
        logger.debug("AUTH", f"Token received {mask_secret(token)}")

        if server.get("ensure_remote_dir"):
            status = ensure_remote_directory(base_url, token, remote_dir, transport)
            if status is not None and status not in DIRECTORY_READY_CODES:
                logger.verbose(
                    "UPLOAD", f"Remote directory check returned HTTP {status}"
                )

        outcome = strategy.upload(
            base_url,
            token,
            local_path,
            remote_dir,
            transport=transport,
            options=server,
        )
    finally:
        if owns_transport and hasattr(transport, "close"):
            transport.close()

    if isinstance(outcome, UploadFailure):
        return _failure(logger, outcome)

    logger.step(3, TOTAL_STEPS, f"Uploaded via {server['transfer']} transfer")
    logger.verbose("UPLOAD", f"Access URL: {outcome.access_url}")
    return outcome


def upload_file(
    server_base_url: str | None,
    local_file_path: str | Path | None,
    credential_id: str | None,
    remote_dir: str | None = "/",
    *,
    profile: dict[str, Any] | None = None,
    credential_store: CredentialStore | None = None,
    logger: Logger | None = None,
    transport: Transport | None = None,
) -> UploadOutcome:
    """Caller-facing upload: resolve the credential, then run().

    Args:
        server_base_url: Server root. Falls back to profile server.url.
        local_file_path: File to upload.
        credential_id: Identifier resolved through the credential store.
        remote_dir: Target directory. None or "" means "/".
        profile: Merged server profile. Defaults to load_profile().
        credential_store: Store to resolve credential_id with. Defaults to
            CredentialStore(profile["credentials"]["env_prefix"]).
        logger: Step observer. Defaults to the global logger.
        transport: Transport override.

    Returns:
        UploadSuccess or UploadFailure.
    """
    logger = logger or get_global_logger()
    try:
        profile = profile if profile is not None else load_profile()
    except FBUploadError as err:
        return _failure(logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, str(err)))

    server_base_url = server_base_url or profile["server"].get("url")
    errors = validate_request(server_base_url, local_file_path, credential_id or None)
    if errors:
        return _failure(
            logger, UploadFailure(ErrorKind.INVALID_ARGUMENT, "; ".join(errors))
        )

    store = credential_store or CredentialStore(
        env_prefix=profile["credentials"].get("env_prefix", "FB_")
    )
    try:
        credential = store.resolve(credential_id)
    except FBUploadError as err:
        return _failure(logger, UploadFailure(err.kind, str(err)))

    return run(
        UploadRequest(
            server_base_url=server_base_url,
            local_file_path=local_file_path,
            credential=credential,
            remote_dir=remote_dir or "/",
        ),
        profile=profile,
        logger=logger,
        transport=transport,
    )

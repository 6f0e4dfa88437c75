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

"""Resumable (tus 1.0.0) transfer strategy.

Two phases against {base}/api/tus/{name}:

1. Create: POST with Upload-Length and Tus-Resumable headers, no body.
   Success 200 or 201, otherwise ErrorKind.CREATE_FAILED and phase 2 is
   never sent.
2. Patch: PATCH with Upload-Offset: 0 and Content-Type
   application/offset+octet-stream, body = the whole file streamed from
   disk. Success 200 or 204, otherwise ErrorKind.CONTENT_UPLOAD_FAILED.

Only a single contiguous patch is sent. There is no chunking and no resume
from a partial offset. A create that succeeds followed by a failed patch
leaves a zero-length or partial file on the server; it is not cleaned up.

Setting server.tus_include_dir to true targets {base}/api/tus{dir}/{name}
instead, for servers that place tus uploads under the target directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fbupload.auth.login import AUTH_HEADER
from fbupload.exceptions import MalformedResponseError, TransportError
from fbupload.io.files import file_name, remote_path
from fbupload.io.transport import Transport
from fbupload.results import ErrorKind, UploadFailure, UploadOutcome, UploadSuccess

from .base import access_url, exchange, register_strategy

TUS_VERSION = "1.0.0"
CREATE_SUCCESS_CODES = ("200", "201")
PATCH_SUCCESS_CODES = ("200", "204")


def tus_url(
    server_base_url: str, remote_dir: str, name: str, include_dir: bool = False
) -> str:
    return f"{server_base_url}/api/tus" + remote_path(
        remote_dir if include_dir else "", name, quoted=True
    )


class ResumableStrategy:
    """Upload a file with a tus create request followed by one PATCH."""

    def upload(
        self,
        server_base_url: str,
        token: str,
        local_file_path: Path,
        remote_dir: str,
        *,
        transport: Transport,
        options: dict[str, Any],
    ) -> UploadOutcome:
        name = file_name(local_file_path)
        url = tus_url(
            server_base_url,
            remote_dir,
            name,
            include_dir=bool(options.get("tus_include_dir", False)),
        )

        try:
            size = local_file_path.stat().st_size
        except OSError as err:
            return UploadFailure(
                ErrorKind.CREATE_FAILED, f"cannot stat {local_file_path}: {err}"
            )

        create_headers = {
            AUTH_HEADER: token,
            "Upload-Length": str(size),
            "Tus-Resumable": TUS_VERSION,
        }
        try:
            created = exchange(transport, "POST", url, create_headers)
        except (TransportError, MalformedResponseError) as err:
            return UploadFailure(ErrorKind.CREATE_FAILED, str(err))
        if not created.ok(CREATE_SUCCESS_CODES):
            return UploadFailure(
                ErrorKind.CREATE_FAILED,
                f"server refused to create upload for {name!r}",
                status_code=created.status_code,
            )

        patch_headers = {
            AUTH_HEADER: token,
            "Upload-Offset": "0",
            "Content-Type": "application/offset+octet-stream",
            "Tus-Resumable": TUS_VERSION,
        }
        try:
            patched = exchange(transport, "PATCH", url, patch_headers, local_file_path)
        except (TransportError, MalformedResponseError) as err:
            return UploadFailure(ErrorKind.CONTENT_UPLOAD_FAILED, str(err))
        if not patched.ok(PATCH_SUCCESS_CODES):
            return UploadFailure(
                ErrorKind.CONTENT_UPLOAD_FAILED,
                f"server rejected content of {name!r}",
                status_code=patched.status_code,
            )

        return UploadSuccess(access_url(server_base_url, remote_path(remote_dir, name)))

    def validate_config(self, options: dict[str, Any]) -> list[str]:
        value = options.get("tus_include_dir", False)
        if not isinstance(value, bool):
            return [f"server.tus_include_dir must be true or false, got {value!r}"]
        return []


register_strategy("resumable", ResumableStrategy)

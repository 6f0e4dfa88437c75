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

"""Direct transfer strategy: the whole file in a single request.

Target:
    {base}/api/resources{dir}/{name}?override=true

Modes (server.direct_mode):
    put (default)
        PUT with Content-Type application/octet-stream, body streamed
        from disk.
    multipart
        POST with a multipart/form-data body holding one "file" field,
        encoded with urllib3. The body is built in memory.

An existing file at the target path is always replaced; overwrite is
unconditional, so two uploads of the same file both succeed. Concurrent
uploads to the same path are last-writer-wins.

Success: 200, 201, or 204. Anything else, including a transport failure or
an undecodable response, is ErrorKind.UPLOAD_FAILED.

Profile Example:
    server:
      transfer: direct
      direct_mode: multipart
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from urllib3 import encode_multipart_formdata

from fbupload.auth.login import AUTH_HEADER
from fbupload.exceptions import MalformedResponseError, TransportError
from fbupload.io.files import file_name, remote_path
from fbupload.io.transport import Transport
from fbupload.results import ErrorKind, UploadFailure, UploadOutcome, UploadSuccess

from .base import access_url, exchange, register_strategy

DIRECT_MODES: tuple[str, ...] = ("put", "multipart")
SUCCESS_CODES = ("200", "201", "204")


def resources_url(server_base_url: str, remote_dir: str, name: str) -> str:
    return (
        f"{server_base_url}/api/resources"
        f"{remote_path(remote_dir, name, quoted=True)}?override=true"
    )


class DirectStrategy:
    """Upload a file with a single PUT or multipart POST."""

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
        url = resources_url(server_base_url, remote_dir, name)
        mode = options.get("direct_mode", "put")

        try:
            if mode == "multipart":
                body, content_type = encode_multipart_formdata(
                    {
                        "file": (
                            name,
                            local_file_path.read_bytes(),
                            "application/octet-stream",
                        )
                    }
                )
                headers = {AUTH_HEADER: token, "Content-Type": content_type}
                response = exchange(transport, "POST", url, headers, body)
            else:
                headers = {
                    AUTH_HEADER: token,
                    "Content-Type": "application/octet-stream",
                }
                response = exchange(transport, "PUT", url, headers, local_file_path)
        except (TransportError, MalformedResponseError) as err:
            return UploadFailure(ErrorKind.UPLOAD_FAILED, str(err))
        except OSError as err:
            return UploadFailure(
                ErrorKind.UPLOAD_FAILED, f"cannot read {local_file_path}: {err}"
            )

        if not response.ok(SUCCESS_CODES):
            return UploadFailure(
                ErrorKind.UPLOAD_FAILED,
                f"server rejected upload of {name!r}",
                status_code=response.status_code,
            )
        return UploadSuccess(access_url(server_base_url, remote_path(remote_dir, name)))

    def validate_config(self, options: dict[str, Any]) -> list[str]:
        mode = options.get("direct_mode", "put")
        if mode not in DIRECT_MODES:
            return [
                f"server.direct_mode must be one of {', '.join(DIRECT_MODES)}, "
                f"got {mode!r}"
            ]
        return []


register_strategy("direct", DirectStrategy)

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

"""HTTP transports for fbupload.

A transport performs one HTTP request and returns the raw response text:
the body followed by a write-out trailer carrying the status code, laid out
according to the transport's response convention (see io.response). Callers
never see a status code directly; they always go through decode_response().

Two backends are provided:

requests (RequestsTransport):
    Default. Talks HTTP through a requests.Session and renders the trailer
    itself, so its output decodes exactly like curl's.

curl (CurlTransport):
    Shells out to the curl binary with `-w <directive>`, for hosts where
    curl is the sanctioned HTTP client. Request headers are written to a
    temporary 0600 header file and passed as `-H @file`, and request bodies
    come from `--data-binary @path` or stdin, so neither the auth token nor
    the login password appears on the command line.

Design Notes:
    - No retries. Every request is attempted exactly once.
    - File bodies are streamed from disk, never read into memory whole.
    - Transport-level failures (connection refused, timeout, missing curl)
      raise TransportError; HTTP error statuses are NOT errors here.

Example:
    ```python
    from fbupload.io.transport import RequestsTransport

    transport = RequestsTransport(convention="marker", timeout=30)
    raw = transport.execute("GET", "https://files.example.com/health", {})
    ```
"""

from __future__ import annotations

from pathlib import Path
import subprocess
import tempfile
from typing import Any, Protocol, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from fbupload import __version__
from fbupload.exceptions import ConfigError, TransportError
from fbupload.io.response import (
    ResponseConvention,
    render_write_out,
    write_out_format,
)

__all__ = [
    "Body",
    "CurlTransport",
    "RequestsTransport",
    "Transport",
    "make_session",
    "make_transport",
]

Body = Union[bytes, Path, None]

USER_AGENT = f"fbupload/{__version__}"


class Transport(Protocol):
    """Protocol for HTTP execution primitives."""

    convention: ResponseConvention
    # True when curl -v trace lines are merged into the output.
    verbose: bool

    def execute(
        self, method: str, url: str, headers: dict[str, str], body: Body = None
    ) -> str:
        """Perform a request and return body text plus write-out trailer.

        Args:
            method: HTTP method (e.g., "POST", "PATCH").
            url: Absolute request URL.
            headers: Request headers.
            body: Raw bytes, a Path whose content is streamed, or None.

        Returns:
            Raw response text in the transport's response convention.

        Raises:
            TransportError: If the request could not be completed at all.
        """
        ...


def make_session(verify_tls: bool = True) -> requests.Session:
    """Create a requests.Session for talking to a FileBrowser server.

    Retries are disabled (total=0) so every request is issued once, and a
    User-Agent identifies fbupload in server logs.
    """
    s = requests.Session()
    no_retries = Retry(total=0, raise_on_status=False)
    s.headers.update({"User-Agent": USER_AGENT})
    s.verify = verify_tls
    s.mount("http://", HTTPAdapter(max_retries=no_retries))
    s.mount("https://", HTTPAdapter(max_retries=no_retries))
    return s


def _body_size(body: Body) -> int:
    if body is None:
        return 0
    if isinstance(body, Path):
        return body.stat().st_size
    return len(body)


class RequestsTransport:
    """Transport backed by requests."""

    def __init__(
        self,
        convention: ResponseConvention = "trailing",
        *,
        timeout: float = 60,
        verify_tls: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        write_out_format(convention)
        self.convention = convention
        self.verbose = False
        self.timeout = timeout
        self._session = session or make_session(verify_tls)

    def _send(
        self, method: str, url: str, headers: dict[str, str], data: Any
    ) -> requests.Response:
        return self._session.request(
            method, url, headers=headers, data=data, timeout=self.timeout
        )

    def execute(
        self, method: str, url: str, headers: dict[str, str], body: Body = None
    ) -> str:
        try:
            if isinstance(body, Path):
                with body.open("rb") as fh:
                    resp = self._send(method, url, headers, fh)
            else:
                resp = self._send(method, url, headers, body)
        except requests.RequestException as err:
            raise TransportError(
                f"{method} {url} failed: {type(err).__name__}"
            ) from err
        except OSError as err:
            raise TransportError(f"cannot read request body: {err}") from err

        stats = {
            "time_total": f"{resp.elapsed.total_seconds():.6f}",
            "size_upload": _body_size(body),
            "size_download": len(resp.content),
        }
        return resp.text + render_write_out(self.convention, resp.status_code, stats)

    def close(self) -> None:
        self._session.close()


class CurlTransport:
    """Transport that runs the curl binary."""

    def __init__(
        self,
        convention: ResponseConvention = "trailing",
        *,
        timeout: float = 60,
        verify_tls: bool = True,
        curl_path: str = "curl",
        verbose: bool = False,
    ) -> None:
        write_out_format(convention)
        self.convention = convention
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.curl_path = curl_path
        self.verbose = verbose

    def build_command(
        self, method: str, url: str, header_file: Path, body: Body
    ) -> list[str]:
        """Build the curl argument vector for one request."""
        cmd = [
            self.curl_path,
            "-sS",
            "-X",
            method,
            url,
            "-H",
            f"@{header_file}",
            "-w",
            write_out_format(self.convention),
            "--max-time",
            str(self.timeout),
        ]
        if not self.verify_tls:
            cmd.append("-k")
        if self.verbose:
            cmd.append("-v")
        if isinstance(body, Path):
            cmd += ["--data-binary", f"@{body}"]
        elif body is not None:
            cmd += ["--data-binary", "@-"]
        return cmd

    def execute(
        self, method: str, url: str, headers: dict[str, str], body: Body = None
    ) -> str:
        with tempfile.NamedTemporaryFile(
            "w", suffix=".headers", delete=False, encoding="utf-8"
        ) as fh:
            for name, value in headers.items():
                fh.write(f"{name}: {value}\n")
            header_file = Path(fh.name)

        cmd = self.build_command(method, url, header_file, body)
        stdin = body if isinstance(body, bytes) else None
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                stdout=subprocess.PIPE,
                # Verbose trace is interleaved with the body, as with 2>&1.
                stderr=subprocess.STDOUT if self.verbose else subprocess.PIPE,
                timeout=self.timeout + 5,
                check=False,
            )
        except FileNotFoundError as err:
            raise TransportError(f"curl executable not found: {self.curl_path}") from err
        except subprocess.TimeoutExpired as err:
            raise TransportError(
                f"{method} {url} timed out after {err.timeout}s"
            ) from err
        finally:
            header_file.unlink(missing_ok=True)

        output = result.stdout.decode("utf-8", errors="replace")
        if result.returncode != 0:
            stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            message = f"curl exited with code {result.returncode} for {method} {url}"
            if stderr:
                message += f": {stderr}"
            raise TransportError(message)
        return output


def make_transport(transport_cfg: dict[str, Any]) -> Transport:
    """Build a transport from the `transport` section of a profile.

    Args:
        transport_cfg: Mapping with backend, convention, timeout, verify_tls,
            curl_path, and curl_verbose keys.

    Returns:
        A RequestsTransport or CurlTransport.

    Raises:
        ConfigError: If the backend or convention is unknown.
    """
    backend = transport_cfg.get("backend", "requests")
    convention = transport_cfg.get("convention", "trailing")
    timeout = transport_cfg.get("timeout", 60)
    verify_tls = transport_cfg.get("verify_tls", True)

    if backend == "requests":
        return RequestsTransport(convention, timeout=timeout, verify_tls=verify_tls)
    if backend == "curl":
        return CurlTransport(
            convention,
            timeout=timeout,
            verify_tls=verify_tls,
            curl_path=transport_cfg.get("curl_path", "curl"),
            verbose=transport_cfg.get("curl_verbose", False),
        )
    raise ConfigError(
        f"Unknown transport backend: {backend!r}. Available: requests, curl"
    )

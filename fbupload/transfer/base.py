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

"""Transfer strategy protocol and registry for fbupload.

FileBrowser servers accept file content in different ways depending on
their version and configuration. Each way is a transfer strategy:

- direct: One request carrying the whole file (PUT of raw bytes, or POST
    of multipart form data).
- resumable: Two-phase tus exchange (POST create, then PATCH content).

A strategy is chosen once per deployment target from the server profile
(`server.transfer`). There is no runtime fallback from one
strategy to another.

Design Philosophy:
    - Strategies are Protocol classes (structural subtyping, not inheritance)
    - Registration happens at module import time (strategies self-register)
    - Strategies are stateless and instantiated on demand
    - upload() returns an UploadOutcome instead of raising, so every failure
      crosses the strategy boundary as a tagged result

Example:
    Implementing a custom strategy:
        ```python
        from fbupload.transfer.base import register_strategy

        class WebDavStrategy:
            def upload(self, server_base_url, token, local_file_path,
                       remote_dir, *, transport, options):
                ...

        register_strategy("webdav", WebDavStrategy)
        ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from fbupload.exceptions import ConfigError
from fbupload.io.response import RawResponse, decode_response
from fbupload.io.transport import Body, Transport
from fbupload.results import UploadOutcome

# -------------------------------
# Strategy Protocol
# -------------------------------


class TransferStrategy(Protocol):
    """Protocol for file transfer strategies."""

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
        """Transfer one local file to the server.

        Args:
            server_base_url: Server root without trailing slash.
            token: Bearer token from authenticate().
            local_file_path: Existing local file.
            remote_dir: Target directory, already normalized ("" for root).
            transport: Transport to issue requests with.
            options: The `server` section of the profile.

        Returns:
            UploadSuccess with the access URL, or UploadFailure.
        """
        ...

    def validate_config(self, options: dict[str, Any]) -> list[str]:
        """Validate strategy-specific options without network access.

        Args:
            options: The `server` section of the profile.

        Returns:
            List of error messages. Empty list if the options are valid.
        """
        ...


def exchange(
    transport: Transport,
    method: str,
    url: str,
    headers: dict[str, str],
    body: Body = None,
) -> RawResponse:
    """Execute one request and decode the reply with the transport's convention.

    Raises:
        TransportError: If the transport could not complete the request.
        MalformedResponseError: If the reply has no valid status code.
    """
    raw = transport.execute(method, url, headers, body)
    return decode_response(raw, transport.convention, verbose=transport.verbose)


def access_url(server_base_url: str, remote_file_path: str) -> str:
    """Browser URL of an uploaded file: base + "/files" + dir + "/" + name."""
    return f"{server_base_url}/files{remote_file_path}"


# -------------------------------
# Strategy Registry
# -------------------------------

_STRATEGY_REGISTRY: dict[str, type[TransferStrategy]] = {}


def register_strategy(name: str, strategy_class: type[TransferStrategy]) -> None:
    """Register a transfer strategy by name.

    Registering the same name twice overwrites the previous registration
    (allows monkey-patching for tests).

    Args:
        name: Strategy name as used in profiles under server.transfer.
        strategy_class: Class implementing the TransferStrategy protocol.
    """
    _STRATEGY_REGISTRY[name] = strategy_class


def available_strategies() -> list[str]:
    """Return registered strategy names in registration order."""
    return list(_STRATEGY_REGISTRY)


def get_strategy(name: str) -> TransferStrategy:
    """Get a new instance of a registered transfer strategy.

    Args:
        name: Strategy name (e.g., "direct"). Case-sensitive.

    Returns:
        A new strategy instance.

    Raises:
        ConfigError: If the name is not registered. The message lists the
            available strategies.
    """
    if name not in _STRATEGY_REGISTRY:
        available = ", ".join(_STRATEGY_REGISTRY.keys())
        raise ConfigError(
            f"Unknown transfer strategy: {name!r}. Available: {available or '(none)'}"
        )
    return _STRATEGY_REGISTRY[name]()
